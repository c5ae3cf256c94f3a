"""HTTP event sink: threshold batching with a failure-tolerant flush."""

from __future__ import annotations

import asyncio
import enum
import logging
import socket
from collections.abc import Mapping
from typing import Any

from .._sync import LoopRunner
from ..envelope import build_envelope, serialize_envelope
from ..errors import SinkBusyError, SinkClosedError, TransportError
from ..filters import EventFilter
from ..policy import Disposition, resolve_failure, resolve_success
from ..settings import resolve_settings
from ..transport import HttpxTransport, Transport
from ..types import Record, Settings, TransportRequest, TransportResult
from .types import Sink

logger = logging.getLogger("goodhttp")


class SinkState(str, enum.Enum):
    IDLE = "idle"
    FLUSHING = "flushing"
    CLOSED = "closed"


class HttpSink(Sink):
    """Buffers records and posts them as one envelope per ``threshold`` records.

    Single producer: a caller must await each ``accept`` before issuing the
    next one. What happens when a flush fails is governed by
    ``settings.error_threshold`` (see ``goodhttp.core.policy``).
    """

    def __init__(
        self,
        settings: Settings,
        transport: Transport | None = None,
        host: str | None = None,
    ) -> None:
        self._settings = settings
        self._transport: Transport = transport or HttpxTransport()
        self._host = host or socket.gethostname()
        self._filter = EventFilter(settings.events)

        self._buffer: list[Record] = []
        self._failures = 0
        self._state = SinkState.IDLE
        self._flush_done: asyncio.Event | None = None
        self._runner = LoopRunner()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def host(self) -> str:
        return self._host

    @property
    def state(self) -> SinkState:
        return self._state

    @property
    def pending(self) -> int:
        return len(self._buffer)

    @property
    def failures(self) -> int:
        return self._failures

    # ------------------------------------------------------------------
    # Sink interface
    # ------------------------------------------------------------------

    async def accept(self, record: Record) -> TransportError | None:
        """Buffer ``record``; flush when the buffer reaches the threshold.

        Returns the ``TransportError`` the failure policy chose to report, or
        ``None``. Raises ``SinkClosedError`` after ``close``.
        """
        self._check_accepting()
        if not self._filter.matches(record):
            return None

        self._buffer.append(record)
        if len(self._buffer) >= self._settings.threshold:
            return await self._flush()
        return None

    async def drain(self) -> TransportError | None:
        """Flush whatever is buffered now, regardless of the threshold."""
        self._check_accepting()
        if not self._buffer:
            return None
        return await self._flush()

    async def close(self) -> None:
        """Wait for an in-flight flush, send the remainder, and close.

        The outcome of the final flush is logged, never reported.
        """
        # Another close may start the final flush while we wait; wait on it too.
        while self._flush_done is not None:
            await self._flush_done.wait()
        if self._state is SinkState.CLOSED:
            return

        try:
            if self._buffer:
                error = await self._flush()
                if error is not None:
                    logger.error("[GoodHttp] Final flush on close failed: %s", error)
                elif self._buffer:
                    logger.error(
                        "[GoodHttp] Final flush on close failed; dropping %d records",
                        len(self._buffer),
                    )
        finally:
            self._buffer.clear()
            self._failures = 0
            self._state = SinkState.CLOSED

    # ------------------------------------------------------------------
    # Sync wrappers
    # ------------------------------------------------------------------

    def accept_sync(self, record: Record) -> TransportError | None:
        return self._runner.run(self.accept(record))

    def drain_sync(self) -> TransportError | None:
        return self._runner.run(self.drain())

    def close_sync(self) -> None:
        try:
            self._runner.run(self.close())
        finally:
            self._runner.close()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _check_accepting(self) -> None:
        if self._state is SinkState.CLOSED:
            raise SinkClosedError("sink is closed")
        if self._state is SinkState.FLUSHING:
            raise SinkBusyError("a flush is already in flight; await the previous accept")

    async def _flush(self) -> TransportError | None:
        self._state = SinkState.FLUSHING
        self._flush_done = asyncio.Event()
        try:
            batch = list(self._buffer)
            try:
                request = self._build_request(batch)
            except Exception as exc:
                # Resolved through the failure policy so the buffer never jams.
                result = TransportResult.failure(
                    TransportError(
                        f"could not build envelope: {type(exc).__name__}: {exc}", cause=exc
                    )
                )
            else:
                logger.debug(
                    "[GoodHttp] Flushing %d records to %s", len(batch), self._settings.endpoint
                )
                result = await self._send(request)

            if result.ok:
                disposition = resolve_success()
            else:
                error = result.error or TransportError("transport reported failure")
                disposition = resolve_failure(
                    self._settings.error_threshold, self._failures, error
                )
                self._log_failure(disposition, error, len(batch))
            self._apply(disposition)
            return disposition.error
        finally:
            self._state = SinkState.IDLE
            self._flush_done.set()
            self._flush_done = None

    def _build_request(self, batch: list[Record]) -> TransportRequest:
        envelope = build_envelope(batch, self._settings, self._host)
        return TransportRequest(
            url=self._settings.endpoint,
            body=serialize_envelope(envelope),
            headers=dict(self._settings.transport.headers),
            timeout_ms=self._settings.transport.timeout_ms,
        )

    async def _send(self, request: TransportRequest) -> TransportResult:
        try:
            return await self._transport.send(request)
        except Exception as exc:
            # A transport that raises is treated like one that reported failure.
            return TransportResult.failure(
                TransportError(f"transport raised {type(exc).__name__}: {exc}", cause=exc)
            )

    def _apply(self, disposition: Disposition) -> None:
        if disposition.clear_buffer:
            self._buffer.clear()
        self._failures = disposition.failures

    def _log_failure(self, disposition: Disposition, error: TransportError, size: int) -> None:
        if not disposition.clear_buffer:
            logger.warning(
                "[GoodHttp] Flush failed (%d/%s tolerated), keeping %d records: %s",
                disposition.failures,
                self._settings.error_threshold,
                size,
                error,
            )
        elif disposition.error is not None:
            logger.error("[GoodHttp] Flush failed, dropping %d records: %s", size, error)
        else:
            logger.debug("[GoodHttp] Flush failed, dropping %d records silently: %s", size, error)


def create_http_sink(
    endpoint: str | None = None,
    *,
    transport: Transport | None = None,
    host: str | None = None,
    config: Mapping[str, Any] | None = None,
    **overrides: Any,
) -> HttpSink:
    """Factory: resolve settings from ``config`` and keyword overrides."""
    merged = {**(config or {}), **overrides}
    return HttpSink(resolve_settings(endpoint, merged), transport=transport, host=host)
