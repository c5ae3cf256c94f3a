"""Transport capability and its httpx implementation."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import httpx

from .errors import TransportError
from .types import TransportRequest, TransportResult

logger = logging.getLogger("goodhttp")


@runtime_checkable
class Transport(Protocol):
    """Sends one request. Must return a result rather than raise."""

    async def send(self, request: TransportRequest) -> TransportResult: ...


class HttpxTransport:
    """Posts envelopes with ``httpx.AsyncClient``.

    Network errors and non-2xx responses are returned as failed results. The
    response body is never examined.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        # Injected transport lets tests swap in ``httpx.MockTransport``.
        self._transport = transport

    async def send(self, request: TransportRequest) -> TransportResult:
        try:
            async with httpx.AsyncClient(
                timeout=request.timeout_ms / 1000,
                transport=self._transport,
            ) as client:
                resp = await client.request(
                    request.method,
                    request.url,
                    content=request.body,
                    headers=request.headers,
                )
        except httpx.HTTPError as exc:
            logger.debug("[GoodHttp] Transport error for %s: %s", request.url, exc)
            return TransportResult.failure(
                TransportError(f"{type(exc).__name__}: {exc}", cause=exc)
            )

        if not resp.is_success:
            return TransportResult.failure(
                TransportError(f"HTTP {resp.status_code}", status_code=resp.status_code)
            )
        return TransportResult.success(resp)
