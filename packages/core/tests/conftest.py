import asyncio
import json
from typing import Any, Dict, List

import pytest

from goodhttp.core import TransportError, TransportRequest, TransportResult


class RecordingTransport:
    """In-memory transport; ``outcomes`` is a queue of True (ok) / False (fail)."""

    def __init__(self, outcomes: List[bool] | None = None) -> None:
        self.requests: List[TransportRequest] = []
        self._outcomes = list(outcomes or [])

    async def send(self, request: TransportRequest) -> TransportResult:
        self.requests.append(request)
        ok = self._outcomes.pop(0) if self._outcomes else True
        if ok:
            return TransportResult.success()
        return TransportResult.failure(TransportError("HTTP 503", status_code=503))

    @property
    def payloads(self) -> List[Dict[str, Any]]:
        return [json.loads(r.body) for r in self.requests]

    def batch_ids(self, index: int) -> List[int]:
        return [e["id"] for e in self.payloads[index]["events"]]


class BlockingTransport(RecordingTransport):
    """Holds every send until ``release`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()

    async def send(self, request: TransportRequest) -> TransportResult:
        self.requests.append(request)
        await self.release.wait()
        return TransportResult.success()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def make_transport():
    return RecordingTransport


@pytest.fixture(autouse=True)
def _no_endpoint_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GOOD_HTTP_ENDPOINT", raising=False)


def log_record(i: int, event: str = "log", **extra: Any) -> Dict[str, Any]:
    return {"id": i, "value": f"this is data for item {i}", "event": event, **extra}


@pytest.fixture
def records():
    return log_record


@pytest.fixture
def blocking_transport() -> BlockingTransport:
    return BlockingTransport()
