"""Envelope assembly: host identity, schema tag, timestamp and the batch."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .types import Record, Settings
from .utils import get_field, now_ms, safe_stringify

UNKNOWN_EVENT = "unknown"


class Envelope(BaseModel):
    """Outbound payload for one transport call."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    host: str
    schema_tag: str = Field(alias="schema")
    timestamp: int = Field(alias="timeStamp")
    # Flat list in accept order, or event type -> list sorted by timestamp.
    events: Any

    def to_payload(self) -> dict[str, Any]:
        """Return the wire-shaped mapping (records are not copied)."""
        return {
            "host": self.host,
            "schema": self.schema_tag,
            "timeStamp": self.timestamp,
            "events": self.events,
        }


def group_events(batch: Sequence[Record]) -> dict[str, list[Record]]:
    """Partition ``batch`` by ``event`` type, each bucket stably sorted by timestamp."""
    grouped: dict[str, list[Record]] = {}
    for record in batch:
        event = get_field(record, "event")
        grouped.setdefault(UNKNOWN_EVENT if event is None else str(event), []).append(record)
    for bucket in grouped.values():
        # list.sort is stable, so equal timestamps keep accept order.
        bucket.sort(key=_timestamp)
    return grouped


def build_envelope(
    batch: Sequence[Record],
    settings: Settings,
    host: str,
    now: int | None = None,
) -> Envelope:
    events: Any = group_events(batch) if settings.group_events else list(batch)
    return Envelope(
        host=host,
        schema_tag=settings.schema_tag,
        timestamp=now_ms() if now is None else now,
        events=events,
    )


def serialize_envelope(envelope: Envelope) -> str:
    return safe_stringify(envelope.to_payload())


def _timestamp(record: Record) -> float:
    ts = get_field(record, "timestamp")
    if isinstance(ts, bool) or not isinstance(ts, (int, float)):
        return 0
    return ts
