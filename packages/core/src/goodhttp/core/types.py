"""Settings, envelope and transport value types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import TransportError

__all__ = [
    "CONTENT_TYPE",
    "EventSubscription",
    "Record",
    "Settings",
    "TransportConfig",
    "TransportRequest",
    "TransportResult",
]

# Serialization format of the envelope; always wins over user headers.
CONTENT_TYPE = "application/json"

# Producer-supplied structured value: a mapping or an attribute-bearing object.
Record = Any

# event type -> "*" | tag | [tags]
EventSubscription = dict[str, str | list[str]]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class TransportConfig(_Frozen):
    timeout_ms: int = Field(60_000, gt=0, alias="timeout")
    headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("headers", mode="before")
    @classmethod
    def _stringify_header_values(cls, v: Any) -> Any:
        # Header values like ``12345`` are accepted and sent as text.
        if isinstance(v, dict):
            return {str(k): str(val) for k, val in v.items()}
        return v


class Settings(_Frozen):
    """Immutable sink settings. Build with ``resolve_settings``."""

    endpoint: str
    threshold: int = Field(20, ge=0)
    # None means unbounded tolerance: failures are always swallowed.
    error_threshold: int | None = Field(0, ge=0, alias="errorThreshold")
    schema_tag: str = Field("good-http", alias="schema")
    group_events: bool = Field(False, alias="groupEvents")
    events: EventSubscription | None = None
    transport: TransportConfig = Field(default_factory=TransportConfig)

    @property
    def unbounded(self) -> bool:
        return self.error_threshold is None


# ---------------------------------------------------------------------------
# Transport request / result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TransportRequest:
    url: str
    body: str
    headers: dict[str, str]
    timeout_ms: int
    method: Literal["POST"] = "POST"


@dataclass(frozen=True)
class TransportResult:
    ok: bool
    response: Any = None
    error: TransportError | None = field(default=None)

    @classmethod
    def success(cls, response: Any = None) -> TransportResult:
        return cls(ok=True, response=response)

    @classmethod
    def failure(cls, error: TransportError) -> TransportResult:
        return cls(ok=False, error=error)
