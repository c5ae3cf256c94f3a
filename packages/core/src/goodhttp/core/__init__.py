"""goodhttp-core: buffered HTTP event sink for observability pipelines."""

from .envelope import Envelope, build_envelope, group_events, serialize_envelope
from .errors import (
    ConfigError,
    GoodHttpError,
    SinkBusyError,
    SinkClosedError,
    TransportError,
)
from .filters import EventFilter
from .policy import Disposition, resolve_failure, resolve_success
from .settings import ENDPOINT_ENV_VAR, resolve_settings
from .sinks import HttpSink, Sink, SinkState, create_http_sink
from .transport import HttpxTransport, Transport
from .types import (
    CONTENT_TYPE,
    EventSubscription,
    Record,
    Settings,
    TransportConfig,
    TransportRequest,
    TransportResult,
)
from .utils import CIRCULAR_MARKER, DEPTH_MARKER, UNSERIALIZABLE_MARKER, safe_stringify

__all__ = [
    # settings
    "CONTENT_TYPE",
    "ENDPOINT_ENV_VAR",
    "EventSubscription",
    "Settings",
    "TransportConfig",
    "resolve_settings",
    # errors
    "ConfigError",
    "GoodHttpError",
    "SinkBusyError",
    "SinkClosedError",
    "TransportError",
    # envelope / serialization
    "CIRCULAR_MARKER",
    "DEPTH_MARKER",
    "UNSERIALIZABLE_MARKER",
    "Envelope",
    "Record",
    "build_envelope",
    "group_events",
    "safe_stringify",
    "serialize_envelope",
    # policy
    "Disposition",
    "resolve_failure",
    "resolve_success",
    # transport
    "HttpxTransport",
    "Transport",
    "TransportRequest",
    "TransportResult",
    # sinks
    "EventFilter",
    "HttpSink",
    "Sink",
    "SinkState",
    "create_http_sink",
]
