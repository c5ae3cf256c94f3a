from .http import HttpSink, SinkState, create_http_sink
from .types import Sink

__all__ = ["HttpSink", "Sink", "SinkState", "create_http_sink"]
