"""Settings resolution: user configuration overlaid onto fixed defaults."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .errors import ConfigError
from .types import CONTENT_TYPE, Settings, TransportConfig

ENDPOINT_ENV_VAR = "GOOD_HTTP_ENDPOINT"


def resolve_settings(
    endpoint: str | None = None,
    config: Mapping[str, Any] | None = None,
) -> Settings:
    """Build an immutable ``Settings`` from an endpoint and partial config.

    The endpoint is taken from the argument, then ``config["endpoint"]``, then
    the ``GOOD_HTTP_ENDPOINT`` environment variable. Keys may use snake_case or
    the wire camelCase (``errorThreshold``, ``groupEvents``).

    Raises ``ConfigError`` when no endpoint resolves or a value is invalid.
    """
    overrides = dict(config or {})
    config_endpoint = overrides.pop("endpoint", None)
    resolved = endpoint or config_endpoint or os.environ.get(ENDPOINT_ENV_VAR)
    if not resolved or not isinstance(resolved, str) or not resolved.strip():
        raise ConfigError("endpoint must be a non-empty string")

    transport = overrides.pop("transport", None)
    try:
        transport_config = _resolve_transport(transport)
        return Settings(endpoint=resolved.strip(), transport=transport_config, **overrides)
    except ValidationError as exc:
        raise ConfigError(f"invalid sink configuration: {exc}") from exc


def _resolve_transport(transport: Mapping[str, Any] | TransportConfig | None) -> TransportConfig:
    if isinstance(transport, TransportConfig):
        base = transport.model_dump()
    else:
        base = dict(transport or {})
    config = TransportConfig.model_validate(base)

    # The content type belongs to the envelope format, not to the caller.
    headers = {k: v for k, v in config.headers.items() if k.lower() != "content-type"}
    headers["content-type"] = CONTENT_TYPE
    return config.model_copy(update={"headers": headers})
