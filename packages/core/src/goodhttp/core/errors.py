"""Exception hierarchy for the goodhttp sink."""

from __future__ import annotations


class GoodHttpError(Exception):
    """Base class for every error raised or reported by goodhttp."""


class ConfigError(GoodHttpError, ValueError):
    """Settings could not be resolved (missing endpoint, invalid value)."""


class TransportError(GoodHttpError):
    """A flush's transport call failed.

    Never raised by the sink itself; it is handed back from ``accept`` /
    ``drain`` when the failure policy decides the producer should see it.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.cause = cause


class SinkClosedError(GoodHttpError, RuntimeError):
    """``accept`` was called after ``close``."""


class SinkBusyError(GoodHttpError, RuntimeError):
    """``accept`` or ``drain`` was called while a flush is still in flight."""
