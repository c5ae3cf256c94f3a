"""Failure/retry policy: what a resolved flush does to the buffer and the caller.

Three regimes, selected by ``error_threshold``:

- ``0``: fail fast. Any failure drops the batch and is reported.
- ``N > 0``: bounded retry. Up to ``N`` consecutive failures keep the batch
  buffered for the next flush; the next failure drops it and is reported.
- ``None``: unbounded tolerance. Failures drop the batch and are never
  reported.

A success always clears the buffer and resets the counter.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import TransportError


@dataclass(frozen=True)
class Disposition:
    clear_buffer: bool
    failures: int
    error: TransportError | None = None


def resolve_success() -> Disposition:
    return Disposition(clear_buffer=True, failures=0)


def resolve_failure(
    error_threshold: int | None,
    failures: int,
    error: TransportError,
) -> Disposition:
    """Decide the disposition of a failed flush.

    ``failures`` is the consecutive failure count *before* this failure.
    """
    if error_threshold is None:
        return Disposition(clear_buffer=True, failures=0)
    if failures < error_threshold:
        return Disposition(clear_buffer=False, failures=failures + 1)
    return Disposition(clear_buffer=True, failures=0, error=error)
