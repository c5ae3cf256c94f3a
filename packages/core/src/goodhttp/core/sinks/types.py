"""Sink base class."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..errors import TransportError
from ..types import Record


class Sink(ABC):
    """A sink receives records one at a time and forwards them somewhere.

    ``accept`` is the backpressure point: it does not return until any flush
    it triggered has resolved. ``drain`` is a no-op by default.
    """

    @abstractmethod
    async def accept(self, record: Record) -> TransportError | None:
        """Buffer one record; may flush. Returns a failure the caller should see."""

    async def drain(self) -> TransportError | None:
        """Flush pending records without closing."""
        return None

    @abstractmethod
    async def close(self) -> None:
        """Flush pending records (best effort) and refuse further input."""
