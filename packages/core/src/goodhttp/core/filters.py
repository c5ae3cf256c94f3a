"""Event subscription filter applied before records reach the buffer."""

from __future__ import annotations

from .types import EventSubscription, Record
from .utils import get_field

WILDCARD = "*"


class EventFilter:
    """Accepts records whose ``event`` type (and optionally ``tags``) is subscribed.

    ``{"log": "*"}`` accepts every ``log`` record; ``{"log": ["db", "error"]}``
    accepts ``log`` records carrying at least one of those tags. A ``None``
    subscription accepts everything.
    """

    def __init__(self, subscription: EventSubscription | None = None) -> None:
        self._subscription: dict[str, frozenset[str] | None] | None = None
        if subscription is not None:
            self._subscription = {
                event: _normalise_tags(tags) for event, tags in subscription.items()
            }

    def matches(self, record: Record) -> bool:
        if self._subscription is None:
            return True
        event = get_field(record, "event")
        if event not in self._subscription:
            return False
        wanted = self._subscription[event]
        if wanted is None:
            return True
        tags = get_field(record, "tags") or ()
        if isinstance(tags, str):
            tags = (tags,)
        return not wanted.isdisjoint(tags)


def _normalise_tags(tags: str | list[str]) -> frozenset[str] | None:
    if isinstance(tags, str):
        tags = [tags]
    if not tags or WILDCARD in tags:
        return None
    return frozenset(tags)
