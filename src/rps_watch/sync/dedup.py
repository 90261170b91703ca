"""Bounded recency window that rejects re-delivered events."""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterator

from rps_watch.models.events import GameEvent

log = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100


class EventWindow:
    """Newest-first buffer of the last ``capacity`` admitted events.

    Only guarantees there is no duplicate identity among the events still
    in the window; older events fall off the tail and may be re-admitted.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._events: deque[GameEvent] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[GameEvent]:
        return iter(self._events)

    def __contains__(self, event: object) -> bool:
        if not isinstance(event, GameEvent):
            return False
        identity = event.identity
        return any(e.identity == identity for e in self._events)

    def admit(self, event: GameEvent) -> bool:
        """Prepend the event unless its identity is already in the window."""
        if event in self:
            log.debug("Duplicate %s event for %s at %d", event.category.value,
                      event.participant[:16], event.timestamp)
            return False
        self._events.appendleft(event)
        return True

    def events(self) -> tuple[GameEvent, ...]:
        """Snapshot of the window, newest first."""
        return tuple(self._events)

    def clear(self) -> None:
        self._events.clear()
