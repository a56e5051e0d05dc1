"""Battle event feed shared between the engine and API readers."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Iterable

EVENT_CATEGORIES = ("phase", "movement", "combat", "death", "infection", "level")


@dataclass(frozen=True, slots=True)
class SimEvent:
    """One line of the battle feed, stamped with the tick it happened on."""

    tick: int
    category: str       # one of EVENT_CATEGORIES
    message: str
    entity_ids: tuple[int, ...] = ()


class EventLog:
    """Bounded, lock-guarded feed. The oldest events fall off once *capacity* is reached."""

    __slots__ = ("_events", "_lock")

    def __init__(self, capacity: int | None = 5000) -> None:
        self._events: deque[SimEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def append_many(self, events: Iterable[SimEvent]) -> None:
        with self._lock:
            self._events.extend(events)

    def since_tick(self, tick: int, category: str | None = None) -> list[SimEvent]:
        """Events stamped at or after *tick*, optionally of one *category* only."""
        with self._lock:
            events = list(self._events)
        return [
            e for e in events
            if e.tick >= tick and (category is None or e.category == category)
        ]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
