"""Presentation queue connecting the rules engine to whatever plays animations.

The engine appends intents; the presentation layer consumes them and
acknowledges each one when its animation has finished. While anything is
pending the queue reports ``busy`` and every phase-mutating call in the
engine is a no-op.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass

from pestilence.core.enums import AnimationKind
from pestilence.core.models import Cell

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Animation:
    """One queued presentation intent. Moves carry their start and goal cells."""

    kind: AnimationKind
    unit_id: int
    start: Cell | None = None
    goal: Cell | None = None

    def __repr__(self) -> str:
        if self.kind == AnimationKind.MOVE:
            return f"Animation(MOVE unit={self.unit_id}, {self.start} -> {self.goal})"
        return f"Animation({self.kind.name} unit={self.unit_id})"


class AnimationQueue:
    """FIFO of pending animations.

    With ``auto_complete`` set, pushes are acknowledged immediately; headless
    runs and tests use that to play without a presentation layer.
    """

    __slots__ = ("_queue", "_lock", "auto_complete", "_played")

    def __init__(self, auto_complete: bool = False) -> None:
        self._queue: deque[Animation] = deque()
        self._lock = threading.Lock()
        self.auto_complete = auto_complete
        self._played: int = 0

    def push(self, animation: Animation) -> None:
        with self._lock:
            if not self.auto_complete:
                self._queue.append(animation)
                return
            self._played += 1
        logger.debug("Auto-completed %r", animation)

    def move(self, unit_id: int, start: Cell, goal: Cell) -> None:
        self.push(Animation(AnimationKind.MOVE, unit_id, start, goal))

    def attack(self, unit_id: int) -> None:
        self.push(Animation(AnimationKind.ATTACK, unit_id))

    def death(self, unit_id: int) -> None:
        self.push(Animation(AnimationKind.DEATH, unit_id))

    @property
    def busy(self) -> bool:
        with self._lock:
            return bool(self._queue)

    @property
    def played(self) -> int:
        """Number of animations acknowledged so far."""
        with self._lock:
            return self._played

    def pending(self) -> list[Animation]:
        with self._lock:
            return list(self._queue)

    def complete_next(self) -> Animation | None:
        """Acknowledge the oldest pending animation."""
        with self._lock:
            if not self._queue:
                return None
            self._played += 1
            return self._queue.popleft()

    def complete_all(self) -> int:
        with self._lock:
            count = len(self._queue)
            self._queue.clear()
            self._played += count
            return count

    def clear(self) -> None:
        """Drop pending work without counting it as played (level teardown)."""
        with self._lock:
            self._queue.clear()
