"""EngineManager — owns the live battle and drives it from a background thread.

Two kinds of writers touch ``BattleState``: the stepping thread and
player input arriving through the API. They serialize on one engine lock.
Readers never see the live state; they get the most recently published
``Snapshot``, swapped in under its own short lock after every mutation.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Callable

from pestilence.core.battle_state import BattleState
from pestilence.core.grid import BattleMap
from pestilence.core.levels import LEVELS, Level, load_levels
from pestilence.core.models import Cell
from pestilence.core.snapshot import Snapshot
from pestilence.engine.animation_queue import Animation, AnimationQueue
from pestilence.engine.player_input import PlayerController
from pestilence.engine.turn_loop import LevelTransition, TurnLoop
from pestilence.utils.event_log import EventLog, SimEvent

if TYPE_CHECKING:
    from pestilence.config import SimulationConfig

logger = logging.getLogger(__name__)

MIN_TICK_RATE = 0.01
MAX_TICK_RATE = 2.0


class EngineManager:
    """Battle lifecycle, player input and published state for the API.

    The stepping thread is started with ``start`` and controlled through
    ``pause``/``resume``/``step``/``stop``. Without a running thread,
    ``step`` advances the battle synchronously on the caller's thread.
    """

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config
        self._tick_rate = config.tick_rate
        self._levels: tuple[Level, ...] = (
            load_levels(config.levels_file) if config.levels_file else LEVELS
        )
        self._animations = AnimationQueue(auto_complete=config.auto_complete_animations)

        self._loop: TurnLoop | None = None
        self._controller: PlayerController | None = None
        self._transitions: list[LevelTransition] = []

        # Writers serialize on _engine_lock; readers only take _publish_lock
        self._engine_lock = threading.RLock()
        self._publish_lock = threading.Lock()
        self._published: Snapshot | None = None
        self._event_log = EventLog()

        self._thread: threading.Thread | None = None
        self._alive = threading.Event()
        self._halted = threading.Event()
        self._single_step = threading.Event()
        self._shutdown = threading.Event()

        self._load(config.start_level)

    # -- state for readers --

    @property
    def running(self) -> bool:
        return self._alive.is_set()

    @property
    def paused(self) -> bool:
        return self._halted.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, seconds: float) -> None:
        self._tick_rate = min(max(seconds, MIN_TICK_RATE), MAX_TICK_RATE)

    @property
    def levels(self) -> tuple[Level, ...]:
        return self._levels

    @property
    def animations(self) -> AnimationQueue:
        return self._animations

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def transitions(self) -> list[LevelTransition]:
        """Victories and defeats since the last reset, oldest first."""
        return list(self._transitions)

    def get_snapshot(self) -> Snapshot | None:
        with self._publish_lock:
            return self._published

    def get_grid(self) -> BattleMap | None:
        snapshot = self.get_snapshot()
        return None if snapshot is None else snapshot.grid

    def pending_animations(self) -> list[Animation]:
        return self._animations.pending()

    # -- lifecycle --

    def start(self) -> None:
        if self.running:
            return
        self._shutdown.clear()
        self._halted.clear()
        self._alive.set()
        self._thread = threading.Thread(target=self._drive, name="battle-stepper", daemon=True)
        self._thread.start()
        logger.info("Battle thread launched, one step every %.3fs", self._tick_rate)

    def pause(self) -> None:
        self._halted.set()
        logger.info("Battle paused (tick %d, round %d)", self._tick(), self._round())

    def resume(self) -> None:
        self._halted.clear()
        logger.info("Battle resumed (tick %d, round %d)", self._tick(), self._round())

    def step(self) -> None:
        """Advance exactly one step; pauses a running thread first."""
        if not self.running:
            self._halted.set()
            self._advance()
            return
        self._halted.set()
        self._single_step.set()

    def stop(self) -> None:
        self._shutdown.set()
        self._halted.clear()
        self._alive.clear()
        thread = self._thread
        if thread is not None and thread.is_alive():
            thread.join(timeout=5.0)
        self._thread = None
        logger.info("Battle thread stopped")

    def reset(self, level_id: int | None = None) -> None:
        """Stop the thread and load *level_id* (default: the configured start level) afresh."""
        self.stop()
        self._event_log.clear()
        self._transitions.clear()
        self._load(self.config.start_level if level_id is None else level_id)
        logger.info("Battle reset to level %d", self._level_id())

    # -- player input --

    def click(self, col: int, row: int) -> bool:
        return self._send(lambda ctrl: ctrl.click(Cell(col, row)))

    def infect(self) -> bool:
        return self._send(lambda ctrl: ctrl.infect())

    def end_turn(self) -> bool:
        return self._send(lambda ctrl: ctrl.end_turn())

    def complete_animations(self, count: int | None = None) -> int:
        """Acknowledge up to *count* queued animations, or all of them."""
        if count is None:
            return self._animations.complete_all()
        completed = 0
        for _ in range(count):
            if self._animations.complete_next() is None:
                break
            completed += 1
        return completed

    # -- internals --

    def _send(self, signal: Callable[[PlayerController], bool]) -> bool:
        with self._engine_lock:
            assert self._controller is not None
            accepted = signal(self._controller)
        self._publish()
        return accepted

    def _load(self, level_id: int) -> None:
        level = self._levels[level_id % len(self._levels)]
        self._animations.clear()
        with self._engine_lock:
            self._loop = TurnLoop(
                self.config, BattleState.from_level(level), self._animations, self._levels,
            )
            self._controller = PlayerController(self._loop)
        self._publish()

    def _advance(self) -> LevelTransition | None:
        assert self._loop is not None
        with self._engine_lock:
            transition = self._loop.step()
        if transition is not None:
            self._transitions.append(transition)
        self._publish()
        return transition

    def _drive(self) -> None:
        """Stepping thread: one step per tick until stopped or out of rounds."""
        assert self._loop is not None
        logger.info("Battle thread running")
        while not self._shutdown.is_set():
            single = self._single_step.is_set()
            if self._halted.is_set() and not single:
                time.sleep(MIN_TICK_RATE)
                continue
            self._single_step.clear()

            self._advance()
            if self._round() >= self.config.max_rounds:
                logger.info("Round limit %d reached at tick %d", self.config.max_rounds, self._tick())
                break
            if not single:
                time.sleep(self._tick_rate)

        self._alive.clear()
        logger.info("Battle thread finished")

    def _publish(self) -> None:
        """Publish a fresh snapshot and move pending events into the log."""
        assert self._loop is not None
        with self._engine_lock:
            snapshot = self._loop.create_snapshot()
            events: list[SimEvent] = self._loop.step_events[:]
            self._loop.step_events.clear()
            events += self._loop.context.drain_events()
        with self._publish_lock:
            self._published = snapshot
        if events:
            self._event_log.append_many(events)

    def _tick(self) -> int:
        return self._loop.state.tick if self._loop is not None else 0

    def _round(self) -> int:
        return self._loop.state.round if self._loop is not None else 0

    def _level_id(self) -> int:
        return self._loop.state.level.id if self._loop is not None else 0
