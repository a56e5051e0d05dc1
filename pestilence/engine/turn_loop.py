"""TurnLoop — the authoritative phase machine.

Phase cycle:
  1. HumansMove — host units approach infected units and choose facings
  2. Parasites — the player moves, strikes and infects until the turn ends
  3. HumansAttack — host units fire along their chosen facings

Every call to ``step`` is a complete no-op while the presentation layer
still has animations to play. Once the board has settled the outcome is
evaluated: an all-infected board advances to the next level, an all-host
board with nothing affordable restarts the current one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence

from pestilence.actions.base import ActionContext
from pestilence.actions.combat import resolve_host_attacks
from pestilence.ai.pathfinding import Pathfinder
from pestilence.ai.targeting import choose_attack_facings, plan_host_moves
from pestilence.core.battle_state import BattleState
from pestilence.core.enums import Phase
from pestilence.core.levels import LEVELS
from pestilence.core.snapshot import Snapshot
from pestilence.utils.event_log import SimEvent

if TYPE_CHECKING:
    from pestilence.config import SimulationConfig
    from pestilence.core.levels import Level
    from pestilence.engine.animation_queue import AnimationQueue
    from pestilence.utils.replay import ReplayRecorder

logger = logging.getLogger(__name__)

VICTORY = "victory"
DEFEAT = "defeat"


@dataclass(frozen=True, slots=True)
class LevelTransition:
    """Request to load *level_id*: the next level on victory, the same one on defeat."""

    level_id: int
    reason: str


def evaluate_outcome(state: BattleState, level_count: int) -> LevelTransition | None:
    """Victory when only infected units remain, defeat when only hosts remain and none is affordable.

    A board with no combatants left counts as a victory.
    """
    units = state.combatants.values()
    if all(u.infected for u in units):
        return LevelTransition((state.level.id + 1) % level_count, VICTORY)
    if all(not u.infected for u in units) and not state.any_affordable():
        return LevelTransition(state.level.id, DEFEAT)
    return None


class TurnLoop:
    """The heartbeat of a battle.

    Owns the ``BattleState`` and mutates it one phase per settled step.
    Player input goes through ``PlayerController``, which shares this
    loop's action context.
    """

    __slots__ = (
        "_config",
        "_state",
        "_animations",
        "_levels",
        "_recorder",
        "_pathfinder",
        "_ctx",
        "_step_events",
    )

    def __init__(
        self,
        config: SimulationConfig,
        state: BattleState,
        animations: AnimationQueue,
        levels: Sequence[Level] = LEVELS,
        recorder: ReplayRecorder | None = None,
    ) -> None:
        if not levels:
            raise ValueError("TurnLoop needs at least one level")
        self._config = config
        self._levels = tuple(levels)
        self._animations = animations
        self._recorder = recorder
        self._step_events: list[SimEvent] = []
        self._state = state
        self._pathfinder = Pathfinder(state.grid, state.obstacles, config.pathfinding_heuristic)
        self._ctx = ActionContext(state, animations)

    # -- accessors --

    @property
    def state(self) -> BattleState:
        return self._state

    @property
    def animations(self) -> AnimationQueue:
        return self._animations

    @property
    def context(self) -> ActionContext:
        return self._ctx

    @property
    def levels(self) -> tuple[Level, ...]:
        return self._levels

    @property
    def step_events(self) -> list[SimEvent]:
        """Events emitted during the most recent step, player input included."""
        return self._step_events

    def create_snapshot(self) -> Snapshot:
        return Snapshot.from_state(self._state)

    def is_idle(self, presentation_idle: bool | None = None) -> bool:
        if presentation_idle is None:
            return not self._animations.busy
        return presentation_idle and not self._animations.busy

    # -- stepping --

    def step(self, presentation_idle: bool | None = None) -> LevelTransition | None:
        """Run one settled step. Returns the level transition if the battle ended.

        A transition is applied before returning, so ``state`` already
        refers to the freshly loaded level.
        """
        if not self.is_idle(presentation_idle):
            return None

        state = self._state
        transition = evaluate_outcome(state, len(self._levels))
        if transition is None:
            match state.phase:
                case Phase.HUMANS_MOVE:
                    self._humans_move()
                case Phase.PARASITES:
                    self._parasites()
                case Phase.HUMANS_ATTACK:
                    self._humans_attack()
            state.tick += 1
            if self.is_idle(presentation_idle):
                transition = evaluate_outcome(state, len(self._levels))

        self._step_events = self._ctx.drain_events()
        if self._recorder is not None:
            self._recorder.record_step(state, self._step_events)
        if transition is not None:
            self.change_level(transition)
        return transition

    def run(
        self,
        player: Callable[[TurnLoop], None] | None = None,
        max_rounds: int | None = None,
    ) -> list[LevelTransition]:
        """Play headless for *max_rounds* rounds, acknowledging animations as they come.

        *player* is called once per Parasites step; without one the player
        turn is ended immediately.
        """
        limit = self._config.max_rounds if max_rounds is None else max_rounds
        transitions: list[LevelTransition] = []
        played = 0
        logger.info("=== Battle started (level %d) ===", self._state.level.id)
        while played < limit:
            self._animations.complete_all()
            before = self._state.round
            if self._state.phase == Phase.PARASITES:
                if player is not None:
                    player(self)
                    self._animations.complete_all()
                self._state.end_turn_requested = True
            transition = self.step()
            if transition is not None:
                transitions.append(transition)
                played += 1
            elif self._state.round != before:
                played += 1
        self._animations.complete_all()
        logger.info("=== Battle stopped after %d rounds (%d level changes) ===", played, len(transitions))
        return transitions

    def change_level(self, transition: LevelTransition) -> None:
        """Tear down the current battle and load ``transition.level_id``."""
        level = self._levels[transition.level_id % len(self._levels)]
        old = self._state
        logger.info(
            "Level %d %s after %d rounds -> loading level %d",
            old.level.id, transition.reason, old.round, level.id,
        )
        self._animations.clear()
        self._install(BattleState.from_level(level))
        self._step_events.append(self._event(
            "level", f"Level {old.level.id} {transition.reason}; loading level {level.id}",
        ))

    def reset(self, level_id: int | None = None) -> None:
        """Reload *level_id* (default: the current level) from scratch."""
        target = self._state.level.id if level_id is None else level_id
        self._animations.clear()
        self._install(BattleState.from_level(self._levels[target % len(self._levels)]))

    def _install(self, state: BattleState) -> None:
        self._state = state
        self._pathfinder = Pathfinder(state.grid, state.obstacles, self._config.pathfinding_heuristic)
        self._ctx = ActionContext(state, self._animations)

    def _event(self, category: str, message: str) -> SimEvent:
        return SimEvent(tick=self._state.tick, category=category, message=message)

    def _advance(self) -> None:
        state = self._state
        old = state.phase
        state.phase = old.next()
        logger.info("Round %d: %s -> %s", state.round, old.name, state.phase.name)
        self._ctx.emit("phase", f"{old.name} -> {state.phase.name}")

    # -- phase handlers --

    def _humans_move(self) -> None:
        state = self._state
        if not state.infected_units():
            self._advance()
            return
        moved = plan_host_moves(self._ctx, self._pathfinder)
        choose_attack_facings(state)
        logger.debug("HumansMove: %d host units moved", moved)
        self._advance()

    def _parasites(self) -> None:
        state = self._state
        infected = state.infected_units()
        exhausted = all(u.has_attacked for u in infected) and not state.any_affordable()
        if not (state.end_turn_requested or exhausted):
            return

        state.end_turn_requested = False
        state.selection.clear()
        # Both factions start the next cycle with fresh flags
        for unit in state.combatants.values():
            unit.reset_round()
        self._advance()

    def _humans_attack(self) -> None:
        hits = resolve_host_attacks(self._ctx)
        logger.debug("HumansAttack: %d hits", hits)
        self._state.round += 1
        self._advance()
