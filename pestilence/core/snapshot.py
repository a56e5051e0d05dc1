"""Immutable snapshot of the battle state for API reader threads."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from pestilence.core.battle_state import BattleState
from pestilence.core.enums import ObstacleKind, Phase
from pestilence.core.grid import BattleMap
from pestilence.core.models import Cell, Combatant


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view of a battle, safe to share across threads.

    Combatants are deep-copied and exposed through MappingProxyType so
    readers cannot mutate the engine's records.
    """

    tick: int
    round: int
    level_id: int
    phase: Phase
    currency: int
    grid: BattleMap
    combatants: Mapping[int, Combatant]
    positions: Mapping[int, Cell]
    obstacles: Mapping[Cell, ObstacleKind]
    turn_order: tuple[int, ...]
    selected_id: int | None
    move_overlay: tuple[Cell, ...]
    attack_overlay: Mapping[Cell, tuple[int, int]]
    facing_overlay: tuple[Cell, ...]
    end_turn_requested: bool

    @classmethod
    def from_state(cls, state: BattleState) -> Snapshot:
        sel = state.selection
        return cls(
            tick=state.tick,
            round=state.round,
            level_id=state.level.id,
            phase=state.phase,
            currency=state.currency,
            grid=state.grid,  # immutable for the life of a level
            combatants=MappingProxyType({uid: u.copy() for uid, u in state.combatants.items()}),
            positions=MappingProxyType(dict(state.positions)),
            obstacles=MappingProxyType(dict(state.obstacles)),
            turn_order=tuple(state.turn_order),
            selected_id=sel.unit_id,
            move_overlay=tuple(sorted(sel.moves)),
            attack_overlay=MappingProxyType(dict(sel.attacks)),
            facing_overlay=tuple(sel.facings),
            end_turn_requested=state.end_turn_requested,
        )

    def infected_count(self) -> int:
        return sum(1 for u in self.combatants.values() if u.infected)

    def host_count(self) -> int:
        return sum(1 for u in self.combatants.values() if not u.infected)
