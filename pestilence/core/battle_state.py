"""Mutable authoritative battle state — only mutated by the TurnLoop and its handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pestilence.core.enums import ObstacleKind, Phase
from pestilence.core.grid import BattleMap
from pestilence.core.levels import Level, turn_order
from pestilence.core.models import Cell, Combatant
from pestilence.core.units import make_combatant
from pestilence.core.occupancy import CellIndex

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Selection:
    """Player selection plus the overlays rendered for it."""

    unit_id: int | None = None
    moves: set[Cell] = field(default_factory=set)
    # cell -> (vector index, rank within vector)
    attacks: dict[Cell, tuple[int, int]] = field(default_factory=dict)
    facings: list[Cell] = field(default_factory=list)

    def clear_overlays(self) -> None:
        self.moves = set()
        self.attacks = {}
        self.facings = []

    def clear(self) -> None:
        self.unit_id = None
        self.clear_overlays()


class BattleState:
    """The single source of truth for one battle."""

    __slots__ = (
        "level", "grid", "combatants", "positions", "occupancy", "obstacles",
        "currency", "phase", "turn_order", "selection", "end_turn_requested",
        "round", "tick",
    )

    def __init__(self, level: Level, grid: BattleMap) -> None:
        self.level: Level = level
        self.grid: BattleMap = grid
        self.combatants: dict[int, Combatant] = {}
        self.positions: dict[int, Cell] = {}
        self.occupancy: CellIndex = CellIndex()
        self.obstacles: dict[Cell, ObstacleKind] = {}
        self.currency: int = level.initial_currency
        self.phase: Phase = Phase.HUMANS_MOVE
        self.turn_order: list[int] = []
        self.selection: Selection = Selection()
        self.end_turn_requested: bool = False
        self.round: int = 0
        self.tick: int = 0

    @classmethod
    def from_level(cls, level: Level) -> BattleState:
        """Instantiate roster, obstacles and turn order for *level*."""
        state = cls(level, level.battle_map())
        for kind, cell in level.obstacles:
            state.obstacles[cell] = kind
        for unit_id, (kind, cell) in enumerate(level.units):
            state.add(make_combatant(kind, unit_id), cell)
        state.turn_order = turn_order(level)
        logger.info(
            "Level %d loaded: %dx%d, %d units, %d obstacles, currency %d",
            level.id, state.grid.width, state.grid.height,
            len(state.combatants), len(state.obstacles), state.currency,
        )
        return state

    # -- roster --

    def add(self, unit: Combatant, cell: Cell) -> None:
        self.combatants[unit.id] = unit
        self.positions[unit.id] = cell
        self.occupancy.insert(unit.id, cell)

    def remove(self, unit_id: int) -> Combatant | None:
        unit = self.combatants.pop(unit_id, None)
        if unit is not None:
            cell = self.positions.pop(unit_id)
            self.occupancy.remove(unit_id, cell)
            if self.selection.unit_id == unit_id:
                self.selection.clear()
        return unit

    def move(self, unit_id: int, cell: Cell) -> None:
        old = self.positions[unit_id]
        self.occupancy.move(unit_id, old, cell)
        self.positions[unit_id] = cell

    # -- queries --

    def position(self, unit_id: int) -> Cell:
        return self.positions[unit_id]

    def unit_at(self, cell: Cell) -> Combatant | None:
        uid = self.occupancy.get(cell)
        return self.combatants[uid] if uid is not None else None

    def infected_units(self) -> list[Combatant]:
        return [u for _, u in sorted(self.combatants.items()) if u.infected]

    def host_units(self) -> list[Combatant]:
        return [u for _, u in sorted(self.combatants.items()) if not u.infected]

    def in_turn_order(self) -> list[Combatant]:
        """Living combatants in the fixed turn order computed at load."""
        return [self.combatants[uid] for uid in self.turn_order if uid in self.combatants]

    def any_affordable(self) -> bool:
        return any(u.infection_cost <= self.currency for u in self.combatants.values())
