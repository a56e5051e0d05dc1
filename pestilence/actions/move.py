"""Player movement of an infected unit."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pestilence.core.models import Cell, Combatant
from pestilence.systems.ranges import legal_moves, threatened_cells

if TYPE_CHECKING:
    from pestilence.actions.base import ActionContext
    from pestilence.core.battle_state import BattleState

logger = logging.getLogger(__name__)


def move_overlay(state: BattleState, unit: Combatant) -> set[Cell]:
    return legal_moves(unit, state.position(unit.id), state.grid, state.occupancy, state.obstacles)


def attack_overlay(state: BattleState, unit: Combatant) -> dict[Cell, tuple[int, int]]:
    """Threatened cells keyed by cell, valued by (vector index, rank)."""
    overlay: dict[Cell, tuple[int, int]] = {}
    lines = threatened_cells(unit, state.position(unit.id), state.grid, state.occupancy, state.obstacles)
    for i, line in enumerate(lines):
        for j, cell in enumerate(line):
            overlay[cell] = (i, j)
    return overlay


def show_attacks(state: BattleState, unit: Combatant) -> None:
    """Fill the attack overlay; a unit with nothing to strike forfeits its attack."""
    sel = state.selection
    sel.attacks = attack_overlay(state, unit)
    if not sel.attacks:
        unit.has_attacked = True


def move_unit(ctx: ActionContext, unit: Combatant, goal: Cell) -> bool:
    """Move *unit* to a highlighted move cell and switch the overlay to attacks."""
    state = ctx.state
    sel = state.selection
    if goal not in sel.moves:
        return False

    start = state.position(unit.id)
    state.move(unit.id, goal)
    unit.has_moved = True
    sel.clear_overlays()
    ctx.animations.move(unit.id, start, goal)
    ctx.emit("movement", f"{unit.kind.label} #{unit.id} moves {start} -> {goal}", (unit.id,))
    show_attacks(state, unit)
    return True
