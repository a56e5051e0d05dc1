"""Player input — discretized cell clicks, infection and end-turn signals.

Input is only honoured during the Parasites phase while the presentation
layer is idle. Everything else is a logged no-op; callers get ``False``
back rather than an exception.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pestilence.actions.combat import resolve_player_strike
from pestilence.actions.infect import infect_unit
from pestilence.actions.move import move_overlay, move_unit, show_attacks
from pestilence.core.enums import Phase
from pestilence.core.models import Cell, Combatant
from pestilence.systems.ranges import attack_positions_along_facing

if TYPE_CHECKING:
    from pestilence.core.battle_state import BattleState
    from pestilence.engine.turn_loop import TurnLoop

logger = logging.getLogger(__name__)


class PlayerController:
    """Translates player signals into actions on a ``TurnLoop``'s battle."""

    __slots__ = ("_loop",)

    def __init__(self, loop: TurnLoop) -> None:
        self._loop = loop

    @property
    def state(self) -> BattleState:
        return self._loop.state

    def accepting_input(self) -> bool:
        return self.state.phase == Phase.PARASITES and not self._loop.animations.busy

    def click(self, cell: Cell) -> bool:
        """Primary action released over *cell*."""
        if not self.accepting_input():
            logger.debug("Click at %s ignored (phase %s)", cell, self.state.phase.name)
            return False

        state = self.state
        sel = state.selection
        unit = state.combatants.get(sel.unit_id) if sel.unit_id is not None else None
        if unit is not None and unit.infected:
            ctx = self._loop.context
            if cell in sel.moves:
                return move_unit(ctx, unit, cell)
            if cell in sel.attacks:
                return resolve_player_strike(ctx, unit, cell)

        self._select(state.unit_at(cell))
        return True

    def _select(self, unit: Combatant | None) -> None:
        state = self.state
        sel = state.selection
        sel.clear()
        if unit is None:
            return

        sel.unit_id = unit.id
        if unit.infected:
            if unit.has_attacked:
                return
            if not unit.has_moved:
                sel.moves = move_overlay(state, unit)
            else:
                show_attacks(state, unit)
            return

        origin = state.position(unit.id)
        for facing in unit.attack_facings or ():
            sel.facings.extend(attack_positions_along_facing(
                unit, facing, origin, state.grid, state.occupancy, state.obstacles,
            ))

    def infect(self) -> bool:
        """Convert the selected host unit if the currency pool covers it."""
        if not self.accepting_input():
            logger.debug("Infect ignored (phase %s)", self.state.phase.name)
            return False
        state = self.state
        unit_id = state.selection.unit_id
        unit = state.combatants.get(unit_id) if unit_id is not None else None
        if unit is None or not infect_unit(self._loop.context, unit):
            logger.debug("Infect rejected for selection %s (currency %d)", unit_id, state.currency)
            return False
        return True

    def end_turn(self) -> bool:
        if not self.accepting_input():
            logger.debug("End turn ignored (phase %s)", self.state.phase.name)
            return False
        self.state.end_turn_requested = True
        return True
