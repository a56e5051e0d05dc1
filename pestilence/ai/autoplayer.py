"""Demo player for headless battles.

Plays the Parasites phase through the same ``PlayerController`` a human
would use: infect the cheapest affordable hosts, walk each infected unit
to a cell with something to hit, strike the weakest host in reach.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pestilence.core.models import Cell, Combatant
from pestilence.engine.player_input import PlayerController
from pestilence.systems.ranges import threatened_cells

if TYPE_CHECKING:
    from pestilence.core.battle_state import BattleState
    from pestilence.engine.turn_loop import TurnLoop

logger = logging.getLogger(__name__)


def _hosts_hit(state: BattleState, unit: Combatant, origin: Cell) -> int:
    occupancy = state.occupancy.without(unit.id)
    lines = threatened_cells(unit, origin, state.grid, occupancy, state.obstacles)
    return sum(
        1
        for line in lines
        for cell in line
        if not state.combatants[occupancy[cell]].infected
    )


def _nearest_host_distance(state: BattleState, cell: Cell) -> int:
    distances = [cell.chebyshev(state.position(u.id)) for u in state.host_units()]
    return min(distances, default=0)


def choose_move(state: BattleState, unit: Combatant, moves: set[Cell]) -> Cell | None:
    """Best move cell: most hosts in reach, then closest to a host."""
    if not moves:
        return None
    return max(
        sorted(moves),
        key=lambda cell: (_hosts_hit(state, unit, cell), -_nearest_host_distance(state, cell)),
    )


def choose_strike(state: BattleState, attacks: dict[Cell, tuple[int, int]]) -> Cell | None:
    """Weakest host among the highlighted cells."""
    targets = [
        (state.unit_at(cell), cell)
        for cell in sorted(attacks)
        if state.unit_at(cell) is not None and not state.unit_at(cell).infected
    ]
    if not targets:
        return None
    _, cell = min(targets, key=lambda item: (item[0].health, item[0].id))
    return cell


class AutoPlayer:
    """Plays one Parasites turn per call."""

    __slots__ = ("_controller",)

    def __init__(self, loop: TurnLoop) -> None:
        self._controller = PlayerController(loop)

    def __call__(self, loop: TurnLoop) -> None:
        self.play_turn(loop)

    def play_turn(self, loop: TurnLoop) -> None:
        ctrl = self._controller
        state = loop.state
        self._infect_affordable(loop)

        for unit in state.infected_units():
            if unit.id not in state.combatants or unit.has_attacked:
                continue
            ctrl.click(state.position(unit.id))

            sel = state.selection
            if sel.moves:
                ctrl.click(choose_move(state, unit, sel.moves))
                loop.animations.complete_all()

            if unit.id in state.combatants and state.selection.attacks:
                target = choose_strike(state, state.selection.attacks)
                if target is not None:
                    ctrl.click(target)
                    loop.animations.complete_all()

        state.selection.clear()
        ctrl.end_turn()

    def _infect_affordable(self, loop: TurnLoop) -> None:
        ctrl = self._controller
        state = loop.state
        while True:
            candidates = sorted(
                (u for u in state.host_units() if u.infection_cost <= state.currency),
                key=lambda u: (u.infection_cost, u.id),
            )
            if not candidates:
                return
            target = candidates[0]
            ctrl.click(state.position(target.id))
            if not ctrl.infect():
                return
            logger.debug("Autoplayer infected unit %d", target.id)
