"""Host planning for the HumansMove phase.

Each host unit, in turn order, walks towards the cheapest cell from which
it could strike an infected unit, then picks the facing it will attack
along during HumansAttack.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pestilence.core.models import Cell, Combatant, Vector
from pestilence.systems.ranges import reverse_threat_from_target

if TYPE_CHECKING:
    from pestilence.actions.base import ActionContext
    from pestilence.ai.pathfinding import Pathfinder, PathResult
    from pestilence.core.battle_state import BattleState

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Movement
# ---------------------------------------------------------------------------

def approach_candidates(state: BattleState, unit: Combatant) -> list[Cell]:
    """Cells from which *unit* could strike some infected unit.

    Ordered by infected id, then attack-vector order, then the order
    ``reverse_threat_from_target`` lists them in.
    """
    candidates: list[Cell] = []
    for target in state.infected_units():
        lines = reverse_threat_from_target(
            unit, state.position(target.id), state.grid, state.occupancy, state.obstacles,
        )
        for line in lines:
            candidates.extend(line)
    return candidates


def best_approach(
    state: BattleState,
    unit: Combatant,
    pathfinder: Pathfinder,
) -> PathResult | None:
    """Cheapest reachable approach path for *unit*; the first one found wins ties."""
    start = state.position(unit.id)
    best: PathResult | None = None
    for cell in approach_candidates(state, unit):
        result = pathfinder.find_path(unit, start, cell, state.occupancy)
        if result is None:
            continue
        if best is None or result.cost < best.cost:
            best = result
            if best.cost == 0:
                break
    return best


def plan_host_moves(ctx: ActionContext, pathfinder: Pathfinder) -> int:
    """Move every host unit one step along its best approach. Returns the number of moves."""
    state = ctx.state
    moved = 0
    for unit in state.in_turn_order():
        if unit.infected:
            continue
        best = best_approach(state, unit, pathfinder)
        if best is None:
            logger.debug("Unit %d has no reachable approach", unit.id)
            continue
        if best.cost == 0:
            logger.debug("Unit %d already in position", unit.id)
            continue

        start = state.position(unit.id)
        waypoint = best.path[0]
        state.move(unit.id, waypoint)
        ctx.animations.move(unit.id, start, waypoint)
        ctx.emit(
            "movement",
            f"{unit.kind.label} #{unit.id} advances {start} -> {waypoint} ({best.cost} to go)",
            (unit.id,),
        )
        moved += 1
    return moved


# ---------------------------------------------------------------------------
# Facing selection
# ---------------------------------------------------------------------------

def _axis_match(delta: int, step: int) -> bool:
    return (delta < 0 and step == -1) or (delta > 0 and step == 1) or (delta == 0 and step == 0)


def facing_score(origin: Cell, facing: Vector, targets: list[Cell]) -> int:
    """One point per axis on which *facing* points the same way as each target."""
    score = 0
    for cell in targets:
        if _axis_match(cell.col - origin.col, facing[0]):
            score += 1
        if _axis_match(cell.row - origin.row, facing[1]):
            score += 1
    return score


def _scan_facing(state: BattleState, unit: Combatant, origin: Cell, facing: Vector) -> str:
    """Classify *facing* as "forced", "valid" or "blocked"."""
    for dist in range(1, unit.range + 1):
        cell = origin.offset(facing, dist)
        if cell is None:
            break
        if cell in state.obstacles:
            return "blocked" if dist == 1 else "valid"
        other = state.unit_at(cell)
        if other is not None:
            return "forced" if other.infected else "blocked"
    return "valid"


def select_facings(state: BattleState, unit: Combatant) -> list[Vector] | None:
    pattern = unit.attack_pattern
    vectors = pattern.geometry.vectors
    if pattern.aoe and pattern.all_directions:
        return list(vectors)

    origin = state.position(unit.id)
    valid: list[Vector] = []
    for facing in vectors:
        verdict = _scan_facing(state, unit, origin, facing)
        if verdict == "forced":
            return [facing]
        if verdict == "valid":
            valid.append(facing)
    if not valid:
        return None

    targets = [state.position(u.id) for u in state.infected_units()]
    # max() keeps the first of equal scores, so ties go to declaration order
    return [max(valid, key=lambda facing: facing_score(origin, facing, targets))]


def choose_attack_facings(state: BattleState) -> None:
    """Reset and recompute the attack facings of every host unit."""
    for unit in state.host_units():
        unit.attack_facings = select_facings(state, unit)
        logger.debug("Unit %d facings: %s", unit.id, unit.attack_facings)
