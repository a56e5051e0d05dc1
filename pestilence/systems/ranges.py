"""Range calculus — legal moves, threatened cells and attack positions.

Every query is a pure function of a unit, an origin cell and a snapshot of
the board (terrain grid, occupancy mapping, obstacle mapping). Walks go
outward one vector at a time; the first blocking step ends that vector,
so nothing ever jumps over a blocker. Off-map and terrain-blocked steps are
reported as "nothing here", never as errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from pestilence.core.models import Cell, Combatant, Vector

if TYPE_CHECKING:
    from pestilence.core.enums import ObstacleKind
    from pestilence.core.grid import BattleMap

Occupancy = Mapping[Cell, int]
Obstacles = Mapping[Cell, "ObstacleKind"]


def _step(grid: BattleMap, origin: Cell, vector: Vector, dist: int) -> Cell | None:
    """Cell *dist* steps along *vector*, or None when it leaves the map or hits void terrain."""
    cell = origin.offset(vector, dist)
    if cell is None or not grid.is_passable(cell):
        return None
    return cell


def legal_moves(
    unit: Combatant,
    origin: Cell,
    grid: BattleMap,
    occupancy: Occupancy,
    obstacles: Obstacles,
) -> set[Cell]:
    """Cells *unit* can move to from *origin* in one move."""
    moves: set[Cell] = set()
    for vector in unit.move_geometry.vectors:
        for dist in range(1, unit.speed + 1):
            cell = _step(grid, origin, vector, dist)
            if cell is None or cell in occupancy or cell in obstacles:
                break
            moves.add(cell)
    return moves


def threatened_cells(
    unit: Combatant,
    origin: Cell,
    grid: BattleMap,
    occupancy: Occupancy,
    obstacles: Obstacles,
) -> list[list[Cell]]:
    """Occupied cells *unit* can strike from *origin*, grouped by attack vector.

    Index ``[i][j]`` is the j-th hit along the i-th vector of the unit's
    attack geometry. Single-target patterns hold at most one hit per vector.
    """
    pattern = unit.attack_pattern
    attacks: list[list[Cell]] = []
    for vector in pattern.geometry.vectors:
        hits: list[Cell] = []
        for dist in range(1, unit.range + 1):
            cell = _step(grid, origin, vector, dist)
            if cell is None or cell in obstacles:
                break
            if cell in occupancy:
                hits.append(cell)
                if not pattern.aoe:
                    break
        attacks.append(hits)
    return attacks


def attack_positions_along_facing(
    unit: Combatant,
    facing: Vector,
    origin: Cell,
    grid: BattleMap,
    occupancy: Occupancy,
    obstacles: Obstacles,
) -> list[Cell]:
    """Every cell a pre-selected *facing* covers, empty or occupied."""
    positions: list[Cell] = []
    for dist in range(1, unit.range + 1):
        cell = _step(grid, origin, facing, dist)
        if cell is None or cell in obstacles:
            break
        positions.append(cell)
        if cell in occupancy and not unit.attack_pattern.aoe:
            break
    return positions


def reverse_threat_from_target(
    attacker: Combatant,
    target: Cell,
    grid: BattleMap,
    occupancy: Occupancy,
    obstacles: Obstacles,
) -> list[list[Cell]]:
    """Cells from which *attacker* could strike *target*, grouped by vector.

    Walks the attacker's attack geometry outward from the target. Any
    combatant other than the attacker blocks the line. Each vector's list
    is reversed, so the cell farthest from the target (the longest-range
    firing position) comes first.
    """
    positions: list[list[Cell]] = []
    for vector in attacker.attack_pattern.geometry.vectors:
        line: list[Cell] = []
        for dist in range(1, attacker.range + 1):
            cell = _step(grid, target, vector, dist)
            if cell is None or cell in obstacles:
                break
            holder = occupancy.get(cell)
            if holder is not None and holder != attacker.id:
                break
            line.append(cell)
        line.reverse()
        positions.append(line)
    return positions
