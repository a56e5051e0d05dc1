"""A* pathfinding over whole-move steps.

An edge in the search graph is one legal move as computed by
``legal_moves`` (a straight run of up to ``speed`` tiles along one of the
unit's movement vectors), so the path cost is the number of rounds of
movement needed to reach the goal.

Usage:
    pf = Pathfinder(grid, obstacles)
    result = pf.find_path(unit, start, goal, occupancy)   # PathResult or None
    first_waypoint = result.path[0]
"""

from __future__ import annotations

import heapq
import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Mapping

from pestilence.core.errors import PathInvariantError
from pestilence.core.models import Cell, Combatant
from pestilence.systems.ranges import legal_moves

if TYPE_CHECKING:
    from pestilence.core.enums import ObstacleKind
    from pestilence.core.grid import BattleMap

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Heuristics
# ---------------------------------------------------------------------------
# "euclidean" truncates the straight-line tile distance to an integer. It
# ignores that one move covers up to ``speed`` tiles, so it can overestimate
# the remaining move count and the search may settle on a longer path.
# "admissible" divides Chebyshev distance by speed and rounds up, which never
# overestimates for any movement geometry.

Heuristic = Callable[[Combatant, Cell, Cell], int]


def euclidean_heuristic(unit: Combatant, cell: Cell, goal: Cell) -> int:
    return int(cell.euclidean(goal))


def admissible_heuristic(unit: Combatant, cell: Cell, goal: Cell) -> int:
    return math.ceil(cell.chebyshev(goal) / max(unit.speed, 1))


HEURISTICS: dict[str, Heuristic] = {
    "euclidean": euclidean_heuristic,
    "admissible": admissible_heuristic,
}


@dataclass(frozen=True, slots=True)
class PathResult:
    """Cells after the start up to and including the goal, plus the move count."""

    path: list[Cell] = field(default_factory=list)
    cost: int = 0


# ---------------------------------------------------------------------------
# A* Pathfinder
# ---------------------------------------------------------------------------

class Pathfinder:
    """A* pathfinder bound to one battle's terrain and obstacles."""

    __slots__ = ("_grid", "_obstacles", "_heuristic")

    def __init__(
        self,
        grid: BattleMap,
        obstacles: Mapping[Cell, ObstacleKind],
        heuristic: str = "euclidean",
    ) -> None:
        if heuristic not in HEURISTICS:
            raise ValueError(f"Unknown heuristic {heuristic!r}; expected one of {sorted(HEURISTICS)}")
        self._grid = grid
        self._obstacles = obstacles
        self._heuristic = HEURISTICS[heuristic]

    def find_path(
        self,
        unit: Combatant,
        start: Cell,
        goal: Cell,
        occupancy: Mapping[Cell, int],
    ) -> PathResult | None:
        """Shortest sequence of moves taking *unit* from *start* to *goal*.

        Returns None when the goal is unreachable. *occupancy* maps cells to
        unit ids; the unit's own entry is ignored, since it vacates its cell
        as soon as it moves.
        """
        if start == goal:
            return PathResult([], 0)

        occ = {cell: uid for cell, uid in occupancy.items() if uid != unit.id}
        if goal in occ or goal in self._obstacles or not self._grid.is_passable(goal):
            return None

        grid = self._grid
        obstacles = self._obstacles
        h = self._heuristic

        # Frontier entries: (priority, col, row); ties pop in ascending (col, row)
        frontier: list[tuple[int, int, int]] = [(0, start.col, start.row)]
        costs: dict[Cell, int] = {start: 0}
        came_from: dict[Cell, Cell] = {}

        while frontier:
            _, col, row = heapq.heappop(frontier)
            current = Cell(col, row)
            if current == goal:
                break

            new_cost = costs[current] + 1
            for nxt in sorted(legal_moves(unit, current, grid, occ, obstacles)):
                if nxt not in costs or new_cost < costs[nxt]:
                    costs[nxt] = new_cost
                    came_from[nxt] = current
                    heapq.heappush(frontier, (new_cost + h(unit, nxt, goal), nxt.col, nxt.row))

        if goal not in costs:
            return None
        # A predecessor may improve after the goal was recorded, so the
        # unwound chain can be shorter than costs[goal]; report the chain.
        path = self._reconstruct(came_from, start, goal)
        return PathResult(path, len(path))

    @staticmethod
    def _reconstruct(came_from: dict[Cell, Cell], start: Cell, goal: Cell) -> list[Cell]:
        """Walk back through came_from to build the path."""
        path: list[Cell] = []
        current = goal
        while current != start:
            path.append(current)
            prev = came_from.get(current)
            if prev is None:
                raise PathInvariantError(f"Predecessor chain from {goal} breaks at {current} before reaching {start}")
            current = prev
        path.reverse()
        return path
