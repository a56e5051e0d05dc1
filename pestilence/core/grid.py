"""Grid / map system."""

from __future__ import annotations

from typing import Sequence

from pestilence.core.errors import LevelConfigError
from pestilence.core.models import Cell

TILE_SIZE = 64  # pixels per tile in the presentation layer


class BattleMap:
    """Static terrain grid for one battle. Code 0 is impassable, anything else is floor."""

    __slots__ = ("width", "height", "_rows")

    def __init__(self, tiles: Sequence[Sequence[int]]) -> None:
        if not tiles or not tiles[0]:
            raise LevelConfigError("Tilemap must have at least one row and one column")
        width = len(tiles[0])
        rows: list[tuple[int, ...]] = []
        for j, row in enumerate(tiles):
            if len(row) != width:
                raise LevelConfigError(f"Tilemap row {j} has {len(row)} tiles, expected {width}")
            if any(code < 0 for code in row):
                raise LevelConfigError(f"Tilemap row {j} contains a negative terrain code")
            rows.append(tuple(int(code) for code in row))
        self.width = width
        self.height = len(rows)
        self._rows = tuple(rows)

    # -- access --

    def in_bounds(self, cell: Cell) -> bool:
        return cell.col < self.width and cell.row < self.height

    def terrain(self, cell: Cell) -> int:
        if not self.in_bounds(cell):
            return 0
        return self._rows[cell.row][cell.col]

    def is_passable(self, cell: Cell) -> bool:
        return self.terrain(cell) != 0

    def rows(self) -> tuple[tuple[int, ...], ...]:
        return self._rows

    def passable_cells(self) -> list[Cell]:
        return [
            Cell(i, j)
            for j, row in enumerate(self._rows)
            for i, code in enumerate(row)
            if code != 0
        ]

    # -- presentation --

    def offset(self) -> tuple[float, float]:
        """Pixel offset that centres the map on the origin."""
        offset_x = self.width / 2.0 * TILE_SIZE - TILE_SIZE / 2
        offset_y = self.height / 2.0 * TILE_SIZE - TILE_SIZE / 2
        return offset_x, offset_y
