"""Cell occupancy index for O(1) "who stands here" lookups."""

from __future__ import annotations

from typing import Iterator, Mapping

from pestilence.core.models import Cell


class CellIndex(Mapping[Cell, int]):
    """Maps each occupied cell to the id of the combatant standing on it.

    Maintained incrementally by ``BattleState``; read as a plain mapping by
    the range and path queries.
    """

    __slots__ = ("_cells",)

    def __init__(self) -> None:
        self._cells: dict[Cell, int] = {}

    def insert(self, unit_id: int, cell: Cell) -> None:
        holder = self._cells.get(cell)
        if holder is not None and holder != unit_id:
            raise ValueError(f"Cell {cell} already holds unit {holder}")
        self._cells[cell] = unit_id

    def remove(self, unit_id: int, cell: Cell) -> None:
        if self._cells.get(cell) == unit_id:
            del self._cells[cell]

    def move(self, unit_id: int, old_cell: Cell, new_cell: Cell) -> None:
        if old_cell == new_cell:
            return
        self.insert(unit_id, new_cell)
        self.remove(unit_id, old_cell)

    def without(self, unit_id: int) -> dict[Cell, int]:
        """Plain-dict copy with *unit_id* left out."""
        return {cell: uid for cell, uid in self._cells.items() if uid != unit_id}

    def clear(self) -> None:
        self._cells.clear()

    # -- Mapping protocol --

    def __getitem__(self, cell: Cell) -> int:
        return self._cells[cell]

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)
