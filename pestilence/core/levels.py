"""Level configuration — static battle definitions consumed at level load.

A level is a tilemap, an ordered roster of ``(UnitKind, Cell)`` pairs, an
ordered list of ``(ObstacleKind, Cell)`` pairs and a starting currency.
The two built-in levels ship with the engine; ``load_levels`` reads the
same schema from JSON:

    {"levels": [{"id": 0,
                 "tilemap": [[0, 1, 1], [1, 1, 1]],
                 "units": [["Assault", [1, 0]]],
                 "obstacles": [["Wall", [2, 1]]],
                 "initial_currency": 4}]}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from pestilence.core.enums import ObstacleKind, UnitKind
from pestilence.core.errors import LevelConfigError
from pestilence.core.grid import BattleMap
from pestilence.core.models import Cell
from pestilence.core.units import kind_priority

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Level:
    """One battle definition. Immutable; the id doubles as its index in the level list."""

    id: int
    tilemap: tuple[tuple[int, ...], ...]
    units: tuple[tuple[UnitKind, Cell], ...] = ()
    obstacles: tuple[tuple[ObstacleKind, Cell], ...] = ()
    initial_currency: int = 0

    def dimensions(self) -> tuple[int, int]:
        return len(self.tilemap[0]), len(self.tilemap)

    def battle_map(self) -> BattleMap:
        return BattleMap(self.tilemap)

    def offset(self) -> tuple[float, float]:
        return self.battle_map().offset()


def turn_order(level: Level) -> list[int]:
    """Roster indices sorted by kind priority, then column, then row."""
    indexed = list(enumerate(level.units))
    indexed.sort(key=lambda item: (kind_priority(item[1][0]), item[1][1].col, item[1][1].row))
    return [uid for uid, _ in indexed]


def _parse_rows(rows: Sequence[str]) -> tuple[tuple[int, ...], ...]:
    return tuple(tuple(int(ch) for ch in row) for row in rows)


def _diamond(size: int) -> tuple[tuple[int, ...], ...]:
    mid = size // 2
    return tuple(
        tuple(1 if abs(col - mid) + abs(row - mid) <= mid else 0 for col in range(size))
        for row in range(size)
    )


# ---------------------------------------------------------------------------
# Built-in levels
# ---------------------------------------------------------------------------

_LEVEL_0 = Level(
    id=0,
    tilemap=_parse_rows([
        "000111000000000000000",
        "011111110000000000000",
        "111111111111110000000",
        "111111111111111100000",
        "111111111111111110000",
        "111111111111111111000",
        "111111111111111111000",
        "011111110011111111100",
        "000111000000111111100",
        "000000000000011111100",
        "000000000000011111100",
        "000000000000001111100",
        "000000000000001111100",
        "000000000000011111110",
        "000000000000011111110",
        "000000000000111111111",
        "000000000000111111111",
        "000000000000111111111",
        "000000000000011111110",
        "000000000000011111110",
        "000000000000001111100",
    ]),
    units=(
        (UnitKind.ASSAULT, Cell(5, 3)),
        (UnitKind.ASSAULT, Cell(5, 5)),
        (UnitKind.ASSAULT, Cell(13, 13)),
        (UnitKind.SCOUT, Cell(10, 4)),
        (UnitKind.SCOUT, Cell(17, 18)),
        (UnitKind.SCOUT, Cell(15, 18)),
        (UnitKind.SNIPER, Cell(15, 3)),
        (UnitKind.SNIPER, Cell(15, 5)),
        (UnitKind.BALLISTIC, Cell(4, 8)),
        (UnitKind.BALLISTIC, Cell(12, 2)),
        (UnitKind.JUGGERNAUT, Cell(13, 7)),
        (UnitKind.JUGGERNAUT, Cell(17, 11)),
        (UnitKind.HEAVY, Cell(16, 10)),
        (UnitKind.COMMANDER, Cell(3, 4)),
        (UnitKind.COMMANDER, Cell(16, 16)),
    ),
    obstacles=tuple((ObstacleKind.WALL, Cell(c, r)) for c, r in (
        (4, 3), (4, 4), (4, 5), (8, 3), (8, 5), (12, 3), (13, 3), (11, 5),
        (14, 6), (15, 6), (16, 8), (15, 10), (15, 16), (15, 15), (16, 15),
    )),
    initial_currency=4,
)

_LEVEL_1 = Level(
    id=1,
    tilemap=_diamond(21),
    units=(
        (UnitKind.ASSAULT, Cell(8, 8)),
        (UnitKind.ASSAULT, Cell(8, 12)),
        (UnitKind.ASSAULT, Cell(12, 8)),
        (UnitKind.ASSAULT, Cell(12, 12)),
        (UnitKind.SCOUT, Cell(5, 5)),
        (UnitKind.SCOUT, Cell(5, 15)),
        (UnitKind.SCOUT, Cell(15, 5)),
        (UnitKind.SCOUT, Cell(15, 15)),
        (UnitKind.SNIPER, Cell(6, 6)),
        (UnitKind.SNIPER, Cell(6, 14)),
        (UnitKind.SNIPER, Cell(14, 6)),
        (UnitKind.SNIPER, Cell(14, 14)),
        (UnitKind.BALLISTIC, Cell(10, 6)),
        (UnitKind.BALLISTIC, Cell(10, 14)),
        (UnitKind.JUGGERNAUT, Cell(6, 10)),
        (UnitKind.JUGGERNAUT, Cell(14, 10)),
        (UnitKind.HEAVY, Cell(10, 10)),
        (UnitKind.COMMANDER, Cell(10, 2)),
        (UnitKind.COMMANDER, Cell(2, 10)),
        (UnitKind.COMMANDER, Cell(10, 18)),
        (UnitKind.COMMANDER, Cell(18, 10)),
    ),
    obstacles=tuple((ObstacleKind.WALL, Cell(c, r)) for c, r in (
        (8, 10), (10, 8), (12, 10), (10, 12), (7, 7), (7, 13), (13, 7), (13, 13),
        (4, 8), (16, 8), (4, 12), (8, 4), (12, 4), (8, 16), (12, 16),
        (16, 12), (3, 10), (10, 3), (10, 17), (17, 10),
    )),
    initial_currency=6,
)

LEVELS: tuple[Level, ...] = (_LEVEL_0, _LEVEL_1)


# ---------------------------------------------------------------------------
# JSON loading
# ---------------------------------------------------------------------------

def _cell(raw: Any, where: str) -> Cell:
    try:
        col, row = raw
        return Cell(int(col), int(row))
    except (TypeError, ValueError) as exc:
        raise LevelConfigError(f"{where}: invalid cell {raw!r}") from exc


def _entries(data: dict[str, Any], key: str, where: str) -> list[Any]:
    raw = data.get(key, [])
    if not isinstance(raw, list):
        raise LevelConfigError(f"{where}: '{key}' must be a list, got {type(raw).__name__}")
    return raw


def level_from_dict(data: dict[str, Any]) -> Level:
    """Build a Level from its JSON form, validating the schema."""
    try:
        level_id = int(data["id"])
        raw_tiles = data["tilemap"]
    except (KeyError, TypeError, ValueError) as exc:
        raise LevelConfigError(f"Level is missing 'id' or 'tilemap': {exc}") from exc

    where = f"level {level_id}"
    try:
        tilemap = tuple(tuple(int(code) for code in row) for row in raw_tiles)
    except (TypeError, ValueError) as exc:
        raise LevelConfigError(f"{where}: tilemap must be a list of integer rows") from exc
    battle_map = BattleMap(tilemap)  # validates shape

    units: list[tuple[UnitKind, Cell]] = []
    for entry in _entries(data, "units", where):
        try:
            label, raw_cell = entry
            kind = UnitKind.from_label(str(label))
        except (KeyError, TypeError, ValueError) as exc:
            raise LevelConfigError(f"{where}: invalid unit entry {entry!r}") from exc
        cell = _cell(raw_cell, where)
        if not battle_map.in_bounds(cell):
            raise LevelConfigError(f"{where}: unit {kind.label} placed off-map at {cell}")
        units.append((kind, cell))

    occupied = [cell for _, cell in units]
    if len(set(occupied)) != len(occupied):
        raise LevelConfigError(f"{where}: two units share a starting cell")

    obstacles: list[tuple[ObstacleKind, Cell]] = []
    seen: set[Cell] = set()
    for entry in _entries(data, "obstacles", where):
        try:
            label, raw_cell = entry
            kind = ObstacleKind.from_label(str(label))
        except (KeyError, TypeError, ValueError) as exc:
            raise LevelConfigError(f"{where}: invalid obstacle entry {entry!r}") from exc
        cell = _cell(raw_cell, where)
        if not battle_map.in_bounds(cell):
            raise LevelConfigError(f"{where}: obstacle {kind.name} placed off-map at {cell}")
        if cell in occupied:
            raise LevelConfigError(f"{where}: obstacle {kind.name} blocks a unit at {cell}")
        if cell in seen:
            continue
        seen.add(cell)
        obstacles.append((kind, cell))

    try:
        currency = int(data.get("initial_currency", 0))
    except (TypeError, ValueError) as exc:
        raise LevelConfigError(f"{where}: initial_currency must be an integer") from exc
    if currency < 0:
        raise LevelConfigError(f"{where}: initial_currency must be non-negative")

    return Level(
        id=level_id,
        tilemap=tilemap,
        units=tuple(units),
        obstacles=tuple(obstacles),
        initial_currency=currency,
    )


def load_levels(path: str | Path) -> tuple[Level, ...]:
    """Read a level list from a JSON file. Level ids must match their list position."""
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise LevelConfigError(f"Cannot read level file {path}: {exc}") from exc

    raw_levels = payload.get("levels") if isinstance(payload, dict) else None
    if not raw_levels:
        raise LevelConfigError(f"{path}: expected a non-empty 'levels' list")

    levels = tuple(level_from_dict(raw) for raw in raw_levels)
    for index, level in enumerate(levels):
        if level.id != index:
            raise LevelConfigError(f"{path}: level at position {index} has id {level.id}")
    logger.info("Loaded %d levels from %s", len(levels), path)
    return levels
