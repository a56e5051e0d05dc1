"""Tests for level definitions, JSON loading and battle setup."""

import sys
import os
import json

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pestilence.core.battle_state import BattleState
from pestilence.core.enums import ObstacleKind, Phase, UnitKind
from pestilence.core.errors import LevelConfigError
from pestilence.core.levels import LEVELS, level_from_dict, load_levels, turn_order
from pestilence.core.models import Cell
from tests.helpers.battle_arena import make_level


def _level_dict(**overrides):
    data = {
        "id": 0,
        "tilemap": [[1, 1, 1], [1, 0, 1]],
        "units": [["Assault", [0, 0]], ["scout", [2, 1]]],
        "obstacles": [["Wall", [1, 0]]],
        "initial_currency": 4,
    }
    data.update(overrides)
    return data


class TestBuiltinLevels:
    def test_ids_match_positions(self):
        assert [level.id for level in LEVELS] == list(range(len(LEVELS)))

    @pytest.mark.parametrize("level", LEVELS, ids=lambda lv: f"level{lv.id}")
    def test_units_stand_on_free_floor(self, level):
        grid = level.battle_map()
        walls = {cell for _, cell in level.obstacles}
        cells = [cell for _, cell in level.units]
        assert len(set(cells)) == len(cells)
        for cell in cells:
            assert grid.is_passable(cell)
            assert cell not in walls

    def test_second_level_is_a_diamond(self):
        grid = LEVELS[1].battle_map()
        assert (grid.width, grid.height) == (21, 21)
        assert grid.is_passable(Cell(10, 0))
        assert not grid.is_passable(Cell(0, 0))

    def test_setup_places_every_unit(self):
        state = BattleState.from_level(LEVELS[0])
        assert len(state.combatants) == len(LEVELS[0].units)
        assert state.currency == LEVELS[0].initial_currency
        assert state.phase == Phase.HUMANS_MOVE
        assert not any(u.infected for u in state.combatants.values())
        for uid, (kind, cell) in enumerate(LEVELS[0].units):
            assert state.combatants[uid].kind == kind
            assert state.occupancy[cell] == uid


class TestTurnOrder:
    def test_priority_then_column_then_row(self):
        level = make_level(units=[
            (UnitKind.HEAVY, (0, 0)),
            (UnitKind.ASSAULT, (3, 4)),
            (UnitKind.COMMANDER, (7, 5)),
            (UnitKind.ASSAULT, (3, 1)),
            (UnitKind.SCOUT, (6, 0)),
            (UnitKind.ASSAULT, (1, 5)),
        ])
        assert turn_order(level) == [2, 4, 5, 3, 1, 0]

    def test_soldier_shares_assault_rank(self):
        level = make_level(units=[(UnitKind.ASSAULT, (4, 0)), (UnitKind.SOLDIER, (2, 0))])
        assert turn_order(level) == [1, 0]


class TestLevelFromDict:
    def test_parses_full_entry(self):
        level = level_from_dict(_level_dict())
        assert level.id == 0
        assert level.tilemap == ((1, 1, 1), (1, 0, 1))
        assert level.units == ((UnitKind.ASSAULT, Cell(0, 0)), (UnitKind.SCOUT, Cell(2, 1)))
        assert level.obstacles == ((ObstacleKind.WALL, Cell(1, 0)),)
        assert level.initial_currency == 4

    def test_duplicate_obstacles_collapse(self):
        level = level_from_dict(_level_dict(obstacles=[["Wall", [1, 0]], ["Boulder", [1, 0]]]))
        assert level.obstacles == ((ObstacleKind.WALL, Cell(1, 0)),)

    def test_shared_unit_cell_rejected(self):
        with pytest.raises(LevelConfigError):
            level_from_dict(_level_dict(units=[["Assault", [0, 0]], ["Heavy", [0, 0]]]))

    def test_unknown_unit_rejected(self):
        with pytest.raises(LevelConfigError):
            level_from_dict(_level_dict(units=[["Dragon", [0, 0]]]))

    def test_off_map_unit_rejected(self):
        with pytest.raises(LevelConfigError):
            level_from_dict(_level_dict(units=[["Assault", [5, 0]]]))

    def test_negative_cell_rejected(self):
        with pytest.raises(LevelConfigError):
            level_from_dict(_level_dict(units=[["Assault", [-1, 0]]]))

    def test_ragged_tilemap_rejected(self):
        with pytest.raises(LevelConfigError):
            level_from_dict(_level_dict(tilemap=[[1, 1, 1], [1, 1]]))

    def test_missing_tilemap_rejected(self):
        with pytest.raises(LevelConfigError):
            level_from_dict({"id": 0})

    def test_negative_currency_rejected(self):
        with pytest.raises(LevelConfigError):
            level_from_dict(_level_dict(initial_currency=-1))

    @pytest.mark.parametrize("currency", ["lots", None, [3]])
    def test_non_integer_currency_rejected(self, currency):
        with pytest.raises(LevelConfigError):
            level_from_dict(_level_dict(initial_currency=currency))

    @pytest.mark.parametrize("key", ["units", "obstacles"])
    def test_non_list_entries_rejected(self, key):
        with pytest.raises(LevelConfigError):
            level_from_dict(_level_dict(**{key: 5}))

    def test_off_map_obstacle_rejected(self):
        with pytest.raises(LevelConfigError):
            level_from_dict(_level_dict(obstacles=[["Wall", [9, 9]]]))

    def test_obstacle_on_unit_rejected(self):
        with pytest.raises(LevelConfigError):
            level_from_dict(_level_dict(obstacles=[["Wall", [0, 0]]]))

    def test_empty_roster_is_accepted(self):
        assert level_from_dict(_level_dict(units=[])).units == ()


class TestLoadLevels:
    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / "levels.json"
        path.write_text(json.dumps({"levels": [_level_dict(), _level_dict(id=1)]}))
        levels = load_levels(path)
        assert [lv.id for lv in levels] == [0, 1]

    def test_id_must_match_position(self, tmp_path):
        path = tmp_path / "levels.json"
        path.write_text(json.dumps({"levels": [_level_dict(id=3)]}))
        with pytest.raises(LevelConfigError):
            load_levels(path)

    def test_empty_list_rejected(self, tmp_path):
        path = tmp_path / "levels.json"
        path.write_text(json.dumps({"levels": []}))
        with pytest.raises(LevelConfigError):
            load_levels(path)

    def test_missing_file_rejected(self, tmp_path):
        with pytest.raises(LevelConfigError):
            load_levels(tmp_path / "nope.json")
