"""Tests for the EngineManager and the HTTP route handlers.

Route functions are called directly with an explicit manager, so no
server or HTTP client is needed.
"""

import sys
import os
import json

import pytest
from fastapi import HTTPException

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pestilence.api import dependencies
from pestilence.api.engine_manager import EngineManager
from pestilence.api.routes import config as config_routes
from pestilence.api.routes import control as control_routes
from pestilence.api.routes import input as input_routes
from pestilence.api.routes import map as map_routes
from pestilence.api.routes import state as state_routes
from pestilence.api.schemas import ClickRequest
from pestilence.config import SimulationConfig


def _levels_file(tmp_path) -> str:
    tiles = [[1] * 8 for _ in range(6)]
    level = {
        "id": 0,
        "tilemap": tiles,
        "units": [["Assault", [4, 3]], ["Scout", [2, 2]]],
        "obstacles": [["Boulder", [6, 1]]],
        "initial_currency": 2,
    }
    path = tmp_path / "levels.json"
    path.write_text(json.dumps({"levels": [level, dict(level, id=1)]}))
    return str(path)


@pytest.fixture
def manager(tmp_path):
    cfg = SimulationConfig(levels_file=_levels_file(tmp_path))
    mgr = EngineManager(cfg)
    yield mgr
    mgr.stop()


def _click(mgr, col, row):
    return input_routes.click(ClickRequest(col=col, row=row), manager=mgr)


class TestReadRoutes:
    def test_map(self, manager):
        resp = map_routes.get_map(manager=manager)
        assert (resp.width, resp.height) == (8, 6)
        assert resp.level_id == 0
        assert len(resp.tiles) == 6
        assert [(o.kind, o.col, o.row) for o in resp.obstacles] == [("Boulder", 6, 1)]

    def test_initial_state(self, manager):
        resp = state_routes.get_state(since_tick=0, category=None, manager=manager)
        assert resp.phase == "HUMANS_MOVE"
        assert resp.currency == 2
        assert resp.host_count == 2 and resp.infected_count == 0
        assert [c.kind for c in resp.combatants] == ["Assault", "Scout"]
        assert resp.turn_order == [1, 0]
        assert resp.selection.unit_id is None
        assert resp.presentation_busy is False

    def test_config(self, manager):
        resp = config_routes.get_config(manager=manager)
        assert resp.level_count == 2
        assert resp.pathfinding_heuristic == "euclidean"
        assert resp.auto_complete_animations is False

    def test_stats(self, manager):
        resp = state_routes.get_stats(manager=manager)
        assert resp.tick == 0
        assert resp.running is False
        assert resp.animations_played == 0


class TestControl:
    def test_step_advances_phase(self, manager):
        control_routes.control(control_routes.ControlAction.step, level=None, manager=manager)
        resp = state_routes.get_state(since_tick=0, category=None, manager=manager)
        assert resp.phase == "PARASITES"
        assert resp.tick == 1
        assert [e.category for e in resp.events] == ["phase"]

    def test_pause_when_not_running(self, manager):
        resp = control_routes.control(control_routes.ControlAction.pause, level=None, manager=manager)
        assert resp.status == "error"

    def test_reset_to_level(self, manager):
        manager.step()
        resp = control_routes.control(control_routes.ControlAction.reset, level=1, manager=manager)
        assert resp.tick == 0
        assert manager.get_snapshot().level_id == 1
        assert len(manager.event_log) == 0

    def test_speed_is_clamped(self, manager):
        control_routes.set_speed(sps=10.0, manager=manager)
        assert manager.tick_rate == pytest.approx(0.1)
        manager.tick_rate = 50.0
        assert manager.tick_rate == 2.0


class TestInputRoutes:
    def test_click_rejected_outside_parasites(self, manager):
        with pytest.raises(HTTPException) as exc:
            _click(manager, 2, 2)
        assert exc.value.status_code == 409

    def test_select_and_infect(self, manager):
        manager.step()
        resp = _click(manager, 2, 2)
        assert resp.selected_id == 1
        resp = input_routes.infect(manager=manager)
        assert resp.currency == 0

        state = state_routes.get_state(since_tick=0, category=None, manager=manager)
        assert state.infected_count == 1
        assert "infection" in [e.category for e in state.events]

        only = state_routes.get_state(since_tick=0, category="infection", manager=manager)
        assert [e.entity_ids for e in only.events] == [[1]]

    def test_move_waits_for_animation_ack(self, manager):
        manager.step()
        _click(manager, 2, 2)
        input_routes.infect(manager=manager)
        _click(manager, 2, 2)
        _click(manager, 3, 3)

        state = state_routes.get_state(since_tick=0, category=None, manager=manager)
        assert state.presentation_busy
        assert state.animations[0].kind == "move"
        assert (state.animations[0].goal.col, state.animations[0].goal.row) == (3, 3)
        assert [(a.col, a.row) for a in state.selection.attacks] == [(4, 3)]

        # Input is locked until the presentation catches up
        with pytest.raises(HTTPException):
            _click(manager, 4, 3)

        resp = input_routes.complete_animations(count=None, manager=manager)
        assert (resp.completed, resp.pending) == (1, 0)
        assert state_routes.get_stats(manager=manager).animations_played == 1
        _click(manager, 4, 3)
        assert manager.get_snapshot().combatants[0].health == 2

    def test_end_turn(self, manager):
        manager.step()
        resp = input_routes.end_turn(manager=manager)
        assert resp.accepted
        assert manager.get_snapshot().end_turn_requested
        manager.step()
        assert manager.get_snapshot().phase.name == "HUMANS_ATTACK"


class TestDependencies:
    def test_unset_manager_raises(self):
        dependencies.set_engine_manager(None)
        with pytest.raises(RuntimeError):
            dependencies.get_engine_manager()

    def test_set_manager_is_returned(self, manager):
        dependencies.set_engine_manager(manager)
        try:
            assert dependencies.get_engine_manager() is manager
        finally:
            dependencies.set_engine_manager(None)


class TestAppFactory:
    def test_routes_are_mounted(self):
        from pestilence.api.app import create_app

        app = create_app(SimulationConfig())
        paths = app.openapi()["paths"]
        for path in ("/api/v1/map", "/api/v1/state", "/api/v1/control/{action}",
                     "/api/v1/input/click", "/api/v1/animations/complete", "/api/v1/config"):
            assert path in paths
