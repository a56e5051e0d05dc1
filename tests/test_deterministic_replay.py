"""Tests for deterministic battle replay.

The rules engine has no randomness: the same level played by the same
AutoPlayer MUST settle into identical states at every step. This test
plays the built-in levels twice and compares per-step digests.
"""

import sys
import os
import json

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pestilence.ai.autoplayer import AutoPlayer
from pestilence.config import SimulationConfig
from pestilence.core.battle_state import BattleState
from pestilence.core.levels import LEVELS
from pestilence.engine.animation_queue import AnimationQueue
from pestilence.engine.turn_loop import TurnLoop
from pestilence.systems.fingerprint import digest_hex, state_digest
from pestilence.utils.replay import ReplayRecorder


def _play(level_id: int, rounds: int, replay_path, heuristic: str = "euclidean") -> ReplayRecorder:
    cfg = SimulationConfig(start_level=level_id, pathfinding_heuristic=heuristic)
    recorder = ReplayRecorder(replay_path, level_id)
    loop = TurnLoop(
        cfg,
        BattleState.from_level(LEVELS[level_id]),
        AnimationQueue(auto_complete=True),
        LEVELS,
        recorder,
    )
    loop.run(AutoPlayer(loop), max_rounds=rounds)
    return recorder


class TestDeterministicReplay:
    @pytest.mark.parametrize("level_id", [0, 1])
    def test_two_runs_identical(self, tmp_path, level_id):
        a = _play(level_id, 4, tmp_path / "a.json")
        b = _play(level_id, 4, tmp_path / "b.json")
        assert len(a.steps) > 0
        assert a.digests() == b.digests()
        assert a.steps == b.steps

    def test_admissible_heuristic_is_deterministic_too(self, tmp_path):
        a = _play(0, 3, tmp_path / "a.json", "admissible")
        b = _play(0, 3, tmp_path / "b.json", "admissible")
        assert a.digests() == b.digests()

    def test_battle_actually_progresses(self, tmp_path):
        rec = _play(0, 3, tmp_path / "a.json")
        assert len(set(rec.digests())) > 1
        assert any(step["events"] for step in rec.steps)


class TestReplayFile:
    def test_flush_writes_json(self, tmp_path):
        path = tmp_path / "out" / "replay.json"
        rec = _play(0, 2, path)
        rec.flush()
        data = json.loads(path.read_text())
        assert data["version"] == "1.0"
        assert data["start_level"] == 0
        assert data["total_steps"] == len(rec.steps)
        first = data["steps"][0]
        assert {"tick", "level", "round", "phase", "currency", "digest", "events", "combatants"} <= set(first)


class TestStateDigest:
    def test_digest_tracks_rule_relevant_state(self):
        state = BattleState.from_level(LEVELS[0])
        before = state_digest(state)
        assert state_digest(BattleState.from_level(LEVELS[0])) == before

        state.combatants[0].health -= 1
        assert state_digest(state) != before

    def test_digest_ignores_tick(self):
        state = BattleState.from_level(LEVELS[0])
        before = digest_hex(state)
        state.tick += 5
        assert digest_hex(state) == before
        assert len(before) == 16
