"""Replay serialization — records each settled step for deterministic comparison."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pestilence.systems.fingerprint import digest_hex

if TYPE_CHECKING:
    from pestilence.core.battle_state import BattleState
    from pestilence.utils.event_log import SimEvent

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Accumulates settled steps and flushes them to a JSON replay file."""

    __slots__ = ("_path", "_steps", "_start_level")

    def __init__(self, path: str | Path, start_level: int) -> None:
        self._path = Path(path)
        self._start_level = start_level
        self._steps: list[dict[str, Any]] = []

    @property
    def steps(self) -> list[dict[str, Any]]:
        return self._steps

    def digests(self) -> list[str]:
        return [step["digest"] for step in self._steps]

    def record_step(self, state: BattleState, events: list[SimEvent]) -> None:
        combatants = [
            {
                "id": u.id,
                "kind": u.kind.label,
                "infected": u.infected,
                "pos": [state.positions[uid].col, state.positions[uid].row],
                "hp": u.health,
            }
            for uid, u in sorted(state.combatants.items())
        ]
        self._steps.append(
            {
                "tick": state.tick,
                "level": state.level.id,
                "round": state.round,
                "phase": state.phase.name,
                "currency": state.currency,
                "digest": digest_hex(state),
                "events": [{"category": e.category, "message": e.message} for e in events],
                "combatants": combatants,
            }
        )

    def flush(self) -> None:
        """Write accumulated data to disk."""
        replay = {
            "version": "1.0",
            "start_level": self._start_level,
            "total_steps": len(self._steps),
            "steps": self._steps,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(replay, indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d steps)", self._path, len(self._steps))
