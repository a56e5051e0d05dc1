"""Deterministic battle fingerprint using xxhash.

Two runs fed the same level and the same inputs must settle into the same
sequence of digests. Replays store one digest per settled step so a
divergence can be pinned to the step where it first appears.
"""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING

import xxhash

if TYPE_CHECKING:
    from pestilence.core.battle_state import BattleState

_HEADER = struct.Struct("<iiiq")      # level id, phase, round, currency
_UNIT = struct.Struct("<iii?iii")     # id, kind, health, infected, col, row, facings


def state_digest(state: BattleState) -> int:
    """64-bit digest of everything the rules read: roster, positions, phase, currency."""
    h = xxhash.xxh64()
    h.update(_HEADER.pack(state.level.id, state.phase.value, state.round, state.currency))
    for uid in sorted(state.combatants):
        unit = state.combatants[uid]
        cell = state.positions[uid]
        facings = len(unit.attack_facings) if unit.attack_facings is not None else -1
        h.update(_UNIT.pack(uid, unit.kind.value, unit.health, unit.infected, cell.col, cell.row, facings))
    return h.intdigest()


def digest_hex(state: BattleState) -> str:
    return f"{state_digest(state):016x}"
