"""Engine systems: range calculus and state fingerprints."""

from pestilence.systems.fingerprint import digest_hex, state_digest
from pestilence.systems.ranges import (
    attack_positions_along_facing,
    legal_moves,
    reverse_threat_from_target,
    threatened_cells,
)

__all__ = [
    "attack_positions_along_facing",
    "digest_hex",
    "legal_moves",
    "reverse_threat_from_target",
    "state_digest",
    "threatened_cells",
]
