"""Core data models and battle representation."""

from pestilence.core.enums import AnimationKind, Geometry, ObstacleKind, Phase, UnitKind
from pestilence.core.models import AttackPattern, Cell, Combatant, Obstacle
from pestilence.core.grid import BattleMap
from pestilence.core.levels import LEVELS, Level, load_levels, turn_order
from pestilence.core.occupancy import CellIndex
from pestilence.core.battle_state import BattleState, Selection
from pestilence.core.snapshot import Snapshot

__all__ = [
    "LEVELS",
    "AnimationKind",
    "AttackPattern",
    "BattleMap",
    "BattleState",
    "Cell",
    "CellIndex",
    "Combatant",
    "Geometry",
    "Level",
    "Obstacle",
    "ObstacleKind",
    "Phase",
    "Selection",
    "Snapshot",
    "UnitKind",
    "load_levels",
    "turn_order",
]
