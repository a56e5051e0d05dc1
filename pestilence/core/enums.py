"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class Phase(IntEnum):
    """Stages of the turn cycle."""

    HUMANS_MOVE = 0
    PARASITES = 1
    HUMANS_ATTACK = 2

    def next(self) -> Phase:
        return _PHASE_CYCLE[self]


_PHASE_CYCLE: dict[Phase, Phase] = {
    Phase.HUMANS_MOVE: Phase.PARASITES,
    Phase.PARASITES: Phase.HUMANS_ATTACK,
    Phase.HUMANS_ATTACK: Phase.HUMANS_MOVE,
}


@unique
class UnitKind(IntEnum):
    """Combatant catalog entries."""

    ASSAULT = 0
    SCOUT = 1
    SNIPER = 2
    BALLISTIC = 3
    JUGGERNAUT = 4
    HEAVY = 5
    COMMANDER = 6
    SOLDIER = 7         # Legacy roster entry, plays as an Assault

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_label(cls, label: str) -> UnitKind:
        return cls[label.strip().upper()]


@unique
class Geometry(IntEnum):
    """Direction sets used for movement and attack facings."""

    CARDINAL = 0
    DIAGONAL = 1
    ANY = 2

    @property
    def vectors(self) -> tuple[tuple[int, int], ...]:
        return GEOMETRY_VECTORS[self]

    @property
    def text(self) -> str:
        return _GEOMETRY_TEXT[self]


# Declaration order matters: facing ties resolve to the earliest vector.
GEOMETRY_VECTORS: dict[Geometry, tuple[tuple[int, int], ...]] = {
    Geometry.CARDINAL: ((1, 0), (-1, 0), (0, 1), (0, -1)),
    Geometry.DIAGONAL: ((1, 1), (1, -1), (-1, 1), (-1, -1)),
    Geometry.ANY: (
        (1, 0), (-1, 0), (0, 1), (0, -1),
        (1, 1), (1, -1), (-1, 1), (-1, -1),
    ),
}

_GEOMETRY_TEXT: dict[Geometry, str] = {
    Geometry.CARDINAL: "cardinally",
    Geometry.DIAGONAL: "diagonally",
    Geometry.ANY: "any direction",
}


@unique
class ObstacleKind(IntEnum):
    """Blocking props placed per level."""

    WALL = 0
    BOULDER = 1

    @classmethod
    def from_label(cls, label: str) -> ObstacleKind:
        return cls[label.strip().upper()]


@unique
class AnimationKind(IntEnum):
    """Intents handed to the presentation layer."""

    MOVE = 0
    ATTACK = 1
    DEATH = 2
