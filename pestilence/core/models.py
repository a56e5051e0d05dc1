"""Core data models: Cell, AttackPattern, Combatant, Obstacle."""

from __future__ import annotations

from dataclasses import dataclass, field

from pestilence.core.enums import Geometry, ObstacleKind, UnitKind

Vector = tuple[int, int]

# Infecting a host costs twice the currency it pays out when killed.
INFECTION_COST_MULTIPLIER = 2


@dataclass(frozen=True, slots=True, order=True)
class Cell:
    """Immutable grid coordinate, ordered by column then row."""

    col: int = 0
    row: int = 0

    def __post_init__(self) -> None:
        if self.col < 0 or self.row < 0:
            raise ValueError(f"Cell coordinates must be non-negative, got ({self.col}, {self.row})")

    def offset(self, vector: Vector, dist: int = 1) -> Cell | None:
        """Step *dist* times along *vector*; None if the step leaves the grid's top/left edge."""
        dcol = vector[0] * dist
        drow = vector[1] * dist
        if -dcol > self.col or -drow > self.row:
            return None
        return Cell(self.col + dcol, self.row + drow)

    def euclidean(self, other: Cell) -> float:
        return ((self.col - other.col) ** 2 + (self.row - other.row) ** 2) ** 0.5

    def chebyshev(self, other: Cell) -> int:
        return max(abs(self.col - other.col), abs(self.row - other.row))

    def __repr__(self) -> str:
        return f"({self.col}, {self.row})"


@dataclass(frozen=True, slots=True)
class AttackPattern:
    """How a unit strikes: facing geometry plus charge / area-effect flags."""

    geometry: Geometry
    charge: bool = False
    aoe: bool = False
    all_directions: bool = False


@dataclass(slots=True)
class Combatant:
    """A unit on the battle map, host or infected."""

    id: int
    kind: UnitKind
    max_health: int
    health: int
    damage: int
    speed: int
    range: int
    move_geometry: Geometry
    attack_pattern: AttackPattern
    value: int
    infected: bool = False
    has_moved: bool = False
    has_attacked: bool = False
    attack_facings: list[Vector] | None = None

    @property
    def alive(self) -> bool:
        return self.health > 0

    @property
    def infection_cost(self) -> int:
        return self.value * INFECTION_COST_MULTIPLIER

    def take_damage(self, amount: int) -> int:
        """Apply *amount* damage, saturating at zero. Returns the damage actually dealt."""
        dealt = min(self.health, max(amount, 0))
        self.health -= dealt
        return dealt

    def reset_round(self) -> None:
        self.has_moved = False
        self.has_attacked = False

    def copy(self) -> Combatant:
        return Combatant(
            id=self.id,
            kind=self.kind,
            max_health=self.max_health,
            health=self.health,
            damage=self.damage,
            speed=self.speed,
            range=self.range,
            move_geometry=self.move_geometry,
            attack_pattern=self.attack_pattern,
            value=self.value,
            infected=self.infected,
            has_moved=self.has_moved,
            has_attacked=self.has_attacked,
            attack_facings=list(self.attack_facings) if self.attack_facings is not None else None,
        )


@dataclass(frozen=True, slots=True)
class Obstacle:
    """A wall or boulder. Always impassable, always blocks line of effect."""

    kind: ObstacleKind
    cell: Cell = field(default_factory=Cell)
