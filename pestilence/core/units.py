"""Unit catalog — the stat profile every roster entry is cloned from.

Each kind owns one immutable ``UnitProfile``. Combatants are created with
``make_combatant`` at level load; everything that varies during a battle
(health, flags, facings) lives on the ``Combatant`` instance only.
"""

from __future__ import annotations

from dataclasses import dataclass

from pestilence.core.enums import Geometry, UnitKind
from pestilence.core.models import AttackPattern, Combatant


@dataclass(frozen=True, slots=True)
class UnitProfile:
    """Static stats for one unit kind."""

    kind: UnitKind
    max_health: int
    damage: int
    speed: int
    range: int
    move_geometry: Geometry
    attack_pattern: AttackPattern
    value: int
    priority: int       # Turn-order rank, lower acts first


_ASSAULT = UnitProfile(
    kind=UnitKind.ASSAULT, max_health=3, damage=2, speed=3, range=4,
    move_geometry=Geometry.CARDINAL,
    attack_pattern=AttackPattern(Geometry.CARDINAL),
    value=2, priority=3,
)

UNIT_CATALOG: dict[UnitKind, UnitProfile] = {
    UnitKind.ASSAULT: _ASSAULT,
    UnitKind.SCOUT: UnitProfile(
        kind=UnitKind.SCOUT, max_health=2, damage=1, speed=5, range=3,
        move_geometry=Geometry.DIAGONAL,
        attack_pattern=AttackPattern(Geometry.CARDINAL),
        value=1, priority=1,
    ),
    UnitKind.SNIPER: UnitProfile(
        kind=UnitKind.SNIPER, max_health=3, damage=4, speed=4, range=5,
        move_geometry=Geometry.CARDINAL,
        attack_pattern=AttackPattern(Geometry.DIAGONAL),
        value=2, priority=2,
    ),
    UnitKind.BALLISTIC: UnitProfile(
        kind=UnitKind.BALLISTIC, max_health=3, damage=2, speed=3, range=2,
        move_geometry=Geometry.CARDINAL,
        attack_pattern=AttackPattern(Geometry.DIAGONAL, aoe=True, all_directions=True),
        value=3, priority=4,
    ),
    UnitKind.JUGGERNAUT: UnitProfile(
        kind=UnitKind.JUGGERNAUT, max_health=4, damage=3, speed=3, range=4,
        move_geometry=Geometry.CARDINAL,
        attack_pattern=AttackPattern(Geometry.CARDINAL, charge=True),
        value=3, priority=5,
    ),
    UnitKind.HEAVY: UnitProfile(
        kind=UnitKind.HEAVY, max_health=5, damage=2, speed=2, range=3,
        move_geometry=Geometry.CARDINAL,
        attack_pattern=AttackPattern(Geometry.CARDINAL, aoe=True),
        value=4, priority=6,
    ),
    UnitKind.COMMANDER: UnitProfile(
        kind=UnitKind.COMMANDER, max_health=4, damage=3, speed=3, range=4,
        move_geometry=Geometry.CARDINAL,
        attack_pattern=AttackPattern(Geometry.ANY),
        value=5, priority=0,
    ),
    UnitKind.SOLDIER: UnitProfile(
        kind=UnitKind.SOLDIER, max_health=_ASSAULT.max_health, damage=_ASSAULT.damage,
        speed=_ASSAULT.speed, range=_ASSAULT.range,
        move_geometry=_ASSAULT.move_geometry, attack_pattern=_ASSAULT.attack_pattern,
        value=_ASSAULT.value, priority=_ASSAULT.priority,
    ),
}


def kind_priority(kind: UnitKind) -> int:
    return UNIT_CATALOG[kind].priority


def make_combatant(kind: UnitKind, unit_id: int) -> Combatant:
    """Clone the catalog profile for *kind* into a fresh host combatant."""
    p = UNIT_CATALOG[kind]
    return Combatant(
        id=unit_id,
        kind=kind,
        max_health=p.max_health,
        health=p.max_health,
        damage=p.damage,
        speed=p.speed,
        range=p.range,
        move_geometry=p.move_geometry,
        attack_pattern=p.attack_pattern,
        value=p.value,
    )
