"""Combat resolution — damage, kills, area effects and charges.

Two entry points:
  - ``resolve_player_strike``: an infected unit strikes a highlighted cell.
  - ``resolve_host_attacks``: host units fire along the facings chosen
    during planning (HumansAttack phase).

Damage saturates at zero. A combatant that reaches zero health is removed
from the battle on the spot; killing a host-faction unit pays its value
into the shared currency pool.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pestilence.core.models import Cell, Combatant

if TYPE_CHECKING:
    from pestilence.actions.base import ActionContext

logger = logging.getLogger(__name__)


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


def charge_cell(attacker: Cell, target: Cell) -> Cell:
    """The cell next to *target* on the line back towards *attacker*."""
    return Cell(
        target.col - _sign(target.col - attacker.col),
        target.row - _sign(target.row - attacker.row),
    )


def apply_damage(ctx: ActionContext, attacker: Combatant, target: Combatant) -> bool:
    """Hit *target* with *attacker*'s damage. Returns True if the target died."""
    state = ctx.state
    dealt = target.take_damage(attacker.damage)
    ctx.emit(
        "combat",
        f"{attacker.kind.label} #{attacker.id} hits {target.kind.label} #{target.id} "
        f"for {dealt} ({target.health}/{target.max_health})",
        (attacker.id, target.id),
    )
    if target.alive:
        return False

    state.remove(target.id)
    ctx.animations.death(target.id)
    if not target.infected:
        state.currency += target.value
    ctx.emit(
        "death",
        f"{target.kind.label} #{target.id} destroyed"
        + ("" if target.infected else f", +{target.value} currency ({state.currency})"),
        (target.id,),
    )
    logger.debug("Unit %d killed by %d", target.id, attacker.id)
    return True


def _relocate(ctx: ActionContext, unit: Combatant, cell: Cell) -> None:
    state = ctx.state
    start = state.position(unit.id)
    if start == cell:
        return
    state.move(unit.id, cell)
    ctx.animations.move(unit.id, start, cell)
    ctx.emit("movement", f"{unit.kind.label} #{unit.id} charges {start} -> {cell}", (unit.id,))


def strike_cells(unit: Combatant, attacks: dict[Cell, tuple[int, int]], clicked: Cell) -> list[Cell]:
    """Overlay cells resolved by striking *clicked*.

    Single-target patterns resolve only the clicked cell. Area-effect
    patterns resolve every highlighted cell whose rank is at most the
    clicked rank on the same vector, or on any vector for omnidirectional
    area-effect patterns.
    """
    pattern = unit.attack_pattern
    if not pattern.aoe:
        return [clicked]
    vec, rank = attacks[clicked]
    hit = [
        (oi, oj, cell)
        for cell, (oi, oj) in attacks.items()
        if oj <= rank and (pattern.all_directions or oi == vec)
    ]
    hit.sort(key=lambda item: (item[0], item[1]))
    return [cell for _, _, cell in hit]


def resolve_player_strike(ctx: ActionContext, attacker: Combatant, clicked: Cell) -> bool:
    """Resolve a strike on a highlighted attack cell. Returns False if *clicked* is not highlighted."""
    state = ctx.state
    attacks = state.selection.attacks
    if clicked not in attacks:
        return False

    attacker.has_attacked = True
    targets = strike_cells(attacker, attacks, clicked)
    state.selection.clear_overlays()

    if attacker.attack_pattern.charge:
        _relocate(ctx, attacker, charge_cell(state.position(attacker.id), clicked))

    ctx.animations.attack(attacker.id)
    for cell in targets:
        target = state.unit_at(cell)
        if target is not None and target.id != attacker.id:
            apply_damage(ctx, attacker, target)
    return True


def resolve_host_attacks(ctx: ActionContext) -> int:
    """Fire every host unit along its planned facings. Returns the number of hits."""
    state = ctx.state
    grid = state.grid
    hits = 0

    for unit in state.in_turn_order():
        if unit.infected or not unit.attack_facings or unit.id not in state.combatants:
            continue

        origin = state.position(unit.id)
        attacked = False
        charged = False
        for facing in unit.attack_facings:
            for dist in range(1, unit.range + 1):
                cell = origin.offset(facing, dist)
                if cell is None or not grid.is_passable(cell) or cell in state.obstacles:
                    break
                target = state.unit_at(cell)
                if target is None or target.id == unit.id:
                    continue

                if not attacked:
                    ctx.animations.attack(unit.id)
                    attacked = True
                if unit.attack_pattern.charge and not charged:
                    charged = True
                    landing = origin.offset(facing, dist - 1)
                    if landing is not None:
                        _relocate(ctx, unit, landing)
                apply_damage(ctx, unit, target)
                hits += 1

                if not unit.attack_pattern.aoe:
                    break
    return hits
