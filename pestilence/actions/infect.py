"""Spending currency to convert a host unit."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pestilence.core.models import Combatant

if TYPE_CHECKING:
    from pestilence.actions.base import ActionContext

logger = logging.getLogger(__name__)


def can_infect(currency: int, unit: Combatant) -> bool:
    return not unit.infected and unit.infection_cost <= currency


def infect_unit(ctx: ActionContext, unit: Combatant) -> bool:
    """Convert *unit* to the infected faction if the pool covers its cost."""
    state = ctx.state
    if not can_infect(state.currency, unit):
        return False

    cost = unit.infection_cost
    state.currency -= cost
    unit.infected = True
    unit.attack_facings = None
    state.selection.clear_overlays()
    ctx.emit(
        "infection",
        f"{unit.kind.label} #{unit.id} infected for {cost} (currency {state.currency})",
        (unit.id,),
    )
    logger.debug("Infected unit %d, currency now %d", unit.id, state.currency)
    return True
