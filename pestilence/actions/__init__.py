"""State mutators: player moves, strikes, infection and host attacks."""

from pestilence.actions.base import ActionContext
from pestilence.actions.combat import apply_damage, resolve_host_attacks, resolve_player_strike
from pestilence.actions.infect import infect_unit
from pestilence.actions.move import move_unit

__all__ = [
    "ActionContext",
    "apply_damage",
    "infect_unit",
    "move_unit",
    "resolve_host_attacks",
    "resolve_player_strike",
]
