"""Tests for combat resolution: damage, payouts, area effects and charges."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pestilence.actions.combat import (
    apply_damage,
    charge_cell,
    resolve_host_attacks,
    resolve_player_strike,
    strike_cells,
)
from pestilence.actions.move import attack_overlay
from pestilence.core.enums import AnimationKind, UnitKind
from pestilence.core.models import Cell
from tests.helpers.battle_arena import BattleArena


def _arm(arena: BattleArena, unit_id: int) -> None:
    """Select *unit_id* and show its attack overlay, as a click would."""
    sel = arena.state.selection
    sel.clear()
    sel.unit_id = unit_id
    sel.attacks = attack_overlay(arena.state, arena.unit(unit_id))


# ---------------------------------------------------------------------------
# Damage and payout
# ---------------------------------------------------------------------------

class TestApplyDamage:
    def test_damage_saturates_and_pays_out(self):
        arena = BattleArena(units=[(UnitKind.ASSAULT, (1, 1)), (UnitKind.SCOUT, (3, 1))], currency=1)
        arena.infect(1)
        arena.set_stats(1, damage=5)
        host = arena.set_stats(0, health=1)

        killed = apply_damage(arena.ctx, arena.unit(1), host)

        assert killed is True
        assert host.health == 0
        assert not arena.alive(0)
        assert Cell(1, 1) not in arena.state.occupancy
        assert arena.state.currency == 1 + host.value

    def test_non_lethal_hit(self):
        arena = BattleArena(units=[(UnitKind.HEAVY, (1, 1)), (UnitKind.SCOUT, (3, 1))])
        arena.infect(1)
        heavy = arena.unit(0)
        killed = apply_damage(arena.ctx, arena.unit(1), heavy)
        assert killed is False
        assert heavy.health == heavy.max_health - 1
        assert arena.alive(0)
        assert arena.state.currency == 0

    def test_killing_infected_pays_nothing(self):
        arena = BattleArena(units=[(UnitKind.SNIPER, (1, 1)), (UnitKind.SCOUT, (3, 1))], currency=2)
        arena.infect(1)
        apply_damage(arena.ctx, arena.unit(0), arena.unit(1))
        assert not arena.alive(1)
        assert arena.state.currency == 2

    def test_kill_queues_death_intent(self):
        arena = BattleArena(
            units=[(UnitKind.SNIPER, (1, 1)), (UnitKind.SCOUT, (3, 1))],
            auto_complete=False,
        )
        apply_damage(arena.ctx, arena.unit(0), arena.unit(1))
        pending = arena.animations.pending()
        assert [a.kind for a in pending] == [AnimationKind.DEATH]
        assert pending[0].unit_id == 1

    def test_kill_emits_events(self):
        arena = BattleArena(units=[(UnitKind.SNIPER, (1, 1)), (UnitKind.SCOUT, (3, 1))])
        apply_damage(arena.ctx, arena.unit(0), arena.unit(1))
        categories = [e.category for e in arena.ctx.events]
        assert categories == ["combat", "death"]


# ---------------------------------------------------------------------------
# Player strikes
# ---------------------------------------------------------------------------

class TestAreaEffectStrike:
    def _line_arena(self) -> BattleArena:
        arena = BattleArena(units=[
            (UnitKind.HEAVY, (1, 1)), (UnitKind.ASSAULT, (2, 1)), (UnitKind.ASSAULT, (3, 1)),
        ])
        arena.infect(0)
        arena.set_stats(1, health=5, max_health=5)
        arena.set_stats(2, health=5, max_health=5)
        _arm(arena, 0)
        return arena

    def test_overlay_ranks(self):
        arena = self._line_arena()
        assert arena.state.selection.attacks == {Cell(2, 1): (0, 0), Cell(3, 1): (0, 1)}

    def test_far_rank_hits_both(self):
        arena = self._line_arena()
        assert resolve_player_strike(arena.ctx, arena.unit(0), Cell(3, 1))
        assert arena.unit(1).health == 3
        assert arena.unit(2).health == 3

    def test_near_rank_hits_only_near(self):
        arena = self._line_arena()
        assert resolve_player_strike(arena.ctx, arena.unit(0), Cell(2, 1))
        assert arena.unit(1).health == 3
        assert arena.unit(2).health == 5

    def test_strike_marks_attacked_and_clears_overlays(self):
        arena = self._line_arena()
        resolve_player_strike(arena.ctx, arena.unit(0), Cell(2, 1))
        assert arena.unit(0).has_attacked
        assert arena.state.selection.attacks == {}
        assert arena.state.selection.moves == set()

    def test_unhighlighted_cell_rejected(self):
        arena = self._line_arena()
        assert resolve_player_strike(arena.ctx, arena.unit(0), Cell(5, 5)) is False
        assert not arena.unit(0).has_attacked

    def test_omnidirectional_hits_every_vector_up_to_rank(self):
        arena = BattleArena(units=[
            (UnitKind.BALLISTIC, (3, 3)),
            (UnitKind.HEAVY, (4, 4)), (UnitKind.HEAVY, (5, 5)),
            (UnitKind.HEAVY, (2, 2)), (UnitKind.HEAVY, (1, 1)),
        ])
        arena.infect(0)
        _arm(arena, 0)
        resolve_player_strike(arena.ctx, arena.unit(0), Cell(4, 4))
        hit = {uid for uid in (1, 2, 3, 4) if arena.unit(uid).health < arena.unit(uid).max_health}
        assert hit == {1, 3}

    def test_strike_cells_single_target(self):
        arena = BattleArena(units=[
            (UnitKind.ASSAULT, (1, 1)), (UnitKind.SCOUT, (3, 1)), (UnitKind.SCOUT, (1, 3)),
        ])
        arena.infect(0)
        _arm(arena, 0)
        attacks = arena.state.selection.attacks
        assert strike_cells(arena.unit(0), attacks, Cell(3, 1)) == [Cell(3, 1)]


class TestChargeStrike:
    def test_charge_cell_cardinal_and_diagonal(self):
        assert charge_cell(Cell(0, 2), Cell(4, 2)) == Cell(3, 2)
        assert charge_cell(Cell(5, 5), Cell(5, 1)) == Cell(5, 2)
        assert charge_cell(Cell(0, 0), Cell(3, 3)) == Cell(2, 2)

    def test_player_charge_repositions_before_damage(self):
        arena = BattleArena(units=[(UnitKind.JUGGERNAUT, (0, 2)), (UnitKind.HEAVY, (4, 2))])
        arena.infect(0)
        _arm(arena, 0)
        resolve_player_strike(arena.ctx, arena.unit(0), Cell(4, 2))
        assert arena.pos(0) == Cell(3, 2)
        assert arena.unit(1).health == arena.unit(1).max_health - 3

    def test_adjacent_charge_stays(self):
        arena = BattleArena(
            units=[(UnitKind.JUGGERNAUT, (2, 2)), (UnitKind.HEAVY, (3, 2))],
            auto_complete=False,
        )
        arena.infect(0)
        _arm(arena, 0)
        resolve_player_strike(arena.ctx, arena.unit(0), Cell(3, 2))
        assert arena.pos(0) == Cell(2, 2)
        assert [a.kind for a in arena.animations.pending()] == [AnimationKind.ATTACK]


# ---------------------------------------------------------------------------
# Host attacks
# ---------------------------------------------------------------------------

class TestHostAttacks:
    def test_single_target_facing(self):
        arena = BattleArena(units=[(UnitKind.ASSAULT, (1, 1)), (UnitKind.HEAVY, (3, 1))])
        arena.infect(1)
        arena.set_stats(0, attack_facings=[(1, 0)])
        assert resolve_host_attacks(arena.ctx) == 1
        assert arena.unit(1).health == 3

    def test_area_effect_continues_past_target(self):
        arena = BattleArena(units=[
            (UnitKind.HEAVY, (0, 0)), (UnitKind.HEAVY, (1, 0)), (UnitKind.HEAVY, (2, 0)),
        ])
        arena.infect(1, 2)
        arena.set_stats(0, attack_facings=[(1, 0)])
        assert resolve_host_attacks(arena.ctx) == 2
        assert arena.unit(1).health == 3
        assert arena.unit(2).health == 3

    def test_obstacle_halts_facing(self):
        arena = BattleArena(
            units=[(UnitKind.ASSAULT, (1, 1)), (UnitKind.HEAVY, (3, 1))],
            obstacles=[(2, 1)],
        )
        arena.infect(1)
        arena.set_stats(0, attack_facings=[(1, 0)])
        assert resolve_host_attacks(arena.ctx) == 0
        assert arena.unit(1).health == arena.unit(1).max_health

    def test_out_of_range(self):
        arena = BattleArena(units=[(UnitKind.HEAVY, (0, 0)), (UnitKind.SCOUT, (4, 0))])
        arena.infect(1)
        arena.set_stats(0, attack_facings=[(1, 0)])
        assert resolve_host_attacks(arena.ctx) == 0

    def test_charge_lands_next_to_target(self):
        arena = BattleArena(units=[(UnitKind.JUGGERNAUT, (0, 0)), (UnitKind.HEAVY, (3, 0))])
        arena.infect(1)
        arena.set_stats(0, attack_facings=[(1, 0)])
        resolve_host_attacks(arena.ctx)
        assert arena.pos(0) == Cell(2, 0)
        assert arena.unit(1).health == 2

    def test_infected_and_unarmed_units_skip(self):
        arena = BattleArena(units=[(UnitKind.ASSAULT, (1, 1)), (UnitKind.ASSAULT, (3, 1))])
        arena.infect(1)
        arena.set_stats(1, attack_facings=[(-1, 0)])
        assert resolve_host_attacks(arena.ctx) == 0
        assert arena.unit(0).health == arena.unit(0).max_health

    def test_host_kill_of_infected_pays_nothing(self):
        arena = BattleArena(units=[(UnitKind.SNIPER, (0, 0)), (UnitKind.SCOUT, (2, 2))], currency=3)
        arena.infect(1)
        arena.set_stats(0, attack_facings=[(1, 1)])
        resolve_host_attacks(arena.ctx)
        assert not arena.alive(1)
        assert arena.state.currency == 3
