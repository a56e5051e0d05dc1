"""GET /api/v1/state — combatants, overlays and events (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from pestilence.api.dependencies import get_engine_manager
from pestilence.api.engine_manager import EngineManager
from pestilence.api.schemas import (
    AnimationSchema,
    AttackCellSchema,
    BattleStateResponse,
    CombatantSchema,
    EventSchema,
    OverlayCellSchema,
    SelectionSchema,
    SimulationStats,
)
from pestilence.core.models import Cell, Combatant
from pestilence.core.snapshot import Snapshot
from pestilence.engine.animation_queue import Animation

router = APIRouter()


def _cell(cell: Cell | None) -> OverlayCellSchema | None:
    if cell is None:
        return None
    return OverlayCellSchema(col=cell.col, row=cell.row)


def _serialize_combatant(u: Combatant, cell: Cell) -> CombatantSchema:
    pattern = u.attack_pattern
    return CombatantSchema(
        id=u.id,
        kind=u.kind.label,
        col=cell.col,
        row=cell.row,
        infected=u.infected,
        health=u.health,
        max_health=u.max_health,
        damage=u.damage,
        speed=u.speed,
        range=u.range,
        move_geometry=u.move_geometry.text,
        attack_geometry=pattern.geometry.text,
        charge=pattern.charge,
        aoe=pattern.aoe,
        all_directions=pattern.all_directions,
        value=u.value,
        infection_cost=u.infection_cost,
        has_moved=u.has_moved,
        has_attacked=u.has_attacked,
        attack_facings=(
            [list(v) for v in u.attack_facings] if u.attack_facings is not None else None
        ),
    )


def _serialize_selection(snapshot: Snapshot) -> SelectionSchema:
    return SelectionSchema(
        unit_id=snapshot.selected_id,
        moves=[_cell(c) for c in snapshot.move_overlay],
        attacks=[
            AttackCellSchema(col=c.col, row=c.row, vector=i, rank=j)
            for c, (i, j) in sorted(snapshot.attack_overlay.items())
        ],
        facings=[_cell(c) for c in snapshot.facing_overlay],
    )


def _serialize_animation(a: Animation) -> AnimationSchema:
    return AnimationSchema(
        kind=a.kind.name.lower(),
        unit_id=a.unit_id,
        start=_cell(a.start),
        goal=_cell(a.goal),
    )


@router.get("/state", response_model=BattleStateResponse)
def get_state(
    since_tick: int = Query(0, ge=0, description="Only return events since this tick"),
    category: str | None = Query(None, description="Only return events of this category"),
    manager: EngineManager = Depends(get_engine_manager),
) -> BattleStateResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No snapshot available yet.")

    combatants = [
        _serialize_combatant(u, snapshot.positions[uid])
        for uid, u in sorted(snapshot.combatants.items())
    ]
    events = [
        EventSchema(tick=ev.tick, category=ev.category, message=ev.message, entity_ids=list(ev.entity_ids))
        for ev in manager.event_log.since_tick(since_tick, category)
    ]
    animations = [_serialize_animation(a) for a in manager.pending_animations()]

    return BattleStateResponse(
        tick=snapshot.tick,
        round=snapshot.round,
        level_id=snapshot.level_id,
        phase=snapshot.phase.name,
        currency=snapshot.currency,
        infected_count=snapshot.infected_count(),
        host_count=snapshot.host_count(),
        turn_order=list(snapshot.turn_order),
        combatants=combatants,
        selection=_serialize_selection(snapshot),
        animations=animations,
        presentation_busy=bool(animations),
        end_turn_requested=snapshot.end_turn_requested,
        events=events,
    )


@router.get("/stats", response_model=SimulationStats)
def get_stats(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationStats:
    snapshot = manager.get_snapshot()
    return SimulationStats(
        tick=snapshot.tick if snapshot else 0,
        round=snapshot.round if snapshot else 0,
        level_id=snapshot.level_id if snapshot else 0,
        level_changes=len(manager.transitions),
        animations_played=manager.animations.played,
        running=manager.running,
        paused=manager.paused,
    )
