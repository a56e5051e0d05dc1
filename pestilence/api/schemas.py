"""Pydantic response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Map ---

class ObstacleSchema(BaseModel):
    kind: str
    col: int
    row: int


class MapResponse(BaseModel):
    level_id: int
    width: int
    height: int
    tiles: list[list[int]]
    offset_x: float
    offset_y: float
    obstacles: list[ObstacleSchema] = Field(default_factory=list)


# --- Combatant ---

class CombatantSchema(BaseModel):
    id: int
    kind: str
    col: int
    row: int
    infected: bool
    health: int
    max_health: int
    damage: int
    speed: int
    range: int
    move_geometry: str
    attack_geometry: str
    charge: bool = False
    aoe: bool = False
    all_directions: bool = False
    value: int
    infection_cost: int
    has_moved: bool = False
    has_attacked: bool = False
    attack_facings: list[list[int]] | None = None


class OverlayCellSchema(BaseModel):
    col: int
    row: int


class AttackCellSchema(BaseModel):
    col: int
    row: int
    vector: int
    rank: int


class SelectionSchema(BaseModel):
    unit_id: int | None = None
    moves: list[OverlayCellSchema] = Field(default_factory=list)
    attacks: list[AttackCellSchema] = Field(default_factory=list)
    facings: list[OverlayCellSchema] = Field(default_factory=list)


# --- Animation ---

class AnimationSchema(BaseModel):
    kind: str
    unit_id: int
    start: OverlayCellSchema | None = None
    goal: OverlayCellSchema | None = None


# --- Events ---

class EventSchema(BaseModel):
    tick: int
    category: str
    message: str
    entity_ids: list[int] = Field(default_factory=list)


# --- State ---

class BattleStateResponse(BaseModel):
    tick: int
    round: int
    level_id: int
    phase: str
    currency: int
    infected_count: int
    host_count: int
    turn_order: list[int]
    combatants: list[CombatantSchema]
    selection: SelectionSchema
    animations: list[AnimationSchema] = Field(default_factory=list)
    presentation_busy: bool = False
    end_turn_requested: bool = False
    events: list[EventSchema] = Field(default_factory=list)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int = 0


# --- Input ---

class ClickRequest(BaseModel):
    col: int = Field(ge=0)
    row: int = Field(ge=0)


class InputResponse(BaseModel):
    accepted: bool
    phase: str
    currency: int
    selected_id: int | None = None


class AnimationCompleteResponse(BaseModel):
    completed: int
    pending: int


# --- Config ---

class SimulationConfigResponse(BaseModel):
    start_level: int
    level_count: int
    levels_file: str | None = None
    pathfinding_heuristic: str
    max_rounds: int
    auto_complete_animations: bool
    tick_rate: float


# --- Stats ---

class SimulationStats(BaseModel):
    tick: int
    round: int
    level_id: int
    level_changes: int
    animations_played: int
    running: bool
    paused: bool
