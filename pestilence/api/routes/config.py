"""GET /api/v1/config — expose battle configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from pestilence.api.dependencies import get_engine_manager
from pestilence.api.engine_manager import EngineManager
from pestilence.api.schemas import SimulationConfigResponse

router = APIRouter()


@router.get("/config", response_model=SimulationConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationConfigResponse:
    cfg = manager.config
    return SimulationConfigResponse(
        start_level=cfg.start_level,
        level_count=len(manager.levels),
        levels_file=cfg.levels_file,
        pathfinding_heuristic=cfg.pathfinding_heuristic,
        max_rounds=cfg.max_rounds,
        auto_complete_animations=manager.animations.auto_complete,
        tick_rate=manager.tick_rate,
    )
