"""GET /api/v1/map — terrain and obstacles of the current level."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from pestilence.api.dependencies import get_engine_manager
from pestilence.api.engine_manager import EngineManager
from pestilence.api.schemas import MapResponse, ObstacleSchema

router = APIRouter()


@router.get("/map", response_model=MapResponse)
def get_map(manager: EngineManager = Depends(get_engine_manager)) -> MapResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Battle not initialized yet.")

    grid = snapshot.grid
    offset_x, offset_y = grid.offset()
    return MapResponse(
        level_id=snapshot.level_id,
        width=grid.width,
        height=grid.height,
        tiles=[list(row) for row in grid.rows()],
        offset_x=offset_x,
        offset_y=offset_y,
        obstacles=[
            ObstacleSchema(kind=kind.name.capitalize(), col=cell.col, row=cell.row)
            for cell, kind in sorted(snapshot.obstacles.items())
        ],
    )
