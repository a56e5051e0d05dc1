"""POST /api/v1/control/{action} and /speed — battle lifecycle controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query

from pestilence.api.dependencies import get_engine_manager
from pestilence.api.engine_manager import EngineManager
from pestilence.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"


def _reply(manager: EngineManager, status: str, message: str) -> ControlResponse:
    snapshot = manager.get_snapshot()
    return ControlResponse(status=status, message=message, tick=snapshot.tick if snapshot else 0)


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    level: int | None = Query(None, ge=0, description="Level to load on reset"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    match action:
        case ControlAction.start:
            if manager.running:
                return _reply(manager, "noop", "Battle thread already running.")
            manager.start()
            return _reply(manager, "ok", "Battle thread started.")

        case ControlAction.pause | ControlAction.resume if not manager.running:
            return _reply(manager, "error", "Battle thread is not running.")

        case ControlAction.pause:
            manager.pause()
            return _reply(manager, "ok", "Battle paused.")

        case ControlAction.resume:
            manager.resume()
            return _reply(manager, "ok", "Battle resumed.")

        case ControlAction.step:
            manager.step()
            return _reply(manager, "ok", "Step requested.")

        case ControlAction.reset:
            manager.reset(level)
            return _reply(manager, "ok", f"Level {manager.get_snapshot().level_id} reloaded.")


@router.post("/speed", response_model=ControlResponse)
def set_speed(
    sps: float = Query(4.0, gt=0.5, le=100.0, description="Steps per second"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.tick_rate = 1.0 / sps
    return _reply(manager, "ok", f"Stepping at {sps:.1f} steps/s.")
