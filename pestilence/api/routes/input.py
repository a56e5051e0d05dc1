"""POST /api/v1/input/* and /animations/complete — player signals.

Rejected input answers 409 with the current phase; the battle is left
untouched.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from pestilence.api.dependencies import get_engine_manager
from pestilence.api.engine_manager import EngineManager
from pestilence.api.schemas import AnimationCompleteResponse, ClickRequest, InputResponse

router = APIRouter()


def _respond(manager: EngineManager, accepted: bool, what: str) -> InputResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Battle not initialized yet.")
    if not accepted:
        raise HTTPException(
            status_code=409,
            detail=f"{what} rejected during {snapshot.phase.name}.",
        )
    return InputResponse(
        accepted=True,
        phase=snapshot.phase.name,
        currency=snapshot.currency,
        selected_id=snapshot.selected_id,
    )


@router.post("/input/click", response_model=InputResponse)
def click(
    body: ClickRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> InputResponse:
    return _respond(manager, manager.click(body.col, body.row), "Click")


@router.post("/input/infect", response_model=InputResponse)
def infect(manager: EngineManager = Depends(get_engine_manager)) -> InputResponse:
    return _respond(manager, manager.infect(), "Infect")


@router.post("/input/end-turn", response_model=InputResponse)
def end_turn(manager: EngineManager = Depends(get_engine_manager)) -> InputResponse:
    return _respond(manager, manager.end_turn(), "End turn")


@router.post("/animations/complete", response_model=AnimationCompleteResponse)
def complete_animations(
    count: int | None = Query(None, ge=1, description="Animations to acknowledge; all when omitted"),
    manager: EngineManager = Depends(get_engine_manager),
) -> AnimationCompleteResponse:
    completed = manager.complete_animations(count)
    return AnimationCompleteResponse(completed=completed, pending=len(manager.pending_animations()))
