"""POST /api/v1/control/{action} — game lifecycle controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends

from idlerpg.api.dependencies import get_session
from idlerpg.api.schemas import CommandResponse
from idlerpg.engine.session import GameSession

router = APIRouter()


class ControlAction(str, Enum):
    reset = "reset"


@router.post("/control/{action}", response_model=CommandResponse)
def control(
    action: ControlAction,
    session: GameSession = Depends(get_session),
) -> CommandResponse:
    match action:
        case ControlAction.reset:
            result = session.reset_game()
    return CommandResponse(success=result.success, message=result.message)
