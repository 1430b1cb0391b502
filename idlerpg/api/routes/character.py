"""POST /api/v1/character — character creation."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from idlerpg.api.dependencies import get_session
from idlerpg.api.schemas import CommandResponse, CreateCharacterRequest
from idlerpg.engine.session import GameSession

router = APIRouter()


@router.post("/character", response_model=CommandResponse)
def create_character(
    body: CreateCharacterRequest,
    session: GameSession = Depends(get_session),
) -> CommandResponse:
    result = session.create_character(body.name, body.char_class, body.race)
    return CommandResponse(success=result.success, message=result.message)
