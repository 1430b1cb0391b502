"""Quest board endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from idlerpg.api.dependencies import get_session
from idlerpg.api.routes.state import serialize_quest
from idlerpg.api.schemas import AcceptQuestRequest, CommandResponse, QuestCompletionResponse, QuestSchema
from idlerpg.engine.session import GameSession

router = APIRouter(prefix="/quests")


@router.get("/available", response_model=QuestSchema | None)
def available_quest(session: GameSession = Depends(get_session)) -> QuestSchema | None:
    """The single quest currently on offer, if any."""
    quest = session.available_quest()
    return serialize_quest(quest) if quest else None


@router.post("/accept", response_model=CommandResponse)
def accept_quest(
    body: AcceptQuestRequest,
    session: GameSession = Depends(get_session),
) -> CommandResponse:
    result = session.accept_quest(body.quest_id)
    return CommandResponse(success=result.success, message=result.message)


@router.post("/complete", response_model=QuestCompletionResponse)
def complete_quest(session: GameSession = Depends(get_session)) -> QuestCompletionResponse:
    result = session.complete_quest()
    return QuestCompletionResponse(
        success=result.success,
        message=result.message,
        gold=result.gold,
        exp=result.exp,
        item_added=result.item_added,
        levels_gained=result.levels_gained,
    )
