"""Combat endpoints — start, flee, close, fight again, continuous mode, zones."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends

from idlerpg.api.dependencies import get_session
from idlerpg.api.routes.state import serialize_encounter
from idlerpg.api.schemas import (
    CommandResponse,
    ContinuousRequest,
    EncounterSchema,
    StartCombatRequest,
    ZoneRequest,
)
from idlerpg.engine.session import GameSession

router = APIRouter()


class CombatAction(str, Enum):
    flee = "flee"
    close = "close"
    again = "again"


@router.get("/combat", response_model=EncounterSchema | None)
def get_encounter(session: GameSession = Depends(get_session)) -> EncounterSchema | None:
    view = session.encounter_view()
    return serialize_encounter(view) if view else None


@router.post("/combat/start", response_model=CommandResponse)
def start_combat(
    body: StartCombatRequest,
    session: GameSession = Depends(get_session),
) -> CommandResponse:
    result = session.start_encounter(body.monster_id)
    return CommandResponse(success=result.success, message=result.message)


@router.post("/combat/continuous", response_model=CommandResponse)
def set_continuous(
    body: ContinuousRequest,
    session: GameSession = Depends(get_session),
) -> CommandResponse:
    result = session.set_continuous_combat(body.enabled)
    return CommandResponse(success=result.success, message=result.message)


@router.post("/combat/{action}", response_model=CommandResponse)
def combat_action(
    action: CombatAction,
    session: GameSession = Depends(get_session),
) -> CommandResponse:
    match action:
        case CombatAction.flee:
            result = session.flee()
        case CombatAction.close:
            result = session.close_encounter()
        case CombatAction.again:
            result = session.fight_again()
    return CommandResponse(success=result.success, message=result.message)


@router.post("/zone", response_model=CommandResponse)
def select_zone(
    body: ZoneRequest,
    session: GameSession = Depends(get_session),
) -> CommandResponse:
    result = session.select_zone(body.zone_id)
    return CommandResponse(success=result.success, message=result.message)
