"""Shop purchase endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from idlerpg.api.dependencies import get_session
from idlerpg.api.schemas import CommandResponse, PurchaseRequest
from idlerpg.engine.session import GameSession

router = APIRouter(prefix="/shop")


@router.post("/potions", response_model=CommandResponse)
def buy_potions(body: PurchaseRequest, session: GameSession = Depends(get_session)) -> CommandResponse:
    result = session.purchase_potion(body.item_id, body.quantity)
    return CommandResponse(success=result.success, message=result.message)


@router.post("/equipment", response_model=CommandResponse)
def buy_equipment(body: PurchaseRequest, session: GameSession = Depends(get_session)) -> CommandResponse:
    result = session.purchase_equipment(body.item_id, body.quantity)
    return CommandResponse(success=result.success, message=result.message)
