"""Inventory grid, equipment and macro endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from idlerpg.api.dependencies import get_session
from idlerpg.api.schemas import (
    CommandResponse,
    CoordSchema,
    EquipRequest,
    MacroPatch,
    SwapRequest,
    UnequipRequest,
    UseItemRequest,
)
from idlerpg.core.inventory import GridCoord
from idlerpg.engine.session import GameSession

router = APIRouter()


def _coord(c: CoordSchema) -> GridCoord:
    return GridCoord(c.row, c.col)


@router.post("/inventory/swap", response_model=CommandResponse)
def swap(body: SwapRequest, session: GameSession = Depends(get_session)) -> CommandResponse:
    result = session.swap(_coord(body.a), _coord(body.b))
    return CommandResponse(success=result.success, message=result.message)


@router.post("/inventory/use", response_model=CommandResponse)
def use_item(body: UseItemRequest, session: GameSession = Depends(get_session)) -> CommandResponse:
    result = session.use_item(_coord(body.coord))
    return CommandResponse(success=result.success, message=result.message)


@router.post("/equipment/equip", response_model=CommandResponse)
def equip(body: EquipRequest, session: GameSession = Depends(get_session)) -> CommandResponse:
    result = session.equip(body.slot, _coord(body.coord))
    return CommandResponse(success=result.success, message=result.message)


@router.post("/equipment/unequip", response_model=CommandResponse)
def unequip(body: UnequipRequest, session: GameSession = Depends(get_session)) -> CommandResponse:
    result = session.unequip(body.slot)
    return CommandResponse(success=result.success, message=result.message)


@router.patch("/macro", response_model=CommandResponse)
def update_macro(body: MacroPatch, session: GameSession = Depends(get_session)) -> CommandResponse:
    kwargs = {}
    if "potion_slot" in body.model_fields_set:
        kwargs["potion_slot"] = _coord(body.potion_slot) if body.potion_slot else None
    result = session.update_macro(enabled=body.enabled, hp_threshold=body.hp_threshold, **kwargs)
    return CommandResponse(success=result.success, message=result.message)
