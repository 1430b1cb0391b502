"""Versioned API route modules."""

from fastapi import APIRouter

from idlerpg.api.routes.character import router as character_router
from idlerpg.api.routes.combat import router as combat_router
from idlerpg.api.routes.control import router as control_router
from idlerpg.api.routes.inventory import router as inventory_router
from idlerpg.api.routes.metadata import router as metadata_router
from idlerpg.api.routes.quests import router as quests_router
from idlerpg.api.routes.shop import router as shop_router
from idlerpg.api.routes.state import router as state_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(state_router, tags=["State"])
api_router.include_router(character_router, tags=["Character"])
api_router.include_router(combat_router, tags=["Combat"])
api_router.include_router(quests_router, tags=["Quests"])
api_router.include_router(inventory_router, tags=["Inventory"])
api_router.include_router(shop_router, tags=["Shop"])
api_router.include_router(control_router, tags=["Control"])
api_router.include_router(metadata_router)

__all__ = ["api_router"]
