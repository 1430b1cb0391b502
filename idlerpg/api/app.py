"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from idlerpg.api.dependencies import set_session
from idlerpg.api.routes import api_router
from idlerpg.config import GameConfig
from idlerpg.core.errors import NoCharacterError, UnknownMonsterError
from idlerpg.engine.scheduler import ThreadScheduler
from idlerpg.engine.session import GameSession
from idlerpg.persistence.store import JsonFileStore
from idlerpg.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: GameConfig | None = None, session: GameSession | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    Passing *session* skips building one in the lifespan; tests use this to
    drive the API with a manual clock and an in-memory store.
    """
    if config is None:
        config = GameConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = session is None
        if owned:
            setup_logging(_config.log_level)
            active = GameSession(_config, ThreadScheduler(), JsonFileStore(_config.save_path))
        else:
            active = session
        set_session(active)
        logger.info("API server started — save file %s", _config.save_path if owned else "(injected)")
        yield
        if owned:
            active.shutdown()
        set_session(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Idle RPG Engine",
        description=(
            "Idle combat and progression engine.\n\n"
            "## API Groups\n\n"
            "- **State** — Full game snapshot and event feed\n"
            "- **Character** — Character creation\n"
            "- **Combat** — Encounters, zones and continuous mode\n"
            "- **Quests** — Quest board, accept and turn-in\n"
            "- **Inventory** — Grid, equipment and macro settings\n"
            "- **Shop** — Potion and equipment purchases\n"
            "- **Control** — Game reset\n"
            "- **Metadata** — Static catalogs: items, monsters, zones, quests\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(UnknownMonsterError)
    async def _unknown_monster(request: Request, exc: UnknownMonsterError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NoCharacterError)
    async def _no_character(request: Request, exc: NoCharacterError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    app.include_router(api_router)
    return app
