"""FastAPI application factory. The lifespan owns the EngineManager."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pestilence import __version__
from pestilence.api.dependencies import set_engine_manager
from pestilence.api.engine_manager import EngineManager
from pestilence.api.routes import api_router
from pestilence.config import SimulationConfig
from pestilence.utils.logging import setup_logging

logger = logging.getLogger(__name__)

DESCRIPTION = (
    "Turn-based grid tactics rules engine — driving and inspection API.\n\n"
    "## API Groups\n\n"
    "- **State** — Live battle state: combatants, overlays, pending animations, events\n"
    "- **Map** — Terrain and obstacles of the current level\n"
    "- **Control** — Engine lifecycle: start, pause, resume, step, reset\n"
    "- **Input** — Player signals: cell clicks, infect, end turn, animation acknowledgements\n"
    "- **Config** — Read-only battle configuration\n"
)

OPENAPI_TAGS = [
    {"name": "State", "description": "Live battle state polled by the presentation layer."},
    {"name": "Map", "description": "Terrain grid and obstacles. Changes only on level transition."},
    {"name": "Control", "description": "Battle lifecycle: start, pause, resume, single-step and reset."},
    {"name": "Input", "description": "Player input and presentation acknowledgements. "
                                     "Only honoured during the Parasites phase while no animation is pending."},
    {"name": "Config", "description": "Read-only battle configuration."},
]


def create_app(config: SimulationConfig | None = None) -> FastAPI:
    """Build the app; the battle starts when the server starts."""
    battle_config = config if config is not None else SimulationConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(battle_config.log_level)
        manager = EngineManager(battle_config)
        set_engine_manager(manager)
        manager.start()
        logger.info("Serving level %d", battle_config.start_level)
        try:
            yield
        finally:
            manager.stop()
            set_engine_manager(None)
            logger.info("Battle server stopped")

    app = FastAPI(
        title="Pestilence Rules Engine",
        description=DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    # The presentation layer may be served from any local origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    return app
