"""Application factory and context for the Bug Fights API.

All runtime state (the simulation, connected clients, the tick task) lives in
an ``AppContext`` attached to ``app.state.context`` instead of module-level
globals, so each test can build its own app.

Usage:
    # Production (settings from environment)
    app = create_app()

    # Tests
    app = create_app(context=AppContext(simulation=my_sim), start_tick_loop=False)
"""

from __future__ import annotations

import asyncio
import logging
import os
import random
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import List, Optional, Set

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from backend.logging_config import configure_logging
from backend.roster_autosave import start_autosave, stop_autosave
from backend.tick_loop import start_tick_loop as _start_tick_loop
from backend.tick_loop import stop_tick_loop
from core.config.server import DEFAULT_API_PORT, DEFAULT_ROSTER_SIZE, ROSTER_AUTOSAVE_SECONDS
from core.config.simulation_config import SimulationConfig
from core.roster import RosterManager
from core.simulation import Simulation


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


@dataclass
class AppContext:
    """Runtime context holding all application state."""

    simulation: Optional[Simulation] = None
    roster: Optional[RosterManager] = None
    clients: Set[WebSocket] = field(default_factory=set)
    tick_task: Optional[asyncio.Task] = None
    autosave_task: Optional[asyncio.Task] = None

    # Configuration
    api_port: int = field(default_factory=lambda: _env_int("BUGFIGHTS_API_PORT", DEFAULT_API_PORT))
    roster_file: Optional[str] = field(default_factory=lambda: os.getenv("BUGFIGHTS_ROSTER_FILE") or None)
    roster_size: int = field(default_factory=lambda: _env_int("BUGFIGHTS_ROSTER_SIZE", DEFAULT_ROSTER_SIZE))
    production_mode: bool = field(
        default_factory=lambda: os.getenv("PRODUCTION", "false").lower() == "true"
    )
    allowed_origins: List[str] = field(
        default_factory=lambda: os.getenv("ALLOWED_ORIGINS", "*").split(",")
    )
    autosave_interval: float = field(
        default_factory=lambda: float(os.getenv("BUGFIGHTS_AUTOSAVE_SECONDS", str(ROSTER_AUTOSAVE_SECONDS)))
    )
    seed: Optional[int] = None

    server_start_time: float = field(default_factory=time.time)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("backend"))

    def ensure_simulation(self) -> Simulation:
        """Build the roster and simulation on first use."""
        if self.simulation is None:
            rng = random.Random(self.seed)
            if self.roster is None:
                self.roster = RosterManager(self.roster_file, roster_size=self.roster_size, rng=rng)
            self.simulation = Simulation(self.roster, config=SimulationConfig.from_env(), rng=rng)
            self.logger.info(
                "Simulation ready: %d bugs in roster, fight #%d",
                len(self.roster),
                self.simulation.fight_number,
            )
        return self.simulation

    @property
    def uptime_seconds(self) -> float:
        return time.time() - self.server_start_time


def create_app(
    *,
    context: Optional[AppContext] = None,
    production_mode: Optional[bool] = None,
    start_tick_loop: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Pre-built AppContext (for testing). If None, creates a new one.
        production_mode: Override production mode (default: PRODUCTION env var)
        start_tick_loop: Whether the lifespan starts the 30 Hz tick task

    Returns:
        Configured FastAPI application with context attached as app.state.context
    """
    logger = configure_logging(extra_loggers=("backend",))

    if context is None:
        context = AppContext()
    if production_mode is not None:
        context.production_mode = production_mode
    context.logger = logger

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx: AppContext = app.state.context
        try:
            ctx.ensure_simulation()
            if start_tick_loop:
                _start_tick_loop(ctx)
                start_autosave(ctx)
            ctx.logger.info("LIFESPAN: Startup complete")
            yield
            ctx.logger.info("LIFESPAN: Received shutdown signal")
        except Exception as e:
            ctx.logger.error("Exception in lifespan startup: %s", e, exc_info=True)
            raise
        finally:
            await stop_tick_loop(ctx)
            await stop_autosave(ctx)

    app = FastAPI(
        title="Bug Fights API",
        lifespan=lifespan,
        docs_url=None if context.production_mode else "/docs",
        redoc_url=None if context.production_mode else "/redoc",
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.allowed_origins if context.production_mode else ["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    _setup_routers(app, context)
    return app


def _setup_routers(app: FastAPI, ctx: AppContext) -> None:
    """Include all API routers."""
    from backend.routers import roster, state, websocket

    app.include_router(state.setup_router(ctx))
    app.include_router(roster.setup_router(ctx))
    app.include_router(websocket.setup_router(ctx))
