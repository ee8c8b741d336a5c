"""Snapshot and health endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter
from fastapi.responses import Response

from backend.models import HealthResponse
from backend.state_payloads import serialize

if TYPE_CHECKING:
    from backend.app_factory import AppContext


def setup_router(ctx: "AppContext") -> APIRouter:
    router = APIRouter()

    @router.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        sim = ctx.ensure_simulation()
        return HealthResponse(
            status="ok",
            tick=sim.tick,
            fight_number=sim.fight_number,
            phase=sim.phase.value,
            clients=len(ctx.clients),
            uptime_seconds=ctx.uptime_seconds,
        )

    @router.get("/api/state")
    async def get_state() -> Response:
        """One snapshot of the current tick."""
        sim = ctx.ensure_simulation()
        return Response(content=serialize(sim.get_state()), media_type="application/json")

    return router
