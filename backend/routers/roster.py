"""Roster endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

from fastapi import APIRouter, HTTPException, status

from backend.models import BreedRequest, RosterEntry, validate_roster
from core.exceptions import RosterError

if TYPE_CHECKING:
    from backend.app_factory import AppContext

logger = logging.getLogger(__name__)


def setup_router(ctx: "AppContext") -> APIRouter:
    router = APIRouter(prefix="/api/roster", tags=["roster"])

    @router.get("", response_model=List[RosterEntry])
    async def get_roster() -> List[RosterEntry]:
        sim = ctx.ensure_simulation()
        return validate_roster(sim.get_roster())

    @router.post("/breed", response_model=RosterEntry, status_code=status.HTTP_201_CREATED)
    async def breed(request: BreedRequest) -> RosterEntry:
        ctx.ensure_simulation()
        try:
            child = ctx.roster.breed_new_bug(request.parent_a, request.parent_b)
        except RosterError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        logger.info("Bred new bug %s (%s)", child.name, child.id)
        return RosterEntry.model_validate(child.to_client())

    return router
