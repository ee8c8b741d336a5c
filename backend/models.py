"""Pydantic models for the HTTP and WebSocket API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class BugStats(BaseModel):
    bulk: int
    speed: int
    fury: int
    instinct: int


class RosterEntry(BaseModel):
    """One roster bug as shown to clients."""

    id: str
    name: str
    stats: BugStats
    weapon: str
    defense: str
    mobility: str
    wins: int
    losses: int
    genome: Dict[str, Any]


class BreedRequest(BaseModel):
    parent_a: str
    parent_b: str


class HealthResponse(BaseModel):
    status: str
    tick: int
    fight_number: int
    phase: str
    clients: int
    uptime_seconds: float


class ClientMessage(BaseModel):
    """Message a client may send over the websocket."""

    command: str
    data: Optional[Dict[str, Any]] = None


def validate_roster(rows: List[Dict[str, Any]]) -> List[RosterEntry]:
    return [RosterEntry.model_validate(row) for row in rows]
