"""Wire payloads for the spectator websocket.

Every tick the server sends ``{"type": "state", "state": <snapshot>}``;
a newly connected client first receives ``{"type": "init", ...}`` with the
same shape.  Payloads are serialized once with orjson and sent as bytes to
all clients.
"""

from __future__ import annotations

from typing import Any, Dict

import orjson

from core.simulation import Simulation


def state_message(simulation: Simulation, kind: str = "state") -> Dict[str, Any]:
    return {"type": kind, "state": simulation.get_state()}


def serialize(payload: Dict[str, Any]) -> bytes:
    return orjson.dumps(payload)


def serialize_state(simulation: Simulation, kind: str = "state") -> bytes:
    return serialize(state_message(simulation, kind))


def error_payload(message: str) -> bytes:
    return orjson.dumps({"type": "error", "error": message})
