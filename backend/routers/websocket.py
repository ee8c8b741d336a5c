"""WebSocket endpoint for spectators."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import orjson
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from backend.models import ClientMessage
from backend.state_payloads import error_payload, serialize, serialize_state

if TYPE_CHECKING:
    from backend.app_factory import AppContext

logger = logging.getLogger(__name__)


def _get_client_ip(websocket: WebSocket) -> str:
    forwarded_for = websocket.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if websocket.client:
        return websocket.client.host
    return "unknown"


async def _handle_message(ctx: "AppContext", websocket: WebSocket, raw_text: str) -> None:
    try:
        message = ClientMessage.model_validate(orjson.loads(raw_text))
    except (orjson.JSONDecodeError, ValidationError):
        await websocket.send_bytes(error_payload("Invalid message."))
        return

    sim = ctx.ensure_simulation()
    if message.command == "get_state":
        await websocket.send_bytes(serialize_state(sim))
    elif message.command == "get_roster":
        await websocket.send_bytes(serialize({"type": "roster", "roster": sim.get_roster()}))
    else:
        await websocket.send_bytes(error_payload(f"Unknown command: {message.command}"))


async def _handle_websocket(ctx: "AppContext", websocket: WebSocket) -> None:
    client_ip = _get_client_ip(websocket)
    await websocket.accept()
    ctx.clients.add(websocket)
    logger.info("Client %s connected (%d total)", client_ip, len(ctx.clients))

    try:
        # Initial snapshot so new clients render immediately
        await websocket.send_bytes(serialize_state(ctx.ensure_simulation(), kind="init"))

        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            if message["type"] != "websocket.receive":
                continue

            raw_text = message.get("text")
            if raw_text is None and message.get("bytes"):
                try:
                    raw_text = message["bytes"].decode("utf-8")
                except UnicodeDecodeError:
                    await websocket.send_bytes(error_payload("Invalid message encoding."))
                    continue
            if raw_text:
                await _handle_message(ctx, websocket, raw_text)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WebSocket error for client %s", client_ip)
    finally:
        ctx.clients.discard(websocket)
        logger.info("Client %s disconnected (%d remaining)", client_ip, len(ctx.clients))


def setup_router(ctx: "AppContext") -> APIRouter:
    """Create the websocket router bound to an app context."""
    router = APIRouter()

    @router.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await _handle_websocket(ctx, websocket)

    return router
