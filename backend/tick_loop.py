"""Fixed-rate tick loop: advance the simulation and broadcast each state."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from backend.state_payloads import serialize_state
from core.config.server import BROADCAST_BUDGET_MS, SERIALIZE_BUDGET_MS, STATUS_LOG_INTERVAL_SECONDS
from core.config.simulation import TICK_MS

if TYPE_CHECKING:
    from backend.app_factory import AppContext

logger = logging.getLogger("backend.tick_loop")


def _handle_task_exception(task: asyncio.Task) -> None:
    """Log exceptions from the background tick task."""
    try:
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Unhandled exception in task %s: %s",
                task.get_name(),
                exc,
                exc_info=(type(exc), exc, exc.__traceback__),
            )
    except asyncio.CancelledError:
        logger.debug("Task %s was cancelled", task.get_name())


async def broadcast(ctx: "AppContext", payload: bytes) -> int:
    """Send one payload to every client; drop clients whose send fails.

    Returns:
        Number of clients removed
    """
    disconnected = set()
    send_start = time.perf_counter()
    for client in list(ctx.clients):
        try:
            await client.send_bytes(payload)
        except Exception as e:
            logger.warning("Error sending to client, marking for removal: %s", e)
            disconnected.add(client)

    send_ms = (time.perf_counter() - send_start) * 1000
    if send_ms > BROADCAST_BUDGET_MS:
        logger.warning("Broadcasting to %d clients took %.2f ms", len(ctx.clients), send_ms)

    for client in disconnected:
        ctx.clients.discard(client)
    if disconnected:
        logger.info("Removed %d disconnected clients", len(disconnected))
    return len(disconnected)


def step(ctx: "AppContext") -> bytes:
    """Advance one tick and return the serialized state."""
    simulation = ctx.simulation
    simulation.update()

    serialize_start = time.perf_counter()
    payload = serialize_state(simulation)
    serialize_ms = (time.perf_counter() - serialize_start) * 1000
    if serialize_ms > SERIALIZE_BUDGET_MS:
        logger.warning("Serialization exceeded budget %.2f ms (tick %d)", serialize_ms, simulation.tick)
    return payload


async def run_tick_loop(ctx: "AppContext") -> None:
    """Tick at a fixed rate forever; errors in one tick never stop the loop."""
    interval = TICK_MS / 1000
    next_tick = time.perf_counter()
    last_status = time.perf_counter()
    ticks_since_status = 0
    logger.info("Tick loop started (%.1f ms per tick)", TICK_MS)

    try:
        while True:
            try:
                payload = step(ctx)
                ticks_since_status += 1
                if ctx.clients:
                    await broadcast(ctx, payload)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("Unexpected error in tick loop: %s", e, exc_info=True)

            now = time.perf_counter()
            if now - last_status >= STATUS_LOG_INTERVAL_SECONDS:
                sim = ctx.simulation
                logger.info(
                    "Tick %d | Fight #%d | %s | %d clients | %.1f ticks/s",
                    sim.tick,
                    sim.fight_number,
                    sim.phase.value,
                    len(ctx.clients),
                    ticks_since_status / (now - last_status),
                )
                last_status = now
                ticks_since_status = 0

            next_tick += interval
            delay = next_tick - time.perf_counter()
            if delay < 0:
                # Fell behind; resync instead of bursting to catch up
                next_tick = time.perf_counter()
                delay = 0
            await asyncio.sleep(delay)
    except asyncio.CancelledError:
        logger.info("Tick loop cancelled")
        raise


def start_tick_loop(ctx: "AppContext") -> asyncio.Task:
    if ctx.tick_task is not None and not ctx.tick_task.done():
        return ctx.tick_task
    task = asyncio.create_task(run_tick_loop(ctx), name="bugfights_tick_loop")
    task.add_done_callback(_handle_task_exception)
    ctx.tick_task = task
    return task


async def stop_tick_loop(ctx: "AppContext") -> None:
    task = ctx.tick_task
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    ctx.tick_task = None
