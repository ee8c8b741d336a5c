"""Background roster persistence.

Fight results only mark the roster dirty.  This task flushes it every few
seconds: the snapshot is captured on the event loop (the only thread that
mutates the roster) and written to disk in the default thread pool so the
tick loop never waits on the filesystem.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from backend.app_factory import AppContext

logger = logging.getLogger(__name__)


async def save_roster_now(ctx: "AppContext") -> bool:
    """Write unsaved roster changes off the event loop.

    Returns:
        True when a snapshot was written
    """
    roster = ctx.roster
    if roster is None or roster.path is None:
        return False

    snapshot = roster.capture_state_for_save()
    if snapshot is None:
        return False

    loop = asyncio.get_running_loop()
    saved = await loop.run_in_executor(None, roster.write_snapshot, snapshot)
    if saved:
        logger.debug("Roster saved to %s", roster.path)
    return saved


async def run_autosave_loop(ctx: "AppContext", interval: float) -> None:
    """Flush the roster every ``interval`` seconds until cancelled."""
    logger.info("Roster auto-save started (every %.0fs)", interval)
    try:
        while True:
            await asyncio.sleep(interval)
            try:
                await save_roster_now(ctx)
            except Exception as e:
                logger.error("Error during roster auto-save: %s", e, exc_info=True)
    except asyncio.CancelledError:
        logger.info("Roster auto-save cancelled")
        raise


def start_autosave(ctx: "AppContext") -> asyncio.Task:
    if ctx.autosave_task is not None and not ctx.autosave_task.done():
        return ctx.autosave_task
    task = asyncio.create_task(run_autosave_loop(ctx, ctx.autosave_interval), name="bugfights_roster_autosave")
    ctx.autosave_task = task
    return task


async def stop_autosave(ctx: "AppContext") -> None:
    """Cancel the auto-save task and write any remaining changes."""
    task = ctx.autosave_task
    if task is not None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        ctx.autosave_task = None
    await save_roster_now(ctx)
