# src/devspace_client/session/renewal.py

from __future__ import annotations

"""
Silent session renewal.

A single periodic asyncio task that, every interval_seconds, asks the session
manager to renew. Arming again cancels the previous task, so there is never
more than one timer. The loop ends on the first failed renewal; the manager
disarms the timer on its own when the session goes anonymous.

Disarming only stops the loop. A renewal request already on the wire runs
to completion in its own task; the manager discards its result if the
session moved on meanwhile.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ..core.errors import AuthError

logger = logging.getLogger(__name__)

TIMER_TASK_NAME = "devspace-session-renewal"


def _log_orphaned_renewal(task: asyncio.Task[None]) -> None:
    """Retrieve the outcome of a renewal whose timer was disarmed while it ran."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is None:
        return
    if isinstance(exc, AuthError):
        logger.info("Renewal finished after the timer stopped: %s", exc.message)
    else:
        logger.error("Renewal crashed after the timer stopped", exc_info=exc)


class RenewalTimer:
    def __init__(self, renew: Callable[[], Awaitable[None]], *, interval_seconds: float) -> None:
        self._renew = renew
        self._interval = max(0.001, float(interval_seconds))
        self._task: asyncio.Task[None] | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def armed(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self) -> None:
        """(Re)start the timer. Must be called from inside the event loop."""
        self.disarm()
        self._task = asyncio.get_running_loop().create_task(self._run(), name=TIMER_TASK_NAME)
        logger.debug("Renewal timer armed (every %.1fs)", self._interval)

    def disarm(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        logger.debug("Renewal timer disarmed")

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            await asyncio.sleep(self._interval)
            renewal = loop.create_task(self._renew(), name=f"{TIMER_TASK_NAME}-request")
            try:
                await asyncio.shield(renewal)
            except asyncio.CancelledError:
                renewal.add_done_callback(_log_orphaned_renewal)
                raise
            except AuthError as exc:
                logger.warning("Session renewal failed, timer stopped: %s", exc.message)
                return
            except Exception:
                logger.exception("Unexpected error during session renewal, timer stopped")
                return
            logger.debug("Session renewed")
