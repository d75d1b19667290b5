# src/devspace_client/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console connector on a
single asyncio event loop (the session renewal timer and the task outbox
share that loop).
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Best-effort shutdown: leave the server session alone, just stop local work."""
    try:
        pending = len(state.tasks.outbox)
        if pending:
            logger.info("Waiting for %d pending task change(s)...", pending)
            await asyncio.wait_for(state.tasks.flush(), timeout=5.0)
    except asyncio.TimeoutError:
        logger.warning("Pending task changes were not confirmed before exit.")
    except Exception:
        logger.exception("Failed to flush pending task changes.")

    try:
        await state.aclose()
    except Exception:
        logger.debug("Transport close failed.", exc_info=True)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)
    try:
        await run_console_loop(state)
    finally:
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_file = setup_logging(log_dir=settings.data_dir, console_level=console_level)
    logger.debug("Writing logs to %s", log_file)

    logger.info("Starting %s (server: %s)...", settings.app_name, "offline demo" if settings.offline else settings.api_base_url)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
