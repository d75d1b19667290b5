# src/devspace_client/connectors/console_connector.py

from __future__ import annotations

import asyncio
import getpass
import logging
from datetime import datetime

from ..cli.commands import CommandIO, registry as command_registry
from ..core.errors import friendly_error_message
from ..core.state import AppState
from ..tasks.outbox import MutationKind

logger = logging.getLogger(__name__)

BANNER = "Build better software together. Type /help for commands, /exit to quit."


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _report_sync_failures(state: AppState) -> None:
    """Show outbox give-ups that happened since the last prompt."""
    if not state.unseen_failures:
        return
    for failure in state.unseen_failures:
        what = "status change" if failure.kind is MutationKind.SET_STATUS else "deletion"
        _print_ts(
            f"[SYNC] Could not save {what} of task {failure.task_id[:8]} "
            f"({friendly_error_message(failure.error)}). The change was undone."
        )
    state.unseen_failures.clear()


async def _prompt_secret(prompt: str) -> str:
    return await asyncio.to_thread(getpass.getpass, prompt)


async def run_console_loop(state: AppState) -> None:
    """
    Read-eval-print loop on top of the event loop.

    input() runs in a worker thread so the renewal timer and the outbox keep
    running while the user types.
    """
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "DevSpace"))
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] {BANNER}\n")

    io = CommandIO(emit=_print_ts, prompt_secret=_prompt_secret)
    was_active = state.sessions.is_session_active()

    while True:
        _report_sync_failures(state)

        # The session can end in the background (failed renewal).
        active = state.sessions.is_session_active()
        if was_active and not active:
            reason = state.sessions.session.last_error or "Session ended."
            _print_ts(f"[SESSION] {reason}")
        was_active = active

        try:
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            _print_ts("Commands start with '/'. Use /help to list them.")
            continue

        try:
            reply = await command_registry.handle(state, user_input, io)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(f"[{_ts_local()}] {reply}", flush=True)
        was_active = state.sessions.is_session_active()

    logger.info("Console connector finished.")
