# src/devspace_client/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) log directory exists,
- wires the transport, the session manager and the task sync controller
  into AppState around one shared Session object.
"""

from __future__ import annotations

import logging

import httpx

from ..api.auth_api import AuthApi
from ..api.offline import OFFLINE_BASE_URL, OfflineBackend
from ..api.task_api import TaskApi
from ..api.transport import HttpTransport
from ..config import get_settings
from ..core.state import AppState
from ..session.manager import SessionLifecycleManager
from ..tasks.task_sync import TaskSyncController

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, transport: httpx.AsyncBaseTransport | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the low-level httpx transport injectable makes the
    app easier to test. If settings is None, falls back to get_settings().
    With settings.offline the in-process demo backend answers every request.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    base_url = settings.api_base_url
    if transport is None and settings.offline:
        backend = OfflineBackend(auth_path=settings.auth_path, tasks_path=settings.tasks_path)
        transport = backend.transport()
        base_url = OFFLINE_BASE_URL
        logger.info("Offline demo mode: using the in-process backend")

    http = HttpTransport(
        base_url,
        timeout_seconds=settings.http_timeout_seconds,
        transport=transport,
    )

    sessions = SessionLifecycleManager(
        AuthApi(http, base_path=settings.auth_path),
        renew_interval_seconds=settings.renew_interval_seconds,
    )
    tasks = TaskSyncController(
        sessions.session,
        TaskApi(http, base_path=settings.tasks_path),
        max_attempts=settings.outbox_max_attempts,
        retry_delay_seconds=settings.outbox_retry_delay_seconds,
    )
    sessions.subscribe(tasks.on_session_changed)

    state = AppState(settings=settings, transport=http, sessions=sessions, tasks=tasks)
    tasks.on_failure = state.unseen_failures.append
    return state
