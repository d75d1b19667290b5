# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio

from devspace_client.api.offline import OFFLINE_BASE_URL
from devspace_client.core.state import AppState

from .fakes import FlakyBackend, build_state


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="DevSpace",
        data_dir=tmp_path / "devspace",
        api_base_url=OFFLINE_BASE_URL,
        auth_path="/auth",
        tasks_path="/api",
        http_timeout_seconds=5.0,
        offline=False,
        # Long enough that the timer never fires unless a test shortens it.
        renew_interval_seconds=3600.0,
        outbox_max_attempts=3,
        outbox_retry_delay_seconds=0.0,
    )


@pytest.fixture()
def backend() -> FlakyBackend:
    return FlakyBackend()


@pytest_asyncio.fixture()
async def state(settings: SimpleNamespace, backend: FlakyBackend) -> AppState:
    """
    AppState wired to the in-process backend.

    NOTE: the real transport/cookie jar is used; only the network is replaced.
    """
    app_state = build_state(settings, backend)
    yield app_state
    await app_state.aclose()
