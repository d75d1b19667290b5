# tests/test_config.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from devspace_client.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("DEVSPACE_"):
            monkeypatch.delenv(name, raising=False)


def test_defaults_point_at_local_server() -> None:
    s = Settings.from_env()
    assert s.api_base_url == "http://localhost:8080"
    assert s.auth_path == "/auth"
    assert s.tasks_path == "/api"
    assert s.offline is False
    assert s.data_dir == Path(".local/devspace")
    assert s.credential_lifetime_seconds == 900.0
    # 4/15 of a 15 minute credential: every 4 minutes.
    assert s.renew_interval_seconds == pytest.approx(240.0)
    assert s.outbox_max_attempts == 3


def test_renew_interval_follows_credential_lifetime(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVSPACE_CREDENTIAL_LIFETIME_SECONDS", "3600")
    assert Settings.from_env().renew_interval_seconds == pytest.approx(960.0)


def test_renew_interval_must_be_shorter_than_lifetime(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVSPACE_RENEW_INTERVAL_SECONDS", "1200")
    assert Settings.from_env().renew_interval_seconds == pytest.approx(240.0)

    monkeypatch.setenv("DEVSPACE_RENEW_INTERVAL_SECONDS", "60")
    assert Settings.from_env().renew_interval_seconds == pytest.approx(60.0)


def test_malformed_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVSPACE_OUTBOX_MAX_ATTEMPTS", "many")
    monkeypatch.setenv("DEVSPACE_HTTP_TIMEOUT_SECONDS", "soon")
    s = Settings.from_env()
    assert s.outbox_max_attempts == 3
    assert s.http_timeout_seconds == 10.0


def test_paths_and_urls_are_normalized(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVSPACE_API_BASE_URL", "https://tasks.example.com/")
    monkeypatch.setenv("DEVSPACE_AUTH_PATH", "session/")
    monkeypatch.setenv("DEVSPACE_OFFLINE", "yes")
    s = Settings.from_env()
    assert s.api_base_url == "https://tasks.example.com"
    assert s.auth_path == "/session"
    assert s.offline is True
