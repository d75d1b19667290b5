# src/devspace_client/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Every value has a sane default so the client starts against a local server.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "DEVSPACE"

# Renew at roughly 4/15 of the credential validity window.
RENEW_FRACTION = 4 / 15


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _normalize_path(raw: str, default: str) -> str:
    p = (raw or "").strip() or default
    if not p.startswith("/"):
        p = "/" + p
    return p.rstrip("/") or default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Remote API ----
    api_base_url: str
    auth_path: str
    tasks_path: str
    http_timeout_seconds: float
    offline: bool

    # ---- Session renewal ----
    credential_lifetime_seconds: float
    renew_interval_seconds: float

    # ---- Task mutation outbox ----
    outbox_max_attempts: int
    outbox_retry_delay_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "DevSpace").strip() or "DevSpace"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/devspace"))

        api_base_url = (_env(_k("API_BASE_URL"), "http://localhost:8080").strip() or "http://localhost:8080").rstrip("/")
        auth_path = _normalize_path(_env(_k("AUTH_PATH"), "/auth"), "/auth")
        tasks_path = _normalize_path(_env(_k("TASKS_PATH"), "/api"), "/api")
        http_timeout_seconds = max(0.1, _env_float(_k("HTTP_TIMEOUT_SECONDS"), 10.0))
        offline = _env_bool(_k("OFFLINE"), False)

        # Server-side access credential lives 15 minutes by default.
        credential_lifetime_seconds = _env_float(_k("CREDENTIAL_LIFETIME_SECONDS"), 900.0)
        if credential_lifetime_seconds <= 0:
            credential_lifetime_seconds = 900.0

        default_interval = credential_lifetime_seconds * RENEW_FRACTION
        renew_interval_seconds = _env_float(_k("RENEW_INTERVAL_SECONDS"), default_interval)
        if renew_interval_seconds <= 0 or renew_interval_seconds >= credential_lifetime_seconds:
            renew_interval_seconds = default_interval

        outbox_max_attempts = max(1, _env_int(_k("OUTBOX_MAX_ATTEMPTS"), 3))
        outbox_retry_delay_seconds = max(0.0, _env_float(_k("OUTBOX_RETRY_DELAY_SECONDS"), 2.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            api_base_url=api_base_url,
            auth_path=auth_path,
            tasks_path=tasks_path,
            http_timeout_seconds=http_timeout_seconds,
            offline=offline,
            credential_lifetime_seconds=credential_lifetime_seconds,
            renew_interval_seconds=renew_interval_seconds,
            outbox_max_attempts=outbox_max_attempts,
            outbox_retry_delay_seconds=outbox_retry_delay_seconds,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide Settings, reading the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
