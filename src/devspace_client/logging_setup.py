# src/devspace_client/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Make interactive console usable:
    - allow most devspace_client logs
    - but keep the background renewal timer quiet unless WARNING+
    - suppress HTTP client chatter unless WARNING+
    - suppress Python warnings (captured as 'py.warnings') unless ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        # Our app logs: keep, but the renewal timer fires in the background.
        if name.startswith("devspace_client."):
            if name.startswith("devspace_client.session.renewal"):
                return record.levelno >= logging.WARNING
            return True

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        # httpx logs every request at INFO.
        if name.startswith(("httpx", "httpcore")):
            return record.levelno >= logging.WARNING

        # Any other 3rd party: only errors to console.
        return record.levelno >= logging.ERROR


LOG_FILE_NAME = "devspace.log"

# The client stays up for a whole working day; keep the log bounded.
LOG_FILE_MAX_BYTES = 2_000_000
LOG_FILE_BACKUPS = 3

# Loggers that chatter at INFO/DEBUG about every request.
_QUIET_LIBRARIES = ("httpx", "httpcore", "asyncio")


def setup_logging(
    *,
    log_dir: str | Path = ".local/devspace",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console: short lines for the interactive board, filtered (see _ConsoleNoiseFilter).
    File: full lines with logger names, size-rotated.

    Returns the log file path. Safe to call again (handlers are replaced).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt="%(asctime)s %(levelname)s %(message)s", datefmt="%H:%M:%S"))
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(file_handler)

    logging.captureWarnings(True)

    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
