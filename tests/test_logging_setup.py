# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from devspace_client.logging_setup import LOG_FILE_NAME, _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_background_renewal_quiet() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("devspace_client.tasks.task_sync", logging.INFO))
    assert not f.filter(_record("devspace_client.session.renewal", logging.INFO))
    assert f.filter(_record("devspace_client.session.renewal", logging.WARNING))
    assert not f.filter(_record("httpx", logging.INFO))
    assert not f.filter(_record("some.library", logging.WARNING))


def test_setup_logging_writes_full_records_to_the_log_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        assert log_file == tmp_path / "logs" / LOG_FILE_NAME

        logging.getLogger("devspace_client.session.renewal").debug("renewed quietly")
        for h in root.handlers:
            h.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "devspace_client.session.renewal: renewed quietly" in text

        # Calling again replaces handlers instead of stacking them.
        setup_logging(log_dir=tmp_path / "logs")
        assert len(root.handlers) == 2
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
