# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from taskdeck.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_app_logs_and_only_errors_from_others() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("taskdeck.storage.sqlite_documents", logging.DEBUG))
    assert f.filter(_record("taskdeck.board.project_store", logging.INFO))

    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert not f.filter(_record("asyncio", logging.WARNING))
    assert f.filter(_record("asyncio", logging.ERROR))
    # Prefix match needs the dot: a look-alike package is third-party.
    assert not f.filter(_record("taskdeckish", logging.INFO))


def test_setup_logging_writes_file_and_replaces_handlers(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        setup_logging(log_dir=tmp_path / "logs")
        assert len(root.handlers) == 2

        logging.getLogger("taskdeck.test").debug("hello file")
        for h in root.handlers:
            h.flush()

        assert log_file == tmp_path / "logs" / "taskdeck.log"
        assert "hello file" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
