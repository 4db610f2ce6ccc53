# src/taskdeck/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console gets every taskdeck record; other loggers (third-party, py.warnings)
    only from ERROR up. The log file is unfiltered.
    """

    def __init__(self, app_prefix: str = "taskdeck") -> None:
        super().__init__()
        self._app_prefix = app_prefix + "."

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(self._app_prefix):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskdeck",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_file_name: str = "taskdeck.log",
) -> Path:
    """
    Send logs to stderr (filtered, console_level) and to <log_dir>/<log_file_name>
    (everything from file_level). Replaces any handlers already on the root logger,
    so calling it twice does not duplicate output. Returns the log file path.
    """
    log_file = Path(log_dir) / log_file_name
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for existing in list(root.handlers):
        root.removeHandler(existing)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_ConsoleNoiseFilter())

    to_file = logging.FileHandler(str(log_file), encoding="utf-8")
    to_file.setLevel(file_level)

    for handler in (console, to_file):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # warnings.warn(...) arrives as the 'py.warnings' logger.
    logging.captureWarnings(True)
    return log_file
