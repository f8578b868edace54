# src/timeplanner/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

PACKAGE = "timeplanner"

# Modules that log on every refresh tick; the console only shows their warnings.
TICK_LOGGERS = (
    "timeplanner.schedules.refresh_loop",
    "timeplanner.schedules.schedule_store",
)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _level(raw: object, default: int) -> int:
    if isinstance(raw, int):
        return raw
    value = logging.getLevelName(str(raw or "").strip().upper())
    return value if isinstance(value, int) else default


class _PlannerConsoleFilter(logging.Filter):
    """Planner logs pass (tick loggers from WARNING); everything else only from ERROR."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith(TICK_LOGGERS):
            return record.levelno >= logging.WARNING
        if name == PACKAGE or name.startswith(PACKAGE + "."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(settings) -> Path:
    """
    Install the console and file handlers described by `settings`.

    Reads settings.log_level (console), settings.file_log_level and settings.log_file.
    Previous root handlers are replaced. Returns the log file path.
    """
    log_file = Path(settings.log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(_level(settings.log_level, logging.INFO))
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    console.addFilter(_PlannerConsoleFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(_level(settings.file_log_level, logging.DEBUG))
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
