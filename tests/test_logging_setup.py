# tests/test_logging_setup.py

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from timeplanner.logging_setup import _PlannerConsoleFilter, setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        ours = type(handler) is logging.FileHandler or any(
            isinstance(f, _PlannerConsoleFilter) for f in handler.filters
        )
        if ours:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.captureWarnings(False)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("timeplanner.cli.commands", logging.DEBUG, True),
        ("timeplanner.schedules.refresh_loop", logging.INFO, False),
        ("timeplanner.schedules.refresh_loop", logging.WARNING, True),
        ("timeplanner.schedules.schedule_store", logging.DEBUG, False),
        ("timeplannerx", logging.WARNING, False),
        ("py.warnings", logging.WARNING, False),
        ("asyncio", logging.ERROR, True),
    ],
)
def test_console_filter(name, level, shown) -> None:
    record = logging.makeLogRecord({"name": name, "levelno": level})
    assert _PlannerConsoleFilter().filter(record) is shown


def test_setup_logging_follows_settings(tmp_path, restore_root_logging) -> None:
    settings = SimpleNamespace(
        log_level="warning",
        file_log_level="INFO",
        log_file=tmp_path / "logs" / "planner.log",
    )

    log_file = setup_logging(settings)
    logging.getLogger("timeplanner.test").debug("hidden detail")
    logging.getLogger("timeplanner.test").info("schedule loaded")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file == settings.log_file
    text = log_file.read_text(encoding="utf-8")
    assert "schedule loaded" in text
    assert "hidden detail" not in text

    levels = sorted(h.level for h in logging.getLogger().handlers)
    assert levels == [logging.INFO, logging.WARNING]


def test_unknown_level_names_fall_back(tmp_path, restore_root_logging) -> None:
    settings = SimpleNamespace(log_level="chatty", file_log_level=None, log_file=tmp_path / "p.log")

    setup_logging(settings)

    levels = sorted(h.level for h in logging.getLogger().handlers)
    assert levels == [logging.DEBUG, logging.INFO]
