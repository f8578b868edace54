# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from timeplanner.cli.bootstrap import create_initial_state
from timeplanner.core.state import AppState

from .fakes import DAY, FakeAlarmScheduler, FakeDateProvider, at


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the composition root.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        data_dir=tmp_path,
        planner_db_path=tmp_path / "planner.sqlite3",
        settings_db_path=tmp_path / "settings.sqlite3",
        refresh_interval_seconds=0.01,
        shift_minutes=15,
        default_templates_sort="date",
    )


@pytest.fixture()
def clock() -> FakeDateProvider:
    return FakeDateProvider(at("08:00", DAY))


@pytest.fixture()
def alarms() -> FakeAlarmScheduler:
    return FakeAlarmScheduler()


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeDateProvider, alarms: FakeAlarmScheduler) -> AppState:
    """
    AppState wired with a scripted clock and a recording alarm scheduler.

    NOTE: We keep real SQLite stores here because their correctness is part of
    what we want to test.
    """
    return create_initial_state(settings=settings, date_provider=clock, notification_scheduler=alarms)
