# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from timeplanner.config import Settings


def test_settings_defaults(monkeypatch) -> None:
    for name in (
        "TIMEPLANNER_DATA_DIR",
        "TIMEPLANNER_PLANNER_DB_PATH",
        "TIMEPLANNER_LOG_FILE",
        "TIMEPLANNER_REFRESH_INTERVAL_SECONDS",
        "TIMEPLANNER_SHIFT_MINUTES",
        "TIMEPLANNER_DEFAULT_TEMPLATES_SORT",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.data_dir == Path(".local/timeplanner")
    assert settings.planner_db_path == Path(".local/timeplanner/planner.sqlite3")
    assert settings.log_file == Path(".local/timeplanner/timeplanner.log")
    assert settings.refresh_interval_seconds == 1.0
    assert settings.shift_minutes == 15
    assert settings.default_templates_sort == "date"


def test_settings_from_env_with_fallbacks(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("TIMEPLANNER_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TIMEPLANNER_PLANNER_DB_PATH", raising=False)
    monkeypatch.setenv("TIMEPLANNER_REFRESH_INTERVAL_SECONDS", "0")
    monkeypatch.setenv("TIMEPLANNER_SHIFT_MINUTES", "abc")
    monkeypatch.setenv("TIMEPLANNER_CONSOLE_ENABLED", "off")
    monkeypatch.setenv("TIMEPLANNER_DEFAULT_TEMPLATES_SORT", " Duration ")

    settings = Settings.from_env()

    assert settings.planner_db_path == tmp_path / "planner.sqlite3"
    assert settings.refresh_interval_seconds == 0.1
    assert settings.shift_minutes == 15
    assert settings.console_enabled is False
    assert settings.default_templates_sort == "duration"
