# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Keep machine-specific values in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TIMEPLANNER_APP_NAME": "App display name (default: timeplanner).",
    "TIMEPLANNER_LOG_LEVEL": "Console logging level (default: INFO).",
    "TIMEPLANNER_FILE_LOG_LEVEL": "Log file level (default: DEBUG).",
    # Connectors
    "TIMEPLANNER_CONSOLE_ENABLED": "Enable the console REPL (true/false, default: true).",
    # Paths (gitignored)
    "TIMEPLANNER_DATA_DIR": "Local data directory (default: .local/timeplanner).",
    "TIMEPLANNER_PLANNER_DB_PATH": (
        "Schedules/templates/categories SQLite path (default: <data_dir>/planner.sqlite3)."
    ),
    "TIMEPLANNER_SETTINGS_DB_PATH": "Theme settings SQLite path (default: <data_dir>/settings.sqlite3).",
    "TIMEPLANNER_LOG_FILE": "Log file path (default: <data_dir>/timeplanner.log).",
    # Schedule behaviour
    "TIMEPLANNER_REFRESH_INTERVAL_SECONDS": "Status refresh tick of the day view (default: 1.0).",
    "TIMEPLANNER_SHIFT_MINUTES": "Step of /up and /down in minutes (default: 15).",
    "TIMEPLANNER_DEFAULT_TEMPLATES_SORT": "Initial template sort: date | category | duration (default: date).",
}
