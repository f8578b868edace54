# src/timeplanner/schedules/__init__.py
