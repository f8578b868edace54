# src/timeplanner/__init__.py

"""Personal time planner: day schedules, task templates, categories."""

__version__ = "0.1.0"
