# src/timeplanner/notifications/__init__.py
