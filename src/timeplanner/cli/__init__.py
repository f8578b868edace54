# src/timeplanner/cli/__init__.py
