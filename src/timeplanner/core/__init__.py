# src/timeplanner/core/__init__.py
