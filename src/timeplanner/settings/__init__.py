# src/timeplanner/settings/__init__.py
