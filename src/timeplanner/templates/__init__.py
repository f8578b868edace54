# src/timeplanner/templates/__init__.py
