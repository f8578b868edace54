# src/timeplanner/connectors/__init__.py
