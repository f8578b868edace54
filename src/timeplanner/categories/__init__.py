# src/timeplanner/categories/__init__.py
