# src/tracking/__init__.py — v1
"""Progress reporting."""
