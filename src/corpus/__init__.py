# src/corpus/__init__.py — v1
"""Source corpus access."""
