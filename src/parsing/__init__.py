# src/parsing/__init__.py — v1
"""Response extraction and repair."""
