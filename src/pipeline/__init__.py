# src/pipeline/__init__.py — v1
"""Two-phase generation pipeline."""
