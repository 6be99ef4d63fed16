# src/storage/__init__.py — v1
"""Key-value storage backends and key layout."""
