# src/llm/__init__.py — v1
"""Generation clients."""
