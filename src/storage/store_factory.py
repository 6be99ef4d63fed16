# src/storage/store_factory.py — v3
"""Factory: instantiate the storage backend from configuration."""

from __future__ import annotations

from qalamseed.config.settings import Settings
from qalamseed.storage.base_store import BaseStore
from qalamseed.storage.local_store import LocalStore


def create_store(settings: Settings) -> BaseStore:
    """Create the store selected by STORE_BACKEND.

    Raises:
        ValueError: If the backend is not supported.
    """
    if settings.store_backend == "local":
        return LocalStore(settings.output_root)

    if settings.store_backend == "memory":
        from qalamseed.storage.memory_store import InMemoryStore
        return InMemoryStore()

    raise ValueError(f"Unsupported store backend: {settings.store_backend!r}")
