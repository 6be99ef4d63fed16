# src/storage/base_store.py — v1
"""Abstract key-value store interface.

Keys are slash-separated relative paths (``analysis/1-1.json``). Any backend
that can read, write, append, delete and list by prefix satisfies the
pipeline; the filesystem is just the default.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseStore(ABC):
    """Unified interface for durable storage backends."""

    @abstractmethod
    async def read_text(self, key: str) -> str | None:
        """Return the value at key, or None if absent."""

    @abstractmethod
    async def write_text(self, key: str, content: str) -> None:
        """Replace the value at key. Must be all-or-nothing."""

    @abstractmethod
    async def append_text(self, key: str, content: str) -> None:
        """Append to the value at key, creating it if needed."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if key exists."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Missing keys are ignored."""

    @abstractmethod
    async def list_keys(self, prefix: str) -> list[str]:
        """List keys directly under a ``dir/`` prefix (non-recursive)."""
