# src/storage/memory_store.py — v1
"""In-memory store. Nothing survives the process; useful for tests and trial runs."""

from __future__ import annotations

from qalamseed.storage.base_store import BaseStore


class InMemoryStore(BaseStore):
    """Dict-backed store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def read_text(self, key: str) -> str | None:
        return self._data.get(key)

    async def write_text(self, key: str, content: str) -> None:
        self._data[key] = content

    async def append_text(self, key: str, content: str) -> None:
        self._data[key] = self._data.get(key, "") + content

    async def exists(self, key: str) -> bool:
        return key in self._data

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def list_keys(self, prefix: str) -> list[str]:
        base = prefix.rstrip("/") + "/"
        return sorted(
            k for k in self._data
            if k.startswith(base) and "/" not in k[len(base):]
        )

    def snapshot(self) -> dict[str, str]:
        """Copy of the current contents."""
        return dict(self._data)
