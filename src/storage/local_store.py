# src/storage/local_store.py — v3
"""Local filesystem store (default backend).

Writes go to a sibling temp file first and are moved into place with
``os.replace``, so an interrupted write never leaves a truncated artifact
behind.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from qalamseed.storage.base_store import BaseStore


class LocalStore(BaseStore):
    """Store values as files under a root directory."""

    def __init__(self, base_path: str | Path) -> None:
        self._base = Path(base_path).expanduser()

    @property
    def base_path(self) -> Path:
        return self._base

    def _resolve(self, key: str) -> Path:
        """Resolve a key relative to base_path."""
        return self._base / key

    async def read_text(self, key: str) -> str | None:
        p = self._resolve(key)
        if not p.is_file():
            return None
        return p.read_text(encoding="utf-8")

    async def write_text(self, key: str, content: str) -> None:
        p = self._resolve(key)
        p.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=p.parent, prefix=f".{p.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp, p)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    async def append_text(self, key: str, content: str) -> None:
        p = self._resolve(key)
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("a", encoding="utf-8") as f:
            f.write(content)

    async def exists(self, key: str) -> bool:
        return self._resolve(key).is_file()

    async def delete(self, key: str) -> None:
        self._resolve(key).unlink(missing_ok=True)

    async def list_keys(self, prefix: str) -> list[str]:
        p = self._resolve(prefix)
        if not p.is_dir():
            return []
        base = prefix.rstrip("/")
        return [
            f"{base}/{entry.name}"
            for entry in sorted(p.iterdir())
            if entry.is_file() and not entry.name.startswith(".")
        ]
