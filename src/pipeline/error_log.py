# src/pipeline/error_log.py — v1
"""Append-only log of failed work units.

One line per failure: ``[2026-01-01T00:00:00+00:00] 1:4: cause``. Recording
never raises; a broken log must not abort a run.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from qalamseed.storage import layout
from qalamseed.storage.base_store import BaseStore

logger = logging.getLogger(__name__)

_LINE = re.compile(r"^\[(?P<ts>[^\]]+)\] (?P<verse>\d+:\d+): (?P<cause>.*)$")


@dataclass(frozen=True)
class ErrorEntry:
    verse_id: str
    cause: str
    timestamp: datetime

    def format(self) -> str:
        cause = " ".join(self.cause.splitlines()) or "Unknown error"
        return f"[{self.timestamp.isoformat()}] {self.verse_id}: {cause}\n"


class ErrorLog:
    """Error sink backed by ``analysis/_errors.log``."""

    def __init__(self, store: BaseStore) -> None:
        self._store = store
        self._run_entries: list[ErrorEntry] = []

    @property
    def key(self) -> str:
        return layout.ERROR_LOG_KEY

    @property
    def run_entries(self) -> list[ErrorEntry]:
        """Entries recorded through this instance (the current run)."""
        return list(self._run_entries)

    async def record(
        self, verse_id: str, cause: str, timestamp: datetime | None = None,
    ) -> None:
        entry = ErrorEntry(
            verse_id=verse_id,
            cause=cause,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        self._run_entries.append(entry)
        try:
            await self._store.append_text(self.key, entry.format())
        except Exception as e:
            logger.error("Could not write error log entry for %s: %s", verse_id, e)

    async def read_entries(self) -> list[ErrorEntry]:
        """Parse every entry currently in the log."""
        text = await self._store.read_text(self.key)
        if not text:
            return []
        entries: list[ErrorEntry] = []
        for line in text.splitlines():
            match = _LINE.match(line)
            if not match:
                continue
            try:
                ts = datetime.fromisoformat(match.group("ts"))
            except ValueError:
                continue
            entries.append(
                ErrorEntry(verse_id=match.group("verse"), cause=match.group("cause"), timestamp=ts)
            )
        return entries
