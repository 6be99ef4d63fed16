# src/pipeline/manifest.py — v1
"""Manifest of verses that have a final artifact.

The manifest is a cache of a storage scan, never a source of truth:
``rebuild`` recomputes it from the final-artifact keys, ``append`` is the
hot-path shortcut used after each completed verse and yields the same
verse list a rebuild would.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from qalamseed.core.models import Manifest, WorkUnit
from qalamseed.storage import layout
from qalamseed.storage.base_store import BaseStore

logger = logging.getLogger(__name__)


def sort_verse_ids(verse_ids: list[str] | set[str]) -> list[str]:
    """Sort verse ids numerically by surah, then verse."""
    return [u.verse_id for u in sorted(WorkUnit.from_verse_id(v) for v in set(verse_ids))]


class ManifestTracker:
    """Maintain ``analysis/manifest.json``."""

    def __init__(self, store: BaseStore) -> None:
        self._store = store

    async def scan(self) -> list[str]:
        """Sorted verse ids for which a final artifact exists."""
        keys = await self._store.list_keys(layout.ANALYSIS_DIR)
        units = [u for u in (layout.parse_final_key(k) for k in keys) if u is not None]
        return [u.verse_id for u in sorted(units)]

    async def load(self) -> Manifest | None:
        text = await self._store.read_text(layout.MANIFEST_KEY)
        if text is None:
            return None
        try:
            return Manifest.model_validate_json(text)
        except ValidationError as e:
            logger.warning("Manifest is unreadable, will rebuild: %s", e.error_count())
            return None

    async def rebuild(self) -> Manifest:
        """Full scan of final artifacts; writes and returns the manifest."""
        manifest = Manifest(verses=await self.scan(), generated_at=_now())
        await self._write(manifest)
        logger.info("Rebuilt manifest with %d verses", len(manifest.verses))
        return manifest

    async def append(self, verse_id: str) -> Manifest:
        """Add one verse without rescanning. Falls back to rebuild if needed."""
        current = await self.load()
        if current is None:
            return await self.rebuild()
        if verse_id in current.verses:
            return current

        manifest = Manifest(
            verses=sort_verse_ids([*current.verses, verse_id]),
            generated_at=_now(),
        )
        await self._write(manifest)
        logger.debug("Manifest now lists %d verses", len(manifest.verses))
        return manifest

    async def _write(self, manifest: Manifest) -> None:
        await self._store.write_text(layout.MANIFEST_KEY, manifest.to_json())


def _now() -> datetime:
    return datetime.now(timezone.utc)
