# src/pipeline/checkpoint_store.py — v2
"""Per-work-unit intermediate results for the base and word phases.

Checkpoints are keyed by (work unit, phase, word number), never by position
in a run, so partial progress across many verses never collides. An
unreadable checkpoint counts as absent and is regenerated.
"""

from __future__ import annotations

import logging
from typing import Literal, overload

from pydantic import ValidationError

from qalamseed.core.models import BaseAnalysis, WordDetail, WorkUnit
from qalamseed.storage import layout
from qalamseed.storage.base_store import BaseStore

logger = logging.getLogger(__name__)

Phase = Literal["base", "word"]


class CheckpointStore:
    """Load, save and delete phase checkpoints in a BaseStore."""

    def __init__(self, store: BaseStore) -> None:
        self._store = store

    @staticmethod
    def key(unit: WorkUnit, phase: Phase, word_number: int | None = None) -> str:
        if phase == "base":
            return layout.base_checkpoint_key(unit)
        if word_number is None:
            raise ValueError("word_number is required for word checkpoints")
        return layout.word_checkpoint_key(unit, word_number)

    async def has(self, unit: WorkUnit, phase: Phase, word_number: int | None = None) -> bool:
        return await self._store.exists(self.key(unit, phase, word_number))

    @overload
    async def load(self, unit: WorkUnit, phase: Literal["base"]) -> BaseAnalysis | None: ...

    @overload
    async def load(
        self, unit: WorkUnit, phase: Literal["word"], word_number: int,
    ) -> WordDetail | None: ...

    async def load(self, unit, phase, word_number=None):
        """Return the checkpointed record, or None if absent or unreadable."""
        key = self.key(unit, phase, word_number)
        model = BaseAnalysis if phase == "base" else WordDetail
        try:
            text = await self._store.read_text(key)
            if text is None:
                return None
            return model.model_validate_json(text)
        except ValidationError as e:
            logger.warning("Discarding unreadable checkpoint %s: %d errors", key, e.error_count())
        except ValueError as e:
            # Undecodable bytes on disk.
            logger.warning("Discarding unreadable checkpoint %s: %s", key, e)
        await self._store.delete(key)
        return None

    async def save(
        self,
        unit: WorkUnit,
        phase: Phase,
        record: BaseAnalysis | WordDetail,
        word_number: int | None = None,
    ) -> None:
        if phase == "word" and word_number is None:
            word_number = record.word_number  # type: ignore[union-attr]
        await self._store.write_text(self.key(unit, phase, word_number), record.to_json())

    async def delete(self, unit: WorkUnit, phase: Phase, word_number: int | None = None) -> None:
        await self._store.delete(self.key(unit, phase, word_number))

    async def delete_all(self, unit: WorkUnit) -> int:
        """Remove every checkpoint of a unit. Best-effort: never raises.

        Returns:
            Number of checkpoints removed.
        """
        removed = 0
        try:
            keys = await self._store.list_keys(layout.TEMP_DIR)
        except Exception as e:
            logger.warning("Could not list checkpoints for %s: %s", unit.verse_id, e)
            return 0

        for key in keys:
            if layout.parse_checkpoint_key(key) != unit:
                continue
            try:
                await self._store.delete(key)
                removed += 1
            except Exception as e:
                logger.warning("Could not delete checkpoint %s: %s", key, e)
        return removed

    async def pending_units(self) -> list[WorkUnit]:
        """Work units that currently have at least one checkpoint."""
        keys = await self._store.list_keys(layout.TEMP_DIR)
        units = {u for u in (layout.parse_checkpoint_key(k) for k in keys) if u is not None}
        return sorted(units)
