# src/tracking/status.py — v1
"""Generation progress report: how much of the corpus has a final artifact.

Read-only. Counts come from a storage scan, the same source the manifest
is rebuilt from.
"""

from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, Field

from qalamseed.corpus.loader import Corpus
from qalamseed.pipeline.checkpoint_store import CheckpointStore
from qalamseed.pipeline.manifest import ManifestTracker
from qalamseed.storage.base_store import BaseStore


class SurahProgress(BaseModel):
    surah_id: int
    done: int
    total: int

    @property
    def percent(self) -> float:
        return (self.done / self.total * 100) if self.total else 0.0


class StatusReport(BaseModel):
    done: int
    total: int
    complete_surahs: list[int] = Field(default_factory=list)
    partial_surahs: list[SurahProgress] = Field(default_factory=list)
    pending_checkpoints: list[str] = Field(default_factory=list)

    @property
    def percent(self) -> float:
        return (self.done / self.total * 100) if self.total else 0.0


async def collect_status(store: BaseStore, corpus: Corpus) -> StatusReport:
    """Scan final artifacts and checkpoints and compare against the corpus."""
    verse_ids = await ManifestTracker(store).scan()
    pending = await CheckpointStore(store).pending_units()

    by_surah = Counter(int(v.split(":", 1)[0]) for v in verse_ids)
    verse_counts = {s.id: s.verse_count for s in corpus.surahs}

    complete: list[int] = []
    partial: list[SurahProgress] = []
    for surah_id in sorted(by_surah):
        done = by_surah[surah_id]
        total = verse_counts.get(surah_id, 0)
        if total and done >= total:
            complete.append(surah_id)
        else:
            partial.append(SurahProgress(surah_id=surah_id, done=done, total=total))

    return StatusReport(
        done=len(verse_ids),
        total=corpus.total_verses,
        complete_surahs=complete,
        partial_surahs=partial,
        pending_checkpoints=[u.verse_id for u in pending],
    )


def render_status(report: StatusReport) -> str:
    """Plain-text rendering for the terminal."""
    lines = [
        "=" * 60,
        "Verse Analysis Generation Status",
        "=" * 60,
        f"Total: {report.done} / {report.total} ({report.percent:.1f}%)",
        "",
    ]
    if report.complete_surahs:
        joined = ", ".join(str(s) for s in report.complete_surahs)
        lines.append(f"Complete surahs ({len(report.complete_surahs)}): {joined}")
    if report.partial_surahs:
        lines.append("Partial surahs:")
        for p in report.partial_surahs:
            lines.append(f"  Surah {p.surah_id}: {p.done}/{p.total} ({p.percent:.0f}%)")
    if report.pending_checkpoints:
        lines.append("")
        lines.append(
            f"In progress (checkpoints on disk): {', '.join(report.pending_checkpoints)}"
        )
    lines.append("=" * 60)
    return "\n".join(lines)
