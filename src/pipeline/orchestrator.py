# src/pipeline/orchestrator.py — v3
"""Two-phase analysis orchestrator.

Drives each work unit through:
  Phase 1: base analysis (word list + literal alignment), one call per verse
  Phase 2: word detail (root + components), one call per word
  Final:   merge, write artifact, update manifest, drop checkpoints

Every phase step is checkpointed as soon as it completes, so stopping the
process at any point loses at most the call in flight. Work units are
processed strictly one at a time; failures are contained per unit and
recorded in the error log, and re-running is the recovery mechanism.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from qalamseed.core.models import (
    BaseAnalysis,
    ProcessResult,
    RunSummary,
    VerseInfo,
    WordDetail,
    WorkUnit,
)
from qalamseed.corpus.loader import CorpusCache, CorpusInconsistency
from qalamseed.llm.base_client import BaseGenerationClient, GenerationError
from qalamseed.logging.context import set_phase, set_run_context, set_unit_context
from qalamseed.parsing.response_parser import (
    UnparsableResponse,
    parse_base_response,
    parse_word_detail,
)
from qalamseed.pipeline.checkpoint_store import CheckpointStore
from qalamseed.pipeline.error_log import ErrorLog
from qalamseed.pipeline.manifest import ManifestTracker
from qalamseed.pipeline.merger import merge_analysis, validate_word_sequence
from qalamseed.prompts.builder import VerseContext, build_base_prompt, build_word_prompt
from qalamseed.storage import layout
from qalamseed.storage.base_store import BaseStore

logger = logging.getLogger(__name__)

# Failures expected from a slow, free-text collaborator or a patchy corpus.
UNIT_FAILURES: tuple[type[Exception], ...] = (
    GenerationError,
    UnparsableResponse,
    CorpusInconsistency,
)


def generate_run_id(timestamp: datetime | None = None) -> str:
    """Generate a run_id: yyyymmdd_hhmm_{uuid4_short}."""
    ts = timestamp or datetime.now(timezone.utc)
    return f"{ts.strftime('%Y%m%d_%H%M')}_{uuid.uuid4().hex[:5]}"


def format_duration(seconds: float) -> str:
    """'42s' or '3m 7s'."""
    total = int(seconds)
    minutes, secs = divmod(total, 60)
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


@dataclass
class RunContext:
    """Everything one run invocation owns. Lifetime = one run."""

    store: BaseStore
    client: BaseGenerationClient
    corpus: CorpusCache
    run_id: str = field(default_factory=generate_run_id)
    checkpoints: CheckpointStore = field(init=False)
    manifest: ManifestTracker = field(init=False)
    error_log: ErrorLog = field(init=False)

    def __post_init__(self) -> None:
        self.checkpoints = CheckpointStore(self.store)
        self.manifest = ManifestTracker(self.store)
        self.error_log = ErrorLog(self.store)


class AnalysisOrchestrator:
    """Sequential, resumable driver for the two generation phases."""

    def __init__(self, context: RunContext) -> None:
        self._ctx = context

    @property
    def context(self) -> RunContext:
        return self._ctx

    async def run(self, units: list[WorkUnit]) -> RunSummary:
        """Process units in order; never stops early on a unit failure."""
        set_run_context(self._ctx.run_id)
        summary = RunSummary()
        start = time.monotonic()

        # Start from a manifest that matches storage, whatever happened last run.
        await self._ctx.manifest.rebuild()

        total = len(units)
        for index, unit in enumerate(units, start=1):
            logger.info("[%.1f%%] %s", index / total * 100, unit.verse_id)
            result = await self.process(unit)
            if not result.completed:
                summary.failed += 1
                summary.failed_verse_ids.append(unit.verse_id)
            elif result.was_already_done:
                summary.skipped += 1
                logger.debug("Skipped (already exists)")
            else:
                summary.processed += 1

        set_unit_context(None)
        await self._ctx.manifest.rebuild()
        summary.duration_seconds = time.monotonic() - start

        logger.info(
            "Run %s finished: processed=%d skipped=%d failed=%d in %s",
            self._ctx.run_id, summary.processed, summary.skipped, summary.failed,
            format_duration(summary.duration_seconds),
        )
        return summary

    async def process(self, unit: WorkUnit) -> ProcessResult:
        """Bring one work unit to completion, or record why it could not be.

        Returns:
            ProcessResult; ``was_already_done`` is set when the final artifact
            existed beforehand and no generation call was made.
        """
        set_unit_context(unit.verse_id)
        try:
            return await self._process(unit)
        except UNIT_FAILURES as e:
            cause = f"{type(e).__name__}: {e}"
            logger.error("ERROR: %s", cause)
        except Exception as e:
            cause = f"{type(e).__name__}: {e}"
            logger.exception("Unexpected failure")
        await self._ctx.error_log.record(unit.verse_id, cause)
        return ProcessResult(verse_id=unit.verse_id, completed=False, error=cause)

    async def _process(self, unit: WorkUnit) -> ProcessResult:
        ctx = self._ctx
        final_key = layout.final_key(unit)

        if await ctx.store.exists(final_key):
            # Heal a manifest left behind by an interrupted run.
            await ctx.manifest.append(unit.verse_id)
            return ProcessResult(verse_id=unit.verse_id, completed=True, was_already_done=True)

        started = time.monotonic()
        generated = 0

        set_phase("base")
        base = await ctx.checkpoints.load(unit, "base")
        if base is not None:
            try:
                validate_word_sequence(base.words)
            except CorpusInconsistency as e:
                logger.warning("Discarding cached base: %s", e)
                base = None
            else:
                logger.info("Phase 1: Loading cached base...")

        if base is None:
            # Word checkpoints are only valid against the base they were built from.
            removed = await ctx.checkpoints.delete_all(unit)
            if removed:
                logger.info("Phase 1: Dropped %d orphaned checkpoints", removed)
            logger.info("Phase 1: Generating base analysis...")
            t0 = time.monotonic()
            base = await self._generate_base(unit)
            await ctx.checkpoints.save(unit, "base", base)
            logger.info("Phase 1: Done (%s)", format_duration(time.monotonic() - t0))

        verse_context = VerseContext(
            surah_name=base.verse.surah,
            verse_number=base.verse.verse_number,
            verse_arabic=base.verse.arabic,
        )
        total_words = len(base.words)
        details: list[WordDetail] = []

        for stub in base.words:
            set_phase(f"w{stub.word_number}")
            detail = await ctx.checkpoints.load(unit, "word", stub.word_number)
            if detail is not None:
                logger.info("Phase 2: Word %d/%d - cached", stub.word_number, total_words)
            else:
                logger.info("Phase 2: Word %d/%d (%s)...", stub.word_number, total_words, stub.arabic)
                t0 = time.monotonic()
                prompt = build_word_prompt(verse_context, stub, total_words)
                raw = await ctx.client.generate(prompt)
                detail = parse_word_detail(raw, stub.word_number)
                await ctx.checkpoints.save(unit, "word", detail, stub.word_number)
                generated += 1
                logger.info("         Done (%s)", format_duration(time.monotonic() - t0))
            details.append(detail)

        set_phase("merge")
        final = merge_analysis(base, details)
        await ctx.store.write_text(final_key, final.to_json())
        await ctx.manifest.append(unit.verse_id)
        await ctx.checkpoints.delete_all(unit)

        logger.info("Total: %s ✓", format_duration(time.monotonic() - started))
        return ProcessResult(
            verse_id=unit.verse_id, completed=True, words_generated=generated,
        )

    async def _generate_base(self, unit: WorkUnit) -> BaseAnalysis:
        """Phase 1 call. Validated before it may be checkpointed."""
        corpus = self._ctx.corpus
        source = corpus.get_source_verse(unit)
        surah = corpus.surah_meta(unit.surah_id)

        prompt = build_base_prompt(surah, unit.verse_number, source.arabic, source.translation)
        raw = await self._ctx.client.generate(prompt)
        response = parse_base_response(raw)
        validate_word_sequence(response.words)

        return BaseAnalysis(
            verse_id=unit.verse_id,
            verse=VerseInfo(
                arabic=source.arabic,
                transliteration=source.transliteration,
                surah=surah.name,
                verse_number=unit.verse_number,
            ),
            words=response.words,
            literal_translation=response.literal_translation,
        )
