# src/pipeline/merger.py — v2
"""Merge the base analysis with per-word details into the final artifact."""

from __future__ import annotations

from qalamseed.core.models import (
    BaseAnalysis,
    FinalAnalysis,
    FinalWord,
    WordDetail,
    WordStub,
)
from qalamseed.corpus.loader import CorpusInconsistency


def validate_word_sequence(words: list[WordStub]) -> None:
    """Require word numbers to be exactly 1..n in order.

    Gaps or duplicates leave no safe way to align word details, so the
    verse is rejected instead of guessed.

    Raises:
        CorpusInconsistency: On empty lists, gaps, duplicates or disorder.
    """
    if not words:
        raise CorpusInconsistency("Base analysis has no words")
    numbers = [w.word_number for w in words]
    expected = list(range(1, len(words) + 1))
    if numbers != expected:
        raise CorpusInconsistency(
            f"Word numbers must be 1..{len(words)} in order, got {numbers}"
        )


def merge_analysis(base: BaseAnalysis, details: list[WordDetail]) -> FinalAnalysis:
    """Attach root/components to each word by wordNumber.

    A word without a detail keeps only its stub fields.
    """
    by_number = {d.word_number: d for d in details}
    merged: list[FinalWord] = []
    for stub in base.words:
        detail = by_number.get(stub.word_number)
        word = FinalWord(**stub.model_dump())
        if detail is not None:
            word.root = detail.root
            word.components = detail.components
        merged.append(word)

    return FinalAnalysis(
        verse_id=base.verse_id,
        verse=base.verse,
        words=merged,
        literal_translation=base.literal_translation,
        metadata=base.metadata,
    )
