# src/prompts/builder.py — v1
"""Prompt construction for the two generation phases.

Pure functions: same inputs, same prompt text. Templates live in
``templates/`` and are rendered with ``str.format`` (literal JSON braces in
the templates are doubled).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel

from qalamseed.core.models import SurahMeta, WordStub

_TEMPLATE_DIR = Path(__file__).parent / "templates"
BASE_TEMPLATE = "base_analysis.txt"
WORD_TEMPLATE = "word_detail.txt"


class VerseContext(BaseModel):
    """Verse-level context shared by every word prompt of a verse."""

    surah_name: str
    verse_number: int
    verse_arabic: str


@lru_cache(maxsize=None)
def load_template(name: str) -> str:
    return (_TEMPLATE_DIR / name).read_text(encoding="utf-8")


def build_base_prompt(
    surah_meta: SurahMeta,
    verse_number: int,
    verse_arabic: str,
    verse_reference_translation: str,
) -> str:
    """Prompt for the base phase: word list and literal alignment only."""
    return load_template(BASE_TEMPLATE).format(
        surah_name=surah_meta.name,
        verse_number=verse_number,
        verse_arabic=verse_arabic,
        verse_translation=verse_reference_translation,
    )


def build_word_prompt(
    verse_context: VerseContext,
    word_stub: WordStub,
    total_word_count: int,
) -> str:
    """Prompt for the word phase: root and compound decomposition of one word."""
    return load_template(WORD_TEMPLATE).format(
        surah_name=verse_context.surah_name,
        verse_number=verse_context.verse_number,
        verse_arabic=verse_context.verse_arabic,
        word_number=word_stub.word_number,
        total_words=total_word_count,
        word_arabic=word_stub.arabic,
        word_transliteration=word_stub.transliteration,
        word_meaning=word_stub.meaning,
    )
