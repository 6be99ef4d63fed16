# src/corpus/loader.py — v1
"""Corpus access: load quran.json, enumerate work units, fetch source verses.

The corpus file is built by a separate script and is read-only here. Its
shape is ``{"meta": {...}, "surahs": [{"id", "name", "nameArabic",
"verseCount", "verses": [{"number", "arabic", "translations": {...}}]}]}``.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from qalamseed.core.models import SourceVerse, SurahMeta, WorkUnit

logger = logging.getLogger(__name__)

TRANSLATION_KEY = "en.sahih"
TRANSLITERATION_KEY = "en.transliteration"

_HTML_TAG = re.compile(r"<[^>]*>")


class CorpusNotFound(Exception):
    """Corpus file is missing or unreadable. Fatal before the run starts."""


class CorpusInconsistency(Exception):
    """A work unit has no usable source record. Fatal to that unit only."""


class _CorpusModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CorpusVerse(_CorpusModel):
    number: int
    arabic: str
    translations: dict[str, str] = Field(default_factory=dict)


class CorpusSurah(_CorpusModel):
    id: int
    name: str
    name_arabic: str = ""
    meaning: str = ""
    verse_count: int
    verses: list[CorpusVerse] = Field(default_factory=list)

    def meta(self) -> SurahMeta:
        return SurahMeta(
            id=self.id,
            name=self.name,
            name_arabic=self.name_arabic,
            meaning=self.meaning,
            verse_count=self.verse_count,
        )


class CorpusMeta(_CorpusModel):
    source: str = ""
    arabic_edition: str = ""
    translations: list[str] = Field(default_factory=list)


class Corpus(_CorpusModel):
    meta: CorpusMeta = Field(default_factory=CorpusMeta)
    surahs: list[CorpusSurah]

    @property
    def total_verses(self) -> int:
        return sum(s.verse_count for s in self.surahs)

    def surah(self, surah_id: int) -> CorpusSurah:
        for s in self.surahs:
            if s.id == surah_id:
                return s
        raise CorpusInconsistency(f"Surah {surah_id} not found in corpus")


def strip_html_tags(text: str) -> str:
    """Remove markup the transliteration source embeds (e.g. <u>, <b>)."""
    return _HTML_TAG.sub("", text)


def load_corpus(path: Path) -> Corpus:
    """Read and validate the corpus file.

    Raises:
        CorpusNotFound: If the file does not exist or is not a valid corpus.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise CorpusNotFound(f"Corpus file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Corpus.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise CorpusNotFound(f"Corpus file {path} is not a valid corpus: {e}") from e


class CorpusCache:
    """Run-scoped lazy holder for the loaded corpus.

    Created once per run invocation and passed to whoever needs verse text,
    so the file is parsed at most once per run.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._corpus: Corpus | None = None

    @classmethod
    def from_corpus(cls, corpus: Corpus, path: Path | None = None) -> CorpusCache:
        cache = cls(path or Path("<memory>"))
        cache._corpus = corpus
        return cache

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> Corpus:
        if self._corpus is None:
            self._corpus = load_corpus(self._path)
            logger.info(
                "Loaded corpus %s: %d surahs, %d verses",
                self._path, len(self._corpus.surahs), self._corpus.total_verses,
            )
        return self._corpus

    def surah_meta(self, surah_id: int) -> SurahMeta:
        return self.get().surah(surah_id).meta()

    def get_source_verse(self, unit: WorkUnit) -> SourceVerse:
        """Return the canonical verse record for a work unit.

        Raises:
            CorpusInconsistency: If the surah or verse is missing.
        """
        surah = self.get().surah(unit.surah_id)
        for verse in surah.verses:
            if verse.number == unit.verse_number:
                return SourceVerse(
                    number=verse.number,
                    arabic=verse.arabic,
                    translation=verse.translations.get(TRANSLATION_KEY, ""),
                    transliteration=strip_html_tags(
                        verse.translations.get(TRANSLITERATION_KEY, "")
                    ),
                )
        raise CorpusInconsistency(f"Verse {unit.verse_id} not found in corpus")


def enumerate_work_units(
    corpus: Corpus, start_surah: int = 1, end_surah: int = 114,
) -> list[WorkUnit]:
    """List work units in surah-then-verse order within the inclusive range."""
    units: list[WorkUnit] = []
    for surah in sorted(corpus.surahs, key=lambda s: s.id):
        if surah.id < start_surah or surah.id > end_surah:
            continue
        for verse_number in range(1, surah.verse_count + 1):
            units.append(WorkUnit(surah_id=surah.id, verse_number=verse_number))
    return units
