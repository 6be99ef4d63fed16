# src/core/models.py — v1
"""Core domain models shared across the generation pipeline.

Wire JSON (checkpoints, final artifacts, manifest) uses camelCase keys, so
every record is declared with a camelCase alias generator and serialized
through ``to_json`` with ``by_alias=True`` and ``exclude_none=True``. An
absent root or components list is therefore omitted from the output rather
than written as ``null``.
"""

from __future__ import annotations

from datetime import datetime
from functools import total_ordering

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for records persisted as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


# === Work units and corpus records ===


@total_ordering
class WorkUnit(BaseModel):
    """One verse to analyze, identified by surah and verse number."""

    model_config = ConfigDict(frozen=True)

    surah_id: int = Field(ge=1)
    verse_number: int = Field(ge=1)

    @property
    def verse_id(self) -> str:
        return f"{self.surah_id}:{self.verse_number}"

    @property
    def file_stem(self) -> str:
        return f"{self.surah_id}-{self.verse_number}"

    @classmethod
    def from_verse_id(cls, verse_id: str) -> WorkUnit:
        surah, verse = verse_id.split(":", 1)
        return cls(surah_id=int(surah), verse_number=int(verse))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, WorkUnit):
            return NotImplemented
        return (self.surah_id, self.verse_number) < (other.surah_id, other.verse_number)


class SurahMeta(BaseModel):
    """Surah metadata used in prompts and enumeration."""

    id: int
    name: str
    name_arabic: str = ""
    meaning: str = ""
    verse_count: int


class SourceVerse(BaseModel):
    """Canonical verse record read from the corpus."""

    number: int
    arabic: str
    translation: str
    transliteration: str = ""


# === Phase 1: base analysis ===


class WordStub(WireModel):
    """One word of a verse as listed by the base phase."""

    word_number: int
    arabic: str
    transliteration: str
    meaning: str


class LiteralTranslation(WireModel):
    word_aligned: str
    preserving_syntax: str | None = None


class LLMBaseResponse(WireModel):
    """What the generator returns in the base phase."""

    words: list[WordStub] = Field(min_length=1)
    literal_translation: LiteralTranslation


class VerseInfo(WireModel):
    arabic: str
    transliteration: str
    surah: str
    verse_number: int


class AnalysisMetadata(WireModel):
    analysis_type: str = "lexical and morphological"
    linguistic_framework: str = "Classical Arabic grammar (naḥw, ṣarf)"
    scope: str = "no tafsīr, thematic, or theological interpretation"


class BaseAnalysis(WireModel):
    """Base phase result enriched with verse info from the corpus."""

    verse_id: str
    verse: VerseInfo
    words: list[WordStub]
    literal_translation: LiteralTranslation
    metadata: AnalysisMetadata = Field(default_factory=AnalysisMetadata)


# === Phase 2: word detail ===


class Root(WireModel):
    letters: str = Field(min_length=1)
    meaning: str


class Component(WireModel):
    arabic: str = Field(min_length=1)
    meaning: str


class WordDetail(WireModel):
    """Root and compound decomposition for one word. Both are optional."""

    word_number: int
    root: Root | None = None
    components: list[Component] | None = None


# === Merged output ===


class FinalWord(WordStub):
    root: Root | None = None
    components: list[Component] | None = None


class FinalAnalysis(WireModel):
    """Durable per-verse artifact."""

    verse_id: str
    verse: VerseInfo
    words: list[FinalWord]
    literal_translation: LiteralTranslation
    metadata: AnalysisMetadata = Field(default_factory=AnalysisMetadata)


class Manifest(WireModel):
    """Sorted index of verses with a final artifact. Derived from storage."""

    verses: list[str] = Field(default_factory=list)
    generated_at: datetime


# === Run results ===


class ProcessResult(BaseModel):
    """Outcome of processing a single work unit."""

    verse_id: str
    completed: bool
    was_already_done: bool = False
    words_generated: int = 0
    error: str | None = None


class RunSummary(BaseModel):
    """Counts for a full run."""

    processed: int = 0
    skipped: int = 0
    failed: int = 0
    duration_seconds: float = 0.0
    failed_verse_ids: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.processed + self.skipped + self.failed

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
