# tests/conftest.py — v2
"""Shared test fixtures for all unit tests.

Provides a small Al-Fatihah corpus, an in-memory store and a scripted
generation client that answers prompts from canned responses.
No network access: every generation call is served locally.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

import pytest

from qalamseed.corpus.loader import Corpus, CorpusCache
from qalamseed.llm.base_client import BaseGenerationClient
from qalamseed.logging.context import clear_context
from qalamseed.logging.logger import ROOT_LOGGER
from qalamseed.pipeline.orchestrator import AnalysisOrchestrator, RunContext
from qalamseed.storage.memory_store import InMemoryStore

# === Canned data ===

FATIHAH_VERSES = [
    ("بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ",
     "In the name of Allah, the Entirely Merciful, the Especially Merciful.",
     "Bismi All<u>a</u>hi a<b>l</b>rra<u>h</u>m<u>a</u>ni a<b>l</b>rra<u>h</u>eem<b>i</b>"),
    ("الْحَمْدُ لِلَّهِ رَبِّ الْعَالَمِينَ",
     "[All] praise is [due] to Allah, Lord of the worlds -",
     "Alhamdu lillahi rabbi alAAalameena"),
    ("الرَّحْمَٰنِ الرَّحِيمِ",
     "The Entirely Merciful, the Especially Merciful,",
     "Alrrahmani alrraheemi"),
    ("مَالِكِ يَوْمِ الدِّينِ",
     "Sovereign of the Day of Recompense.",
     "Maliki yawmi alddeeni"),
    ("إِيَّاكَ نَعْبُدُ وَإِيَّاكَ نَسْتَعِينُ",
     "It is You we worship and You we ask for help.",
     "Iyyaka naAAbudu wa-iyyaka nastaAAeenu"),
    ("اهْدِنَا الصِّرَاطَ الْمُسْتَقِيمَ",
     "Guide us to the straight path -",
     "Ihdina alssirata almustaqeema"),
    ("صِرَاطَ الَّذِينَ أَنْعَمْتَ عَلَيْهِمْ غَيْرِ الْمَغْضُوبِ عَلَيْهِمْ وَلَا الضَّالِّينَ",
     "The path of those upon whom You have bestowed favor.",
     "Sirata allatheena anAAamta AAalayhim"),
]


def corpus_dict() -> dict:
    """quran.json-shaped dict: all of surah 1, and surah 2 missing its verse 3."""
    return {
        "meta": {
            "source": "Tanzil.net",
            "arabicEdition": "quran-simple",
            "translations": ["en.sahih", "en.transliteration"],
            "generatedAt": "2026-01-01T00:00:00Z",
        },
        "surahs": [
            {
                "id": 1,
                "name": "Al-Fatihah",
                "nameArabic": "الفاتحة",
                "meaning": "The Opening",
                "verseCount": 7,
                "revelationType": "Meccan",
                "verses": [
                    {
                        "number": i,
                        "arabic": arabic,
                        "translations": {"en.sahih": sahih, "en.transliteration": translit},
                    }
                    for i, (arabic, sahih, translit) in enumerate(FATIHAH_VERSES, start=1)
                ],
            },
            {
                "id": 2,
                "name": "Al-Baqarah",
                "nameArabic": "البقرة",
                "verseCount": 3,
                "verses": [
                    {"number": 1, "arabic": "الم", "translations": {"en.sahih": "Alif, Lam, Meem."}},
                    {"number": 2, "arabic": "ذَٰلِكَ الْكِتَابُ لَا رَيْبَ", "translations": {"en.sahih": "This is the Book."}},
                ],
            },
        ],
    }


BISMILLAH_BASE = {
    "words": [
        {"wordNumber": 1, "arabic": "بِسْمِ", "transliteration": "bismi", "meaning": "In the name"},
        {"wordNumber": 2, "arabic": "اللَّهِ", "transliteration": "allāhi", "meaning": "of Allah"},
        {"wordNumber": 3, "arabic": "الرَّحْمَٰنِ", "transliteration": "al-raḥmāni", "meaning": "the Most Gracious"},
        {"wordNumber": 4, "arabic": "الرَّحِيمِ", "transliteration": "al-raḥīmi", "meaning": "the Most Merciful"},
    ],
    "literalTranslation": {
        "wordAligned": "In-the-name [of] Allah the-Most-Gracious the-Most-Merciful",
    },
}

BISMILLAH_WORDS = {
    1: {
        "wordNumber": 1,
        "root": {"letters": "س-م-و", "meaning": "name, elevation"},
        "components": [
            {"arabic": "بِ", "meaning": "in/with"},
            {"arabic": "اسْم", "meaning": "name"},
        ],
    },
    2: {"wordNumber": 2},
    3: {"wordNumber": 3, "root": {"letters": "ر-ح-م", "meaning": "mercy"}},
    4: {"wordNumber": 4, "root": {"letters": "ر-ح-م", "meaning": "mercy"}},
}


def base_json(word_count: int = 3) -> str:
    """Generic valid base-phase response with ``word_count`` words."""
    return json.dumps({
        "words": [
            {"wordNumber": n, "arabic": f"كلمة{n}", "transliteration": f"kalima{n}", "meaning": f"word {n}"}
            for n in range(1, word_count + 1)
        ],
        "literalTranslation": {"wordAligned": " ".join(f"word-{n}" for n in range(1, word_count + 1))},
    }, ensure_ascii=False)


def word_json(word_number: int) -> str:
    """Generic valid word-phase response with a root."""
    return json.dumps({
        "wordNumber": word_number,
        "root": {"letters": "ك-ل-م", "meaning": "speech"},
    }, ensure_ascii=False)


# === Scripted generation client ===

_VERSE_RE = re.compile(r"\(Verse (\d+)\)")
_WORD_RE = re.compile(r"Word (\d+) of (\d+)")


class ScriptedClient(BaseGenerationClient):
    """Answers prompts from canned responses keyed by verse and word number.

    ``base`` maps verse number → raw text (or an exception to raise);
    ``words`` maps (verse number, word number) → raw text or exception.
    Anything not scripted gets a generic valid response. ``calls`` records
    ("base", verse, None) / ("word", verse, word) tuples in order.
    """

    def __init__(
        self,
        base: dict[int, str | BaseException] | None = None,
        words: dict[tuple[int, int], str | BaseException] | None = None,
    ) -> None:
        self.base = dict(base or {})
        self.words = dict(words or {})
        self.calls: list[tuple[str, int, int | None]] = []
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        verse = int(_VERSE_RE.search(prompt).group(1))
        word_match = _WORD_RE.search(prompt)
        if word_match is None:
            self.calls.append(("base", verse, None))
            value = self.base.get(verse, base_json())
        else:
            word = int(word_match.group(1))
            self.calls.append(("word", verse, word))
            value = self.words.get((verse, word), word_json(word))
        if isinstance(value, BaseException):
            raise value
        return value

    async def is_available(self) -> bool:
        return True

    @property
    def provider_name(self) -> str:
        return "scripted"

    @property
    def model(self) -> str:
        return "scripted-model"


def bismillah_client() -> ScriptedClient:
    return ScriptedClient(
        base={1: json.dumps(BISMILLAH_BASE, ensure_ascii=False)},
        words={
            (1, n): json.dumps(detail, ensure_ascii=False)
            for n, detail in BISMILLAH_WORDS.items()
        },
    )


# === FIXTURES ===


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by setup_logging and the logging context after each test."""
    yield
    root = logging.getLogger(ROOT_LOGGER)
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    clear_context()


@pytest.fixture
def corpus() -> Corpus:
    return Corpus.model_validate(corpus_dict())


@pytest.fixture
def corpus_cache(corpus: Corpus) -> CorpusCache:
    return CorpusCache.from_corpus(corpus)


@pytest.fixture
def corpus_file(tmp_path: Path) -> Path:
    path = tmp_path / "quran.json"
    path.write_text(json.dumps(corpus_dict(), ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def scripted_client() -> ScriptedClient:
    return ScriptedClient()


@pytest.fixture
def make_orchestrator(store: InMemoryStore, corpus_cache: CorpusCache):
    """Build an orchestrator over the shared store with a given client."""

    def _make(client: BaseGenerationClient, run_store=None) -> AnalysisOrchestrator:
        context = RunContext(
            store=run_store if run_store is not None else store,
            client=client,
            corpus=corpus_cache,
            run_id="20260101_0000_test0",
        )
        return AnalysisOrchestrator(context)

    return _make
