# tests/unit/prompts/test_unit_builder.py — v1
"""Tests for prompts/builder.py — deterministic base and word prompts."""

from __future__ import annotations

from qalamseed.core.models import SurahMeta, WordStub
from qalamseed.prompts.builder import (
    BASE_TEMPLATE,
    VerseContext,
    build_base_prompt,
    build_word_prompt,
    load_template,
)

FATIHAH = SurahMeta(id=1, name="Al-Fatihah", name_arabic="الفاتحة", verse_count=7)
VERSE = "الْحَمْدُ لِلَّهِ رَبِّ الْعَالَمِينَ"
STUB = WordStub(word_number=2, arabic="لِلَّهِ", transliteration="lillāhi", meaning="to Allah")


class TestBasePrompt:
    def test_contains_verse_fields(self):
        prompt = build_base_prompt(FATIHAH, 2, VERSE, "[All] praise is [due] to Allah")
        assert "Surah: Al-Fatihah (Verse 2)" in prompt
        assert f"Arabic: {VERSE}" in prompt
        assert "Translation: [All] praise is [due] to Allah" in prompt

    def test_asks_for_words_and_alignment_only(self):
        prompt = build_base_prompt(FATIHAH, 2, VERSE, "")
        assert '"wordNumber": 1' in prompt
        assert '"literalTranslation"' in prompt
        assert '"root"' not in prompt

    def test_deterministic(self):
        a = build_base_prompt(FATIHAH, 2, VERSE, "x")
        b = build_base_prompt(FATIHAH, 2, VERSE, "x")
        assert a == b

    def test_template_has_no_unrendered_placeholders(self):
        prompt = build_base_prompt(FATIHAH, 2, VERSE, "x")
        assert "{surah_name}" not in prompt
        assert "{{" not in prompt

    def test_template_cached(self):
        assert load_template(BASE_TEMPLATE) is load_template(BASE_TEMPLATE)


class TestWordPrompt:
    def test_contains_word_and_position(self):
        ctx = VerseContext(surah_name="Al-Fatihah", verse_number=2, verse_arabic=VERSE)
        prompt = build_word_prompt(ctx, STUB, 4)
        assert "Surah: Al-Fatihah (Verse 2)" in prompt
        assert f"Verse: {VERSE}" in prompt
        assert "Word 2 of 4" in prompt
        assert "Arabic: لِلَّهِ" in prompt
        assert "Transliteration: lillāhi" in prompt
        assert '"wordNumber": 2' in prompt

    def test_states_omission_rules(self):
        ctx = VerseContext(surah_name="Al-Fatihah", verse_number=2, verse_arabic=VERSE)
        prompt = build_word_prompt(ctx, STUB, 4)
        assert "Omit the field entirely for particles" in prompt
        assert "Omit the field entirely for simple words" in prompt
