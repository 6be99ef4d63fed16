# tests/unit/parsing/test_unit_response_parser.py — v1
"""Tests for parsing/response_parser.py — recovery ladder, repair and typed validation."""

from __future__ import annotations

import json

import pytest

from qalamseed.parsing.response_parser import (
    UnparsableResponse,
    extract,
    parse_base_response,
    parse_word_detail,
    repair_json,
)

VALID_BASE = {
    "words": [
        {"wordNumber": 1, "arabic": "الْحَمْدُ", "transliteration": "al-ḥamdu", "meaning": "the praise"},
        {"wordNumber": 2, "arabic": "لِلَّهِ", "transliteration": "lillāhi", "meaning": "to Allah"},
    ],
    "literalTranslation": {"wordAligned": "The-praise [is] to-Allah"},
}


class TestRepairJson:
    def test_closes_truncated_array_then_object(self):
        assert repair_json('{"a": [1, 2') == '{"a": [1, 2]}'
        assert json.loads(repair_json('{"a": [1, 2')) == {"a": [1, 2]}

    def test_strips_dangling_comma_before_closing(self):
        assert json.loads(repair_json('{"a": 1,')) == {"a": 1}

    def test_comma_before_bracket_and_brace(self):
        assert json.loads(repair_json('{"a": [1, 2,], "b": 3,}')) == {"a": [1, 2], "b": 3}

    def test_balanced_input_unchanged(self):
        text = '{"a": [1]}'
        assert repair_json(text) == text

    def test_truncated_mid_word_list(self):
        truncated = json.dumps(VALID_BASE, ensure_ascii=False)[:-2]
        assert json.loads(repair_json(truncated)) == VALID_BASE


class TestExtract:
    def test_direct_parse(self):
        assert extract('{"ok": true}') == {"ok": True}

    def test_trailing_comma(self):
        assert extract('{"a": 1,}') == {"a": 1}

    def test_fenced_json_block(self):
        raw = 'Here is the analysis:\n```json\n{"a": 1}\n```\nHope this helps.'
        assert extract(raw) == {"a": 1}

    def test_fenced_block_without_language(self):
        assert extract('```\n{"a": 2}\n```') == {"a": 2}

    def test_embedded_object_in_prose(self):
        raw = 'Sure! The result is {"a": {"b": 3}} as requested.'
        assert extract(raw) == {"a": {"b": 3}}

    def test_truncated_response(self):
        assert extract('{"words": [{"wordNumber": 1}') == {"words": [{"wordNumber": 1}]}

    def test_empty_fails(self):
        with pytest.raises(UnparsableResponse, match="Empty"):
            extract("   ")

    def test_no_json_fails(self):
        with pytest.raises(UnparsableResponse):
            extract("I cannot help with that.")

    def test_top_level_array_is_not_a_record(self):
        with pytest.raises(UnparsableResponse):
            extract("[1, 2, 3]")


class TestParseBaseResponse:
    def test_valid(self):
        parsed = parse_base_response(json.dumps(VALID_BASE, ensure_ascii=False))
        assert [w.word_number for w in parsed.words] == [1, 2]
        assert parsed.literal_translation.word_aligned == "The-praise [is] to-Allah"
        assert parsed.literal_translation.preserving_syntax is None

    def test_missing_literal_translation(self):
        data = {"words": VALID_BASE["words"]}
        with pytest.raises(UnparsableResponse, match="literalTranslation"):
            parse_base_response(json.dumps(data))

    def test_empty_word_list(self):
        data = {**VALID_BASE, "words": []}
        with pytest.raises(UnparsableResponse):
            parse_base_response(json.dumps(data))

    def test_word_missing_meaning(self):
        data = json.loads(json.dumps(VALID_BASE))
        del data["words"][0]["meaning"]
        with pytest.raises(UnparsableResponse):
            parse_base_response(json.dumps(data))


class TestParseWordDetail:
    def test_root_and_components(self):
        raw = json.dumps({
            "wordNumber": 2,
            "root": {"letters": "ء-ل-ه", "meaning": "deity"},
            "components": [{"arabic": "لِ", "meaning": "to"}, {"arabic": "الله", "meaning": "Allah"}],
        })
        detail = parse_word_detail(raw, 2)
        assert detail.root.letters == "ء-ل-ه"
        assert len(detail.components) == 2

    def test_requested_number_wins_over_echo(self):
        detail = parse_word_detail('{"wordNumber": 9}', 3)
        assert detail.word_number == 3

    def test_missing_word_number_filled_in(self):
        assert parse_word_detail("{}", 4).word_number == 4

    @pytest.mark.parametrize("root", [None, {}])
    def test_empty_root_is_absent(self, root):
        detail = parse_word_detail(json.dumps({"wordNumber": 1, "root": root}), 1)
        assert detail.root is None
        assert "root" not in detail.to_json()

    def test_empty_components_is_absent(self):
        detail = parse_word_detail('{"wordNumber": 1, "components": []}', 1)
        assert detail.components is None

    def test_root_without_letters_fails(self):
        with pytest.raises(UnparsableResponse, match="Word 1"):
            parse_word_detail('{"root": {"meaning": "x"}}', 1)

    def test_fenced_detail(self):
        raw = '```json\n{"wordNumber": 1, "root": {"letters": "ر-ح-م", "meaning": "mercy"}}\n```'
        assert parse_word_detail(raw, 1).root.meaning == "mercy"
