# src/parsing/response_parser.py — v1
"""Extract structured records from raw generator output.

Generators approximate JSON but do not guarantee it. The three failure
shapes seen in practice are truncation at the token limit, explanatory
prose around the object, and markdown fences. ``extract`` walks a recovery
ladder and the first success wins:

  1. parse the whole text
  2. repair (balance brackets, drop dangling commas) and parse
  3. first fenced code block, through steps 1-2
  4. first ``{`` to last ``}``, through steps 1-2

The typed helpers then validate required fields and fail closed with
UnparsableResponse instead of passing partial data downstream.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from qalamseed.core.models import LLMBaseResponse, WordDetail

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_TRAILING_COMMA = re.compile(r",\s*$")
_COMMA_BEFORE_BRACKET = re.compile(r",\s*\]")
_COMMA_BEFORE_BRACE = re.compile(r",\s*\}")


class UnparsableResponse(Exception):
    """No valid structured record could be recovered from the response."""


def repair_json(text: str) -> str:
    """Heuristically fix near-valid JSON.

    Appends missing closing brackets/braces (brackets first, then braces) and
    strips comma-before-close artifacts. Brackets inside string values are
    counted too; this is a heuristic, not a parser.
    """
    repaired = text.strip()

    missing_braces = repaired.count("{") - repaired.count("}")
    missing_brackets = repaired.count("[") - repaired.count("]")

    if missing_braces > 0 or missing_brackets > 0:
        repaired = _TRAILING_COMMA.sub("", repaired)
        repaired += "]" * max(missing_brackets, 0)
        repaired += "}" * max(missing_braces, 0)

    repaired = _COMMA_BEFORE_BRACKET.sub("]", repaired)
    repaired = _COMMA_BEFORE_BRACE.sub("}", repaired)
    return repaired


def _try_parse(text: str) -> dict[str, Any] | None:
    """Steps 1-2 of the ladder. Only JSON objects count as success."""
    for candidate in (text, repair_json(text)):
        try:
            value = json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            continue
        if isinstance(value, dict):
            return value
    return None


def extract(raw: str) -> dict[str, Any]:
    """Recover a JSON object from raw generator text.

    Raises:
        UnparsableResponse: If every recovery step fails.
    """
    if raw is None or not raw.strip():
        raise UnparsableResponse("Empty response")

    direct = _try_parse(raw.strip())
    if direct is not None:
        return direct

    fenced = _FENCED_BLOCK.search(raw)
    if fenced:
        block = _try_parse(fenced.group(1).strip())
        if block is not None:
            logger.debug("Recovered JSON from fenced code block")
            return block

    start = raw.find("{")
    end = raw.rfind("}")
    if start != -1 and end > start:
        embedded = _try_parse(raw[start:end + 1])
        if embedded is not None:
            logger.debug("Recovered JSON from embedded object at offset %d", start)
            return embedded

    preview = raw.strip()[:120].replace("\n", " ")
    raise UnparsableResponse(f"Could not extract valid JSON from response: {preview!r}")


def parse_base_response(raw: str) -> LLMBaseResponse:
    """Extract and validate a base-phase response (word list + alignment)."""
    data = extract(raw)
    try:
        return LLMBaseResponse.model_validate(data)
    except ValidationError as e:
        raise UnparsableResponse(
            f"Base response missing required fields: {_summarize(e)}"
        ) from e


def parse_word_detail(raw: str, word_number: int) -> WordDetail:
    """Extract and validate a word-phase response.

    The detail is keyed by the requested ``word_number``; a number echoed
    back by the generator is ignored. ``root: null``, ``root: {}`` and an
    empty components list all mean "absent".
    """
    data = extract(raw)

    echoed = data.get("wordNumber")
    if echoed is not None and echoed != word_number:
        logger.debug("Word detail echoed wordNumber=%r, expected %d", echoed, word_number)
    data["wordNumber"] = word_number

    if not data.get("root"):
        data.pop("root", None)
    if not data.get("components"):
        data.pop("components", None)

    try:
        return WordDetail.model_validate(data)
    except ValidationError as e:
        raise UnparsableResponse(
            f"Word {word_number} detail is malformed: {_summarize(e)}"
        ) from e


def _summarize(error: ValidationError) -> str:
    parts = []
    for err in error.errors()[:3]:
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
