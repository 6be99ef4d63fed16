# src/storage/layout.py — v2
"""Storage key conventions for final artifacts, checkpoints, manifest and error log.

    analysis/{surah}-{verse}.json            final analysis
    analysis/_temp/{surah}-{verse}.base.json base-phase checkpoint
    analysis/_temp/{surah}-{verse}.w{n}.json word-phase checkpoint
    analysis/manifest.json                   manifest
    analysis/_errors.log                     error log
"""

from __future__ import annotations

import re

from qalamseed.core.models import WorkUnit

ANALYSIS_DIR = "analysis"
TEMP_DIR = f"{ANALYSIS_DIR}/_temp"
MANIFEST_KEY = f"{ANALYSIS_DIR}/manifest.json"
ERROR_LOG_KEY = f"{ANALYSIS_DIR}/_errors.log"

_FINAL_NAME = re.compile(r"^(\d+)-(\d+)\.json$")
_CHECKPOINT_NAME = re.compile(r"^(\d+)-(\d+)\.(base|w\d+)\.json$")


def final_key(unit: WorkUnit) -> str:
    return f"{ANALYSIS_DIR}/{unit.file_stem}.json"


def base_checkpoint_key(unit: WorkUnit) -> str:
    return f"{TEMP_DIR}/{unit.file_stem}.base.json"


def word_checkpoint_key(unit: WorkUnit, word_number: int) -> str:
    return f"{TEMP_DIR}/{unit.file_stem}.w{word_number}.json"


def parse_final_key(key: str) -> WorkUnit | None:
    """Return the work unit a final-artifact key belongs to, or None."""
    name = key.rsplit("/", 1)[-1]
    match = _FINAL_NAME.match(name)
    if not match:
        return None
    return WorkUnit(surah_id=int(match.group(1)), verse_number=int(match.group(2)))


def parse_checkpoint_key(key: str) -> WorkUnit | None:
    """Return the work unit a checkpoint key belongs to, or None."""
    name = key.rsplit("/", 1)[-1]
    match = _CHECKPOINT_NAME.match(name)
    if not match:
        return None
    return WorkUnit(surah_id=int(match.group(1)), verse_number=int(match.group(2)))
