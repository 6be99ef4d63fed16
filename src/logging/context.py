# src/logging/context.py — v2
"""Contextual logging support: attach run_id, verse_id and phase to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per run and per work unit.
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_verse_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "verse_id", default=None
)
_phase: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "phase", default=None
)


@dataclass
class LogContext:
    """Snapshot of current logging context."""

    run_id: str | None = None
    verse_id: str | None = None
    phase: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        verse_id=_verse_id.get(),
        phase=_phase.get(),
    )


def set_run_context(run_id: str) -> None:
    """Set run-level context (called once per run invocation)."""
    _run_id.set(run_id)


def set_unit_context(verse_id: str | None, phase: str | None = None) -> None:
    """Set work-unit context (called per verse and per phase step)."""
    _verse_id.set(verse_id)
    _phase.set(phase)


def set_phase(phase: str | None) -> None:
    _phase.set(phase)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _verse_id.set(None)
    _phase.set(None)
