# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for backend selection, storage locations, the surah
range of a run and logging. Validation errors surface as ConfigurationError
before any work unit is processed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

FIRST_SURAH = 1
LAST_SURAH = 114


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Generation backend ===
    llm_backend: Literal["ollama", "lms"] = "ollama"
    llm_temperature: float = 0.7
    llm_timeout_s: float = 300.0
    llm_max_attempts: int = 1
    llm_retry_base_delay_s: float = 5.0

    # Ollama
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "qwen2.5:72b"

    # LM Studio (OpenAI-compatible server)
    lms_base_url: str = "http://localhost:1234"
    lms_model: str = "local-model"

    # === Corpus and output ===
    corpus_file: Path = Path("data/quran.json")
    output_root: Path = Path("data")
    store_backend: Literal["local", "memory"] = "local"

    # === Surah range (inclusive) ===
    start_surah: int = FIRST_SURAH
    end_surah: int = LAST_SURAH

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("start_surah", "end_surah")
    @classmethod
    def validate_surah_bounds(cls, v: int) -> int:  # noqa: N805
        if not FIRST_SURAH <= v <= LAST_SURAH:
            raise ValueError(f"surah must be between {FIRST_SURAH} and {LAST_SURAH}")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Cross-field rules: range ordering, positive timeouts and attempts."""
        errors: list[str] = []

        if self.start_surah > self.end_surah:
            errors.append(
                f"START_SURAH ({self.start_surah}) must be <= END_SURAH ({self.end_surah})"
            )
        if self.llm_timeout_s <= 0:
            errors.append("LLM_TIMEOUT_S must be > 0")
        if self.llm_max_attempts < 1:
            errors.append("LLM_MAX_ATTEMPTS must be >= 1")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def active_model(self) -> str:
        """Model identifier of the selected backend."""
        return self.lms_model if self.llm_backend == "lms" else self.ollama_model

    @property
    def active_base_url(self) -> str:
        """Endpoint of the selected backend."""
        return self.lms_base_url if self.llm_backend == "lms" else self.ollama_base_url


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags or tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
