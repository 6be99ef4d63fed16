# src/llm/base_client.py — v2
"""Abstract generation client interface and its error taxonomy.

The client is the only component that performs blocking network I/O. It
takes a prompt and returns raw text; turning that text into a record is the
parser's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class GenerationError(Exception):
    """Base class for generation collaborator failures."""


class GenerationUnavailable(GenerationError):
    """Collaborator unreachable or answered with an error status."""


class GenerationTimeout(GenerationError):
    """Collaborator did not answer within the bounded wait."""


class GenerationEmpty(GenerationError):
    """Collaborator answered with no content."""


class BaseGenerationClient(ABC):
    """Unified interface for all generation backends."""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Send a prompt and return the raw response text.

        Raises:
            GenerationUnavailable: Backend unreachable or returned an error.
            GenerationTimeout: Backend exceeded the configured wait.
            GenerationEmpty: Backend returned no content.
        """

    @abstractmethod
    async def is_available(self) -> bool:
        """Health check. Never raises."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Backend identifier (ollama, lms)."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier sent to the backend."""
