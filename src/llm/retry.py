# src/llm/retry.py — v2
"""Opt-in bounded retry around a generation client.

Only connectivity failures are retried; malformed output is left to the
parser and to the next run. With ``max_attempts=1`` the wrapper is a
pass-through.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass

from qalamseed.llm.base_client import (
    BaseGenerationClient,
    GenerationError,
    GenerationTimeout,
    GenerationUnavailable,
)

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS: tuple[type[GenerationError], ...] = (
    GenerationUnavailable,
    GenerationTimeout,
)


@dataclass(frozen=True)
class RetryConfig:
    """Bounded retry configuration."""

    max_attempts: int = 1
    base_delay_s: float = 5.0
    backoff_factor: float = 2.0
    jitter: bool = True


def _compute_delay(config: RetryConfig, attempt: int) -> float:
    """Compute delay for a given attempt (0-based)."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


class RetryingGenerationClient(BaseGenerationClient):
    """Wraps a client and retries connectivity errors with backoff."""

    def __init__(
        self,
        inner: BaseGenerationClient,
        max_attempts: int = 1,
        base_delay_s: float = 5.0,
        backoff_factor: float = 2.0,
        jitter: bool = True,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._inner = inner
        self._config = RetryConfig(
            max_attempts=max_attempts,
            base_delay_s=base_delay_s,
            backoff_factor=backoff_factor,
            jitter=jitter,
        )

    @property
    def inner(self) -> BaseGenerationClient:
        return self._inner

    async def generate(self, prompt: str) -> str:
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._inner.generate(prompt)
            except RETRYABLE_ERRORS as e:
                if attempt >= self._config.max_attempts:
                    raise
                delay = _compute_delay(self._config, attempt - 1)
                logger.warning(
                    "%s: %s (attempt %d/%d), retrying in %.1fs",
                    self._inner.provider_name, e, attempt,
                    self._config.max_attempts, delay,
                )
                await asyncio.sleep(delay)

    async def is_available(self) -> bool:
        return await self._inner.is_available()

    @property
    def provider_name(self) -> str:
        return self._inner.provider_name

    @property
    def model(self) -> str:
        return self._inner.model
