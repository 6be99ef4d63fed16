# src/llm/adapters/ollama_adapter.py — v2
"""Ollama local LLM adapter implementing BaseGenerationClient.

Uses the ollama Python SDK against ``/api/generate`` with streaming off.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from qalamseed.llm.base_client import (
    BaseGenerationClient,
    GenerationEmpty,
    GenerationTimeout,
    GenerationUnavailable,
)

logger = logging.getLogger(__name__)


class OllamaAdapter(BaseGenerationClient):
    """Ollama local inference adapter."""

    def __init__(
        self,
        model: str = "qwen2.5:72b",
        base_url: str = "http://localhost:11434",
        timeout_s: float = 300.0,
        temperature: float | None = None,
        **kwargs: Any,
    ):
        self._model = model
        self._host = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._temperature = temperature

    def _client(self):
        import ollama

        return ollama.AsyncClient(host=self._host, timeout=self._timeout_s)

    async def generate(self, prompt: str) -> str:
        import ollama

        kwargs: dict[str, Any] = {"model": self._model, "prompt": prompt, "stream": False}
        if self._temperature is not None:
            kwargs["options"] = {"temperature": self._temperature}

        t0 = time.monotonic()
        try:
            resp = await self._client().generate(**kwargs)
        except httpx.TimeoutException as e:
            raise GenerationTimeout(
                f"Ollama request timed out after {self._timeout_s:.0f}s"
            ) from e
        except (httpx.ConnectError, ConnectionError) as e:
            raise GenerationUnavailable(
                f"Cannot connect to Ollama at {self._host}. Is it running?"
            ) from e
        except ollama.ResponseError as e:
            raise GenerationUnavailable(
                f"Ollama API error: {e.status_code} - {str(e.error)[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise GenerationUnavailable(f"Ollama transport error: {e}") from e
        latency = int((time.monotonic() - t0) * 1000)

        content = resp["response"] if resp is not None else ""
        if not content or not content.strip():
            raise GenerationEmpty("Ollama returned empty response")

        logger.debug(
            "Ollama generate: model=%s, latency_ms=%d, chars=%d",
            self._model, latency, len(content),
        )
        return content

    async def is_available(self) -> bool:
        try:
            await self._client().list()
        except Exception as e:
            logger.debug("Ollama health check failed: %s", e)
            return False
        return True

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def model(self) -> str:
        return self._model
