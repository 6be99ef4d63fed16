# src/llm/adapters/lmstudio_adapter.py — v2
"""LM Studio adapter implementing BaseGenerationClient.

LM Studio exposes an OpenAI-compatible server, so this talks to it through
the official openai SDK with ``base_url`` pointed at ``{LMS_BASE_URL}/v1``.
SDK-level retries are disabled: retrying is the caller's decision.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from qalamseed.llm.base_client import (
    BaseGenerationClient,
    GenerationEmpty,
    GenerationTimeout,
    GenerationUnavailable,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert in Classical Arabic grammar (naḥw and ṣarf). "
    "Return only valid JSON, no additional text or markdown."
)

# LM Studio ignores the key but the SDK requires one.
_PLACEHOLDER_API_KEY = "lm-studio"


class LMStudioAdapter(BaseGenerationClient):
    """OpenAI-compatible LM Studio adapter."""

    def __init__(
        self,
        model: str = "local-model",
        base_url: str = "http://localhost:1234",
        timeout_s: float = 300.0,
        temperature: float = 0.7,
        api_key: str = _PLACEHOLDER_API_KEY,
        **kwargs: Any,
    ):
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._temperature = temperature
        self._api_key = api_key

    def _client(self):
        import openai

        return openai.AsyncOpenAI(
            api_key=self._api_key,
            base_url=f"{self._base_url}/v1",
            timeout=self._timeout_s,
            max_retries=0,
        )

    async def generate(self, prompt: str) -> str:
        import openai

        t0 = time.monotonic()
        try:
            resp = await self._client().chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._temperature,
                stream=False,
            )
        # APITimeoutError subclasses APIConnectionError, so it goes first.
        except openai.APITimeoutError as e:
            raise GenerationTimeout(
                f"LM Studio request timed out after {self._timeout_s:.0f}s"
            ) from e
        except openai.APIConnectionError as e:
            raise GenerationUnavailable(
                f"Cannot connect to LM Studio at {self._base_url}. Is it running?"
            ) from e
        except openai.APIStatusError as e:
            raise GenerationUnavailable(
                f"LM Studio API error: {e.status_code} - {str(e.message)[:200]}"
            ) from e
        latency = int((time.monotonic() - t0) * 1000)

        content = ""
        if resp.choices:
            content = resp.choices[0].message.content or ""
        if not content.strip():
            raise GenerationEmpty("LM Studio returned empty response")

        usage = resp.usage
        logger.debug(
            "LM Studio completion: model=%s, latency_ms=%d, tokens_in=%s, tokens_out=%s",
            self._model, latency,
            usage.prompt_tokens if usage else "?",
            usage.completion_tokens if usage else "?",
        )
        return content

    async def is_available(self) -> bool:
        try:
            await self._client().models.list()
        except Exception as e:
            logger.debug("LM Studio health check failed: %s", e)
            return False
        return True

    @property
    def provider_name(self) -> str:
        return "lms"

    @property
    def model(self) -> str:
        return self._model
