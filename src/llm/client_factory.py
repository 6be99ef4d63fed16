# src/llm/client_factory.py — v3
"""Factory: instantiate a generation client from a backend name.

Backend choice never changes pipeline semantics, only where prompts go.
"""

from __future__ import annotations

import importlib
import logging

from qalamseed.config.settings import Settings
from qalamseed.llm.base_client import BaseGenerationClient

logger = logging.getLogger(__name__)

# Registry of backend name → adapter class path (lazy import).
_BACKEND_REGISTRY: dict[str, str] = {
    "ollama": "qalamseed.llm.adapters.ollama_adapter.OllamaAdapter",
    "lms": "qalamseed.llm.adapters.lmstudio_adapter.LMStudioAdapter",
}

_ALIASES: dict[str, str] = {
    "lmstudio": "lms",
}


class UnsupportedBackendError(ValueError):
    """Raised when a backend is not registered."""


def create_generation_client(
    backend: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseGenerationClient:
    """Instantiate the adapter for a backend.

    Args:
        backend: Backend identifier (ollama, lms, lmstudio).
        settings: Application settings (endpoint, model, timeout).
        **kwargs: Overrides passed straight to the adapter.

    Returns:
        Configured BaseGenerationClient instance.

    Raises:
        UnsupportedBackendError: If backend is not registered.
    """
    name = _ALIASES.get(backend.lower(), backend.lower())
    if name not in _BACKEND_REGISTRY:
        raise UnsupportedBackendError(
            f"Unsupported generation backend: {backend!r}. "
            f"Available: {', '.join(sorted(_BACKEND_REGISTRY))}"
        )

    adapter_cls = _import_class(_BACKEND_REGISTRY[name])

    init_kwargs = dict(kwargs)
    if settings is not None:
        init_kwargs.setdefault("timeout_s", settings.llm_timeout_s)
        init_kwargs.setdefault("temperature", settings.llm_temperature)
        if name == "ollama":
            init_kwargs.setdefault("model", settings.ollama_model)
            init_kwargs.setdefault("base_url", settings.ollama_base_url)
        elif name == "lms":
            init_kwargs.setdefault("model", settings.lms_model)
            init_kwargs.setdefault("base_url", settings.lms_base_url)

    logger.debug("Creating generation client: backend=%s, model=%s", name, init_kwargs.get("model"))
    return adapter_cls(**init_kwargs)


def create_client_from_settings(settings: Settings) -> BaseGenerationClient:
    """Build the configured client, wrapped for retries when enabled."""
    client = create_generation_client(settings.llm_backend, settings)
    if settings.llm_max_attempts > 1:
        from qalamseed.llm.retry import RetryingGenerationClient

        return RetryingGenerationClient(
            client,
            max_attempts=settings.llm_max_attempts,
            base_delay_s=settings.llm_retry_base_delay_s,
        )
    return client


def register_backend(name: str, class_path: str) -> None:
    """Register a custom backend adapter.

    Args:
        name: Backend identifier.
        class_path: Fully qualified class path implementing BaseGenerationClient.
    """
    _BACKEND_REGISTRY[name] = class_path
    logger.info("Registered generation backend: %s → %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
