"""Embedding provider factory — registry, lazy import, singleton cache.

Providers hold heavy resources (a loaded model, an HTTP client), so each
distinct ``(provider, kwargs)`` combination is created once per process and
reused. Creation happens under a lock so concurrent first callers never
load the same model twice.
"""

from __future__ import annotations

import importlib
import logging
import threading
from typing import Any

from filing_rag.config import EmbeddingSettings
from filing_rag.embeddings.base import EmbeddingProvider

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Provider registry: (provider_key, module_path, class_name)
# ---------------------------------------------------------------------------

_PROVIDER_REGISTRY: list[tuple[str, str, str]] = [
    ("huggingface", "filing_rag.embeddings.huggingface_provider", "HuggingFaceEmbeddingProvider"),
    ("ollama", "filing_rag.embeddings.ollama_provider", "OllamaEmbeddingProvider"),
    ("openai", "filing_rag.embeddings.openai_provider", "OpenAIEmbeddingProvider"),
]

# Singleton cache keyed by (provider_key, sorted kwargs)
_provider_cache: dict[tuple[str, tuple[tuple[str, Any], ...]], EmbeddingProvider] = {}
_cache_lock = threading.Lock()


def get_embedding_provider(
    provider: str = "huggingface",
    **kwargs,
) -> EmbeddingProvider:
    """Get an embedding provider by name.

    Args:
        provider: One of ``huggingface``, ``ollama``, ``openai``.
        **kwargs: Passed to the provider constructor. Values must be
            hashable; they are part of the cache key.

    Returns:
        An ``EmbeddingProvider`` instance, shared by every caller asking for
        the same provider and kwargs.
    """
    key = provider.lower()

    for reg_key, module_path, cls_name in _PROVIDER_REGISTRY:
        if reg_key != key:
            continue

        cache_key = (key, tuple(sorted(kwargs.items())))
        with _cache_lock:
            instance = _provider_cache.get(cache_key)
            if instance is None:
                mod = importlib.import_module(module_path)
                cls = getattr(mod, cls_name)
                instance = cls(**kwargs)
                _provider_cache[cache_key] = instance
                logger.info("Initialised embedding provider %s", instance.provider_name())
            return instance

    available = [k for k, _, _ in _PROVIDER_REGISTRY]
    raise ValueError(f"Unknown embedding provider '{provider}'. Available: {available}")


def provider_from_settings(settings: EmbeddingSettings) -> EmbeddingProvider:
    """Build the configured provider, mapping settings to constructor kwargs."""
    key = settings.provider.lower()
    if key == "ollama":
        return get_embedding_provider(key, model=settings.model, dimension=settings.dimension)
    if key == "openai":
        return get_embedding_provider(key, model=settings.model, dimensions=settings.dimension)
    return get_embedding_provider(key, model=settings.model)


def available_providers() -> list[str]:
    """Return names of registered embedding providers."""
    return [k for k, _, _ in _PROVIDER_REGISTRY]


def clear_cache() -> None:
    """Close and drop cached providers (for shutdown and tests)."""
    with _cache_lock:
        for instance in _provider_cache.values():
            instance.close()
        _provider_cache.clear()
