"""Abstract base class for embedding providers.

A provider is the pipeline's black-box embedding function: text in,
fixed-length vector out, deterministic for a given model version.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

from filing_rag.errors import FilingRAGError, UpstreamError


class EmbeddingProvider(ABC):
    """Interface for text embedding models."""

    @abstractmethod
    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of texts.

        Args:
            texts: Strings to embed.

        Returns:
            List of embedding vectors (same order as input).
        """

    @abstractmethod
    def embed_query(self, query: str) -> list[float]:
        """Embed a single query string.

        Args:
            query: The search query.

        Returns:
            Embedding vector.
        """

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimensionality."""

    def close(self) -> None:
        """Release any underlying client or model handles."""

    @classmethod
    def provider_name(cls) -> str:
        """Return human-readable provider name."""
        return cls.__name__


def validate_embeddings(
    vectors: object,
    expected_count: int,
    dimension: int | None = None,
) -> list[list[float]]:
    """Check provider output before it is persisted.

    Every vector must be a non-empty list of finite numbers, all of the same
    length, one per input text. When ``dimension`` is given the vectors must
    also have exactly that length.

    Raises:
        UpstreamError: On any malformed output.
    """
    if not isinstance(vectors, list):
        raise UpstreamError(f"Embedding output must be a list, got {type(vectors).__name__}")
    if len(vectors) != expected_count:
        raise UpstreamError(
            f"Embedding output has {len(vectors)} vectors for {expected_count} inputs"
        )

    checked: list[list[float]] = []
    for i, vec in enumerate(vectors):
        if not isinstance(vec, list | tuple) or not vec:
            raise UpstreamError(f"Embedding {i} is empty or not a sequence")
        try:
            floats = [float(x) for x in vec]
        except (TypeError, ValueError) as exc:
            raise UpstreamError(f"Embedding {i} contains non-numeric values") from exc
        if not all(math.isfinite(x) for x in floats):
            raise UpstreamError(f"Embedding {i} contains non-finite values")

        expected = dimension if dimension is not None else (len(checked[0]) if checked else None)
        if expected is not None and len(floats) != expected:
            raise UpstreamError(
                f"Embedding {i} has dimension {len(floats)}, expected {expected}"
            )
        checked.append(floats)

    return checked


def embed_texts_checked(
    provider: EmbeddingProvider,
    texts: list[str],
    dimension: int | None = None,
) -> list[list[float]]:
    """Call ``provider.embed_texts`` and validate the result.

    Exceptions from a provider that are not already pipeline errors are
    re-raised as ``UpstreamError`` with the original chained.
    """
    try:
        vectors = provider.embed_texts(texts)
    except FilingRAGError:
        raise
    except Exception as exc:
        raise UpstreamError(f"{provider.provider_name()} failed: {exc}") from exc
    return validate_embeddings(vectors, len(texts), dimension)


def embed_query_checked(
    provider: EmbeddingProvider,
    query: str,
    dimension: int | None = None,
) -> list[float]:
    """Single-item counterpart of ``embed_texts_checked``."""
    try:
        vector = provider.embed_query(query)
    except FilingRAGError:
        raise
    except Exception as exc:
        raise UpstreamError(f"{provider.provider_name()} failed: {exc}") from exc
    return validate_embeddings([vector], 1, dimension)[0]
