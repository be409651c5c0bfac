"""HuggingFace/sentence-transformers embedding provider.

Runs locally via ``sentence-transformers``. Requires the ``huggingface`` extra.
The default ``all-MiniLM-L6-v2`` model mean-pools token states into a
384-dimensional, L2-normalized sentence vector.
"""

from __future__ import annotations

import logging
from typing import Any

from filing_rag.embeddings.base import EmbeddingProvider, validate_embeddings
from filing_rag.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "all-MiniLM-L6-v2"


class HuggingFaceEmbeddingProvider(EmbeddingProvider):
    """Embed text locally using sentence-transformers."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        device: str | None = None,
        normalize: bool = True,
        cache_folder: str | None = None,
    ):
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as exc:
            raise ImportError(
                "sentence-transformers required: "
                "pip install sec-filing-rag[huggingface]"
            ) from exc

        try:
            self._model: Any = SentenceTransformer(
                model, device=device, cache_folder=cache_folder
            )
        except OSError as exc:
            raise UpstreamError(f"Failed to load embedding model {model}: {exc}") from exc

        self.model = model
        self._normalize = normalize
        self._dim: int = self._model.get_sentence_embedding_dimension()
        logger.info("Loaded HF model %s (dim=%d)", model, self._dim)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        vectors = self._encode(texts)
        return validate_embeddings(vectors, len(texts), self._dim)

    def embed_query(self, query: str) -> list[float]:
        return validate_embeddings(self._encode([query]), 1, self._dim)[0]

    @property
    def dimension(self) -> int:
        return self._dim

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _encode(self, texts: list[str]) -> list[list[float]]:
        try:
            embeddings = self._model.encode(
                texts,
                show_progress_bar=False,
                normalize_embeddings=self._normalize,
            )
        except (RuntimeError, ValueError) as exc:
            raise UpstreamError(f"{self.model} failed to embed {len(texts)} texts: {exc}") from exc
        return [vec.tolist() for vec in embeddings]
