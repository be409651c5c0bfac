"""Retriever — embed query, score every stored record, return top-K."""

from __future__ import annotations

import logging

from filing_rag.embeddings.base import EmbeddingProvider, embed_query_checked
from filing_rag.errors import NotFoundError, StorageError, ValidationError
from filing_rag.retrieval.schemas import RetrievalResult
from filing_rag.retrieval.similarity import cosine_scores, top_k_indices
from filing_rag.storage.paths import FilingKey, FilingStorage
from filing_rag.store.embedding_store import EmbeddingStore

logger = logging.getLogger(__name__)


class Retriever:
    """Brute-force cosine search over one filing's embedding store."""

    def __init__(self, embedding_provider: EmbeddingProvider, storage: FilingStorage):
        self.embedding_provider = embedding_provider
        self.storage = storage

    def search(self, key: FilingKey, query: str, top_k: int = 5) -> list[RetrievalResult]:
        """Rank the filing's records by similarity to ``query``.

        Args:
            key: Filing to search.
            query: Free-text question.
            top_k: Maximum results; larger than the record count returns all.

        Returns:
            Results with non-increasing ``score``; ties keep store order.

        Raises:
            ValidationError: Empty query or ``top_k < 1``.
            NotFoundError: The filing has no embeddings yet.
        """
        if not query or not query.strip():
            raise ValidationError("query must be a non-empty string")
        if top_k < 1:
            raise ValidationError("topK must be at least 1")

        store = EmbeddingStore(self.storage, key)
        if not store.exists():
            raise NotFoundError("embeddings.json not found. Run embed first.")

        records = store.load()
        if not records:
            raise NotFoundError("embeddings.json has no records. Run embed first.")

        query_vec = embed_query_checked(self.embedding_provider, query, store.dimension)

        try:
            scores = cosine_scores(query_vec, [r.embedding for r in records])
        except ValueError as exc:
            raise StorageError(f"Stored embeddings for {key} are inconsistent: {exc}") from exc

        results = [
            RetrievalResult(
                index=i,
                score=float(scores[i]),
                text=records[i].text,
                metadata=records[i].metadata,
            )
            for i in top_k_indices(scores, top_k)
        ]

        logger.info(
            "Retrieved %d of %d records for %s (top score=%.4f)",
            len(results), len(records), key, results[0].score if results else 0.0,
        )
        return results
