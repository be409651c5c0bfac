"""Per-filing embedding store."""

from filing_rag.store.embedding_store import EmbeddingStore
from filing_rag.store.schemas import EmbeddingRecord

__all__ = ["EmbeddingRecord", "EmbeddingStore"]
