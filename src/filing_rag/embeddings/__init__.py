"""Embedding providers — sentence-transformers, Ollama, OpenAI."""

from filing_rag.embeddings.base import EmbeddingProvider, validate_embeddings
from filing_rag.embeddings.factory import available_providers, get_embedding_provider

__all__ = [
    "EmbeddingProvider",
    "available_providers",
    "get_embedding_provider",
    "validate_embeddings",
]
