"""Retrieval — cosine similarity search over stored embeddings."""

from filing_rag.retrieval.retriever import Retriever
from filing_rag.retrieval.schemas import RetrievalResult
from filing_rag.retrieval.similarity import cosine_similarity

__all__ = ["RetrievalResult", "Retriever", "cosine_similarity"]
