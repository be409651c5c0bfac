"""Request-level stages — sectioning, resumable embedding, query."""

from filing_rag.pipeline.embedding_job import EmbeddingJob
from filing_rag.pipeline.schemas import EmbedOptions, EmbedResult, SectioningResult
from filing_rag.pipeline.sectioning import SectioningPipeline

__all__ = [
    "EmbedOptions",
    "EmbedResult",
    "EmbeddingJob",
    "SectioningPipeline",
    "SectioningResult",
]
