"""Data models for retrieval operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from filing_rag.chunking.schemas import ChunkMetadata


@dataclass(frozen=True)
class RetrievalResult:
    """A scored record returned by a similarity search.

    ``index`` is the record's position in the filing's embedding store.
    """

    index: int
    score: float
    text: str
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)

    def to_dict(self) -> dict[str, Any]:
        return {
            "idx": self.index,
            "score": self.score,
            "text": self.text,
            "metadata": self.metadata.to_dict(),
        }
