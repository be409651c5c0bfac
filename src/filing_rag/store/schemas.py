"""Data models for the embedding store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from filing_rag.chunking.schemas import Chunk, ChunkMetadata
from filing_rag.errors import StorageError


@dataclass(frozen=True)
class EmbeddingRecord:
    """A chunk with its embedding.

    ``text`` is byte-identical to the chunk it came from; resume logic
    relies on that identity.
    """

    embedding: list[float]
    text: str
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)

    @classmethod
    def from_chunk(cls, chunk: Chunk, embedding: list[float]) -> EmbeddingRecord:
        return cls(embedding=embedding, text=chunk.text, metadata=chunk.metadata)

    def to_dict(self) -> dict[str, Any]:
        return {
            "embedding": self.embedding,
            "text": self.text,
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EmbeddingRecord:
        embedding = data.get("embedding")
        if not isinstance(embedding, list) or "text" not in data:
            raise StorageError("Embedding record is missing 'embedding' or 'text'")
        return cls(
            embedding=embedding,
            text=data["text"],
            metadata=ChunkMetadata.from_dict(data.get("metadata")),
        )
