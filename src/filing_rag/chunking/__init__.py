"""Section-bounded sliding-window chunking."""

from filing_rag.chunking.schemas import Chunk, ChunkMetadata
from filing_rag.chunking.window_chunker import WindowChunker, chunk_sections

__all__ = ["Chunk", "ChunkMetadata", "WindowChunker", "chunk_sections"]
