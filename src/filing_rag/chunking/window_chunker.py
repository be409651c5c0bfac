"""Sliding-window chunker over detected filing sections.

Each section is cut into fixed-size character windows that overlap by a
fixed amount. Windows never cross a section boundary, and windows whose
trimmed text is too short to be useful are dropped.
"""

from __future__ import annotations

import logging

from filing_rag.chunking.schemas import Chunk, ChunkMetadata
from filing_rag.documents.schemas import Section
from filing_rag.errors import ValidationError
from filing_rag.storage.paths import FilingKey

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1000
OVERLAP = 200
MIN_CHARS = 100


class WindowChunker:
    """Fixed-size, overlapping character windows per section."""

    def __init__(
        self,
        chunk_size: int = CHUNK_SIZE,
        overlap: int = OVERLAP,
        min_chars: int = MIN_CHARS,
    ):
        if not chunk_size > overlap >= 0:
            raise ValidationError(
                f"chunk_size must exceed overlap >= 0 (got {chunk_size}, {overlap})"
            )
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.min_chars = min_chars

    @property
    def stride(self) -> int:
        return self.chunk_size - self.overlap

    def chunk(
        self,
        text: str,
        sections: list[Section],
        key: FilingKey | None = None,
    ) -> list[Chunk]:
        """Chunk every section in order.

        Args:
            text: Full filing text the section offsets refer to.
            sections: Output of ``detect_sections``.
            key: Filing identity stamped onto each chunk's metadata.

        Returns:
            Chunks in generation order: section 1 first window through the
            last section's final window.
        """
        chunks: list[Chunk] = []
        for section in sections:
            chunks.extend(self.chunk_section(text, section, key))

        logger.info(
            "WindowChunker produced %d chunks from %d sections (size=%d, overlap=%d)",
            len(chunks), len(sections), self.chunk_size, self.overlap,
        )
        return chunks

    def chunk_section(
        self,
        text: str,
        section: Section,
        key: FilingKey | None = None,
    ) -> list[Chunk]:
        """Walk the window across one section's text."""
        section_text = text[section.char_start:section.char_end]
        chunks: list[Chunk] = []

        start = 0
        while start < len(section_text):
            end = min(start + self.chunk_size, len(section_text))
            window = section_text[start:end].strip()

            if len(window) > self.min_chars:
                chunks.append(Chunk(
                    text=window,
                    metadata=ChunkMetadata(
                        ticker=key.ticker if key else "",
                        form=key.form if key else "",
                        filed=key.filed if key else "",
                        section=section.name,
                        char_start=section.char_start + start,
                        char_end=section.char_start + end,
                    ),
                ))
            else:
                logger.debug(
                    "Dropped short window in %s at %d (%d chars)",
                    section.name, section.char_start + start, len(window),
                )

            start += self.stride

        return chunks


def chunk_sections(
    text: str,
    sections: list[Section],
    chunk_size: int = CHUNK_SIZE,
    overlap: int = OVERLAP,
    key: FilingKey | None = None,
) -> list[Chunk]:
    """Functional shortcut for ``WindowChunker(chunk_size, overlap).chunk(...)``."""
    return WindowChunker(chunk_size=chunk_size, overlap=overlap).chunk(text, sections, key)
