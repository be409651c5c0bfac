"""Sectioning pipeline — text.txt → sections.json + chunks.jsonl.

Each run fully replaces the previous sectioning result for the filing.
"""

from __future__ import annotations

import logging

from filing_rag.chunking.schemas import Chunk
from filing_rag.chunking.window_chunker import WindowChunker
from filing_rag.documents.schemas import SectionSummary
from filing_rag.documents.sec_parser import detect_sections
from filing_rag.errors import ValidationError
from filing_rag.pipeline.artifacts import load_text
from filing_rag.pipeline.schemas import SectioningResult
from filing_rag.storage.files import write_json, write_jsonl
from filing_rag.storage.locks import filing_lock
from filing_rag.storage.paths import FilingKey, FilingStorage

logger = logging.getLogger(__name__)

NO_CHUNKS_WARNING = "No chunks were created. Check if text content is sufficient."


class SectioningPipeline:
    """Orchestrates load text → detect sections → chunk → persist."""

    def __init__(self, storage: FilingStorage, chunker: WindowChunker | None = None):
        self.storage = storage
        self.chunker = chunker or WindowChunker()

    def run(self, key: FilingKey) -> SectioningResult:
        """Section and chunk one filing.

        Raises:
            NotFoundError: ``text.txt`` is missing.
            ValidationError: ``text.txt`` is empty.
        """
        text = load_text(self.storage, key)
        if not text:
            raise ValidationError("Text file is empty. Please run ingest first.")

        logger.info("Sectioning %s (%d chars)", key, len(text))

        sections = detect_sections(text)
        summaries: list[SectionSummary] = []
        chunks: list[Chunk] = []
        for section in sections:
            section_chunks = self.chunker.chunk_section(text, section, key)
            summaries.append(SectionSummary(section=section, chunks=len(section_chunks)))
            chunks.extend(section_chunks)

        with filing_lock(key):
            write_json(
                self.storage.sections_path(key),
                {
                    "ticker": key.ticker,
                    "form": key.form,
                    "filed": key.filed,
                    "sections": [s.to_dict() for s in summaries],
                },
                indent=2,
            )
            write_jsonl(self.storage.chunks_path(key), [c.to_dict() for c in chunks])

        warning = None
        if not chunks:
            warning = NO_CHUNKS_WARNING
            logger.warning("%s: %s", key, warning)

        logger.info("Sectioned %s: %d sections → %d chunks", key, len(sections), len(chunks))
        return SectioningResult(key=key, sections=len(sections), chunks=len(chunks), warning=warning)
