"""Readers for the per-filing artifacts produced by earlier stages."""

from __future__ import annotations

from filing_rag.chunking.schemas import Chunk
from filing_rag.documents.schemas import SectionSummary
from filing_rag.errors import NotFoundError, StorageError
from filing_rag.storage.files import read_json, read_jsonl, read_text
from filing_rag.storage.paths import FilingKey, FilingStorage


def load_text(storage: FilingStorage, key: FilingKey) -> str:
    path = storage.text_path(key)
    if not path.is_file():
        raise NotFoundError("text.txt not found. Please run ingest first.")
    return read_text(path)


def load_sections(storage: FilingStorage, key: FilingKey) -> list[SectionSummary]:
    """Read ``sections.json`` written by the sectioning stage."""
    data = read_json(storage.sections_path(key))
    if data is None:
        raise NotFoundError("sections.json not found. Please run section first.")
    if not isinstance(data, dict) or not isinstance(data.get("sections"), list):
        raise StorageError(f"sections.json for {key} has no 'sections' list")
    return [SectionSummary.from_dict(s) for s in data["sections"]]


def load_chunks(storage: FilingStorage, key: FilingKey) -> list[Chunk]:
    """Read ``chunks.jsonl`` in generation order."""
    path = storage.chunks_path(key)
    if not path.is_file():
        raise NotFoundError("chunks.jsonl not found. Please run section first.")
    try:
        return [Chunk.from_dict(row) for row in read_jsonl(path)]
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"Malformed chunk in {path}: {exc}") from exc
