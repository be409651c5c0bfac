"""Data models for chunks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ChunkMetadata:
    """Metadata carried by each chunk — stored alongside embeddings.

    ``char_start`` / ``char_end`` are absolute offsets into the filing text.
    """

    ticker: str = ""
    form: str = ""
    filed: str = ""
    section: str = ""
    char_start: int = 0
    char_end: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticker": self.ticker,
            "form": self.form,
            "filed": self.filed,
            "section": self.section,
            "char_start": self.char_start,
            "char_end": self.char_end,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ChunkMetadata:
        data = data or {}
        return cls(
            ticker=str(data.get("ticker") or ""),
            form=str(data.get("form") or ""),
            filed=str(data.get("filed") or ""),
            section=str(data.get("section") or ""),
            char_start=int(data.get("char_start", data.get("charStart", 0)) or 0),
            char_end=int(data.get("char_end", data.get("charEnd", 0)) or 0),
        )


@dataclass(frozen=True)
class Chunk:
    """A single retrievable window of a filing section."""

    text: str
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "metadata": self.metadata.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Chunk:
        return cls(text=data["text"], metadata=ChunkMetadata.from_dict(data.get("metadata")))


def section_matches(section: str, section_filter: str | None) -> bool:
    """Case-insensitive substring match used to scope work to a section."""
    if not section_filter:
        return True
    return section_filter.lower() in (section or "").lower()
