"""Data models for filing sections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

PREVIEW_CHARS = 500


@dataclass(frozen=True)
class Section:
    """A named, contiguous span of a filing's text.

    ``char_end`` is exclusive. ``preview`` is for display only and is never
    used for retrieval.
    """

    name: str
    start_line: int
    end_line: int
    char_start: int
    char_end: int
    preview: str = ""

    @property
    def char_count(self) -> int:
        return self.char_end - self.char_start

    def to_dict(self, chunks: int | None = None) -> dict[str, Any]:
        """Serialize with the ``sections.json`` key names."""
        d: dict[str, Any] = {
            "name": self.name,
            "startLine": self.start_line,
            "endLine": self.end_line,
            "charStart": self.char_start,
            "charEnd": self.char_end,
            "charCount": self.char_count,
        }
        if chunks is not None:
            d["chunks"] = chunks
        d["preview"] = self.preview
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Section:
        return cls(
            name=data["name"],
            start_line=data["startLine"],
            end_line=data["endLine"],
            char_start=data["charStart"],
            char_end=data["charEnd"],
            preview=data.get("preview", ""),
        )


@dataclass
class SectionSummary:
    """A stored section together with its chunk count."""

    section: Section
    chunks: int = 0

    def to_dict(self) -> dict[str, Any]:
        return self.section.to_dict(chunks=self.chunks)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SectionSummary:
        return cls(section=Section.from_dict(data), chunks=data.get("chunks", 0))
