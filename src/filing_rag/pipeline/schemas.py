"""Data models for the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from filing_rag.errors import ValidationError
from filing_rag.storage.paths import FilingKey

NOTHING_TO_EMBED = "Nothing to embed (already done)"


@dataclass
class SectioningResult:
    """Outcome of sectioning + chunking one filing."""

    key: FilingKey
    sections: int
    chunks: int
    warning: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "success": True,
            "ticker": self.key.ticker,
            "form": self.key.form,
            "filed": self.key.filed,
            "sections": self.sections,
            "chunks": self.chunks,
        }
        if self.warning:
            d["warning"] = self.warning
        return d


@dataclass(frozen=True)
class EmbedOptions:
    """Scope and size of one resumable embedding call.

    Attributes:
        section: Case-insensitive substring restricting chunks by section name.
        resume: Start after the records already embedded in this scope.
        max_chunks: Upper bound on chunks embedded by a single call.
        batch_size: Chunks per embedding-function call.
        pause_seconds: Delay between sub-batches.
    """

    section: str | None = None
    resume: bool = True
    max_chunks: int = 5
    batch_size: int = 1
    pause_seconds: float = 0.05

    def __post_init__(self) -> None:
        if self.max_chunks < 1:
            raise ValidationError("maxChunks must be at least 1")
        if self.batch_size < 1:
            raise ValidationError("batch must be at least 1")
        if self.pause_seconds < 0:
            raise ValidationError("pause_seconds must not be negative")


@dataclass
class EmbedResult:
    """Outcome of one embedding call.

    ``total`` is the number of records in the store after the call and
    ``candidates`` the number of chunks in the call's section scope.
    """

    embedded: int
    total: int
    start: int
    candidates: int = 0
    message: str | None = None

    @property
    def done(self) -> bool:
        return self.embedded == 0

    def to_dict(self) -> dict[str, Any]:
        if self.message:
            return {"embedded": self.embedded, "message": self.message}
        return {"embedded": self.embedded, "total": self.total, "start": self.start}
