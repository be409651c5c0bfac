"""Request models for the section / embed / query surfaces.

Field names follow the wire format (``maxChunks``, ``topK``); Python code
reads the snake_case attributes.
"""

from __future__ import annotations

from typing import Annotated, Any, TypeVar

import pydantic
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints

from filing_rag.config import EmbedJobSettings, RetrievalSettings
from filing_rag.errors import ValidationError
from filing_rag.pipeline.schemas import EmbedOptions
from filing_rag.storage.paths import FilingKey, is_safe_component


def _path_safe(value: str) -> str:
    if not is_safe_component(value):
        raise ValueError("must not contain '/', '\\', '..' or NUL")
    return value


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
IdentityStr = Annotated[NonEmptyStr, AfterValidator(_path_safe)]

RequestT = TypeVar("RequestT", bound=BaseModel)


class FilingRequest(BaseModel):
    """Identity fields shared by every request."""

    model_config = ConfigDict(populate_by_name=True)

    ticker: IdentityStr
    form: IdentityStr
    filed: IdentityStr

    def key(self) -> FilingKey:
        return FilingKey(self.ticker, self.form, self.filed)


class SectionRequest(FilingRequest):
    pass


class EmbedRequest(FilingRequest):
    """Embed call; omitted numeric and resume fields fall back to ``embed_job`` settings."""

    batch: int | None = Field(None, ge=1)
    section: str | None = None
    max_chunks: int | None = Field(None, ge=1, alias="maxChunks")
    resume: bool | None = None

    def options(self, defaults: EmbedJobSettings | None = None) -> EmbedOptions:
        job = defaults or EmbedJobSettings()
        return EmbedOptions(
            section=self.section or None,
            resume=job.resume if self.resume is None else self.resume,
            max_chunks=job.max_chunks if self.max_chunks is None else self.max_chunks,
            batch_size=job.batch_size if self.batch is None else self.batch,
            pause_seconds=job.pause_seconds,
        )


class QueryRequest(FilingRequest):
    query: NonEmptyStr
    top_k: int | None = Field(None, ge=1, alias="topK")

    def resolved_top_k(self, defaults: RetrievalSettings | None = None) -> int:
        return (defaults or RetrievalSettings()).top_k if self.top_k is None else self.top_k


def parse_request(model: type[RequestT], body: dict[str, Any] | None) -> RequestT:
    """Validate a request body, raising ``ValidationError`` on bad input."""
    try:
        return model.model_validate(body or {})
    except pydantic.ValidationError as exc:
        fields = sorted({
            ".".join(str(p) for p in err["loc"]) or "body" for err in exc.errors()
        })
        raise ValidationError(f"Invalid or missing fields: {', '.join(fields)}") from exc
