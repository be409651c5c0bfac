"""Application settings loaded from YAML with environment variable overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

# ---------------------------------------------------------------------------
# Settings sections
# ---------------------------------------------------------------------------


class StorageSettings(BaseModel):
    data_root: str = "data"


class EmbeddingSettings(BaseModel):
    provider: str = "huggingface"
    model: str = "all-MiniLM-L6-v2"
    dimension: int = 384


class ChunkingSettings(BaseModel):
    chunk_size: int = 1000
    overlap: int = 200
    min_chars: int = 100

    @model_validator(mode="after")
    def _check_window(self) -> ChunkingSettings:
        if not self.chunk_size > self.overlap >= 0:
            raise ValueError("chunking requires chunk_size > overlap >= 0")
        return self


class EmbedJobSettings(BaseModel):
    batch_size: int = 1
    max_chunks: int = 5
    resume: bool = True
    pause_seconds: float = 0.05


class RetrievalSettings(BaseModel):
    top_k: int = 5


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    storage: StorageSettings = Field(default_factory=StorageSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    embed_job: EmbedJobSettings = Field(default_factory=EmbedJobSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)


def _find_settings_file() -> Path | None:
    """Walk up from cwd looking for settings.yaml."""
    profile = os.getenv("FILING_RAG_PROFILE", "")
    names = [f"settings-{profile}.yaml", "settings.yaml"] if profile else ["settings.yaml"]

    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        for name in names:
            candidate = parent / name
            if candidate.exists():
                return candidate
    return None


def load_settings() -> Settings:
    """Load settings from YAML file, falling back to defaults.

    ``FILING_RAG_DATA_ROOT`` overrides ``storage.data_root`` when set.
    """
    path = _find_settings_file()
    raw: dict = {}
    if path is not None:
        with open(path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}

    settings = Settings(**raw)

    data_root = os.getenv("FILING_RAG_DATA_ROOT")
    if data_root:
        settings.storage.data_root = data_root

    return settings
