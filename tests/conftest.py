"""Shared fixtures for tests — synthetic filings, no network calls."""

from __future__ import annotations

import hashlib
from pathlib import Path

import numpy as np
import pytest

from filing_rag.chunking.schemas import Chunk, ChunkMetadata
from filing_rag.embeddings.base import EmbeddingProvider
from filing_rag.storage.files import write_jsonl
from filing_rag.storage.paths import FilingKey, FilingStorage

DIM = 64


# ---------------------------------------------------------------------------
# Mock embedding function
# ---------------------------------------------------------------------------


class MockEmbedder(EmbeddingProvider):
    """Deterministic hash-based embeddings. Records every batch it sees."""

    def __init__(self, dim: int = DIM):
        self._dim = dim
        self.calls: list[list[str]] = []

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self._hash_embed(t) for t in texts]

    def embed_query(self, query: str) -> list[float]:
        return self._hash_embed(query)

    @property
    def dimension(self) -> int:
        return self._dim

    def _hash_embed(self, text: str) -> list[float]:
        h = hashlib.sha256(text.encode()).digest()
        vec = np.array([h[i % len(h)] / 255.0 - 0.5 for i in range(self._dim)], dtype=np.float64)
        vec /= np.linalg.norm(vec)
        return vec.tolist()


@pytest.fixture
def mock_embedder() -> MockEmbedder:
    return MockEmbedder()


@pytest.fixture
def embedder_factory() -> type[MockEmbedder]:
    return MockEmbedder


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def storage(tmp_path: Path) -> FilingStorage:
    return FilingStorage(tmp_path / "data")


@pytest.fixture
def filing_key() -> FilingKey:
    return FilingKey("AAPL", "10-K", "2024-11-01")


@pytest.fixture
def write_text(storage: FilingStorage):
    """Write ``text.txt`` for a filing, as the ingest stage would."""

    def _write(key: FilingKey, text: str) -> Path:
        path = storage.text_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


def _make_chunks(
    key: FilingKey,
    count: int,
    section: str = "Item 1A: Risk Factors",
) -> list[Chunk]:
    """``count`` distinct chunks in one section, 800 characters apart."""
    return [
        Chunk(
            text=f"{section} chunk {i}: " + "supply chain exposure " * 8,
            metadata=ChunkMetadata(
                ticker=key.ticker,
                form=key.form,
                filed=key.filed,
                section=section,
                char_start=i * 800,
                char_end=i * 800 + 1000,
            ),
        )
        for i in range(count)
    ]


@pytest.fixture
def make_chunks():
    return _make_chunks


@pytest.fixture
def write_chunks(storage: FilingStorage):
    """Write ``chunks.jsonl`` for a filing, as the sectioning stage would."""

    def _write(key: FilingKey, chunks: list[Chunk]) -> Path:
        path = storage.chunks_path(key)
        write_jsonl(path, [c.to_dict() for c in chunks])
        return path

    return _write


# ---------------------------------------------------------------------------
# Synthetic filing content
# ---------------------------------------------------------------------------


@pytest.fixture
def sec_filing_text() -> str:
    """10-K text with a cover page and four ITEM headings."""
    return (
        "UNITED STATES SECURITIES AND EXCHANGE COMMISSION\n"
        "FORM 10-K\n"
        "Apple Inc.\n"
        "\n"
        "PART I\n"
        "Item 1. Business\n"
        + "Apple Inc. designs smartphones and computers. "
        "The company operates globally with significant presence "
        "in North America, Europe, and Greater China. " * 20 + "\n"
        "\n"
        "Item 1A. Risk Factors\n"
        + "Global economic conditions affect demand for consumer electronics. "
        "Foreign exchange fluctuations impact international revenue. "
        "Supply chain disruptions can affect product availability. " * 15 + "\n"
        "\n"
        "PART II\n"
        "Item 7. Management's Discussion and Analysis of Financial Condition\n"
        + "Revenue for fiscal 2024 was $395.8 billion, an increase of 3.3% "
        "from $383.3 billion in fiscal 2023. Services revenue grew 14% "
        "year-over-year to $85.2 billion. " * 25 + "\n"
        "\n"
        "Item 8. Financial Statements and Supplementary Data\n"
        "Consolidated Balance Sheet as of September 28, 2024. "
        "Total assets: $352.6 billion. Total liabilities: $290.4 billion."
    )
