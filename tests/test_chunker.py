"""Tests for the section-bounded sliding-window chunker."""

from __future__ import annotations

import pytest

from filing_rag.chunking.schemas import Chunk, ChunkMetadata, section_matches
from filing_rag.chunking.window_chunker import WindowChunker, chunk_sections
from filing_rag.documents.schemas import Section
from filing_rag.documents.sec_parser import detect_sections
from filing_rag.errors import ValidationError
from filing_rag.storage.paths import FilingKey


def _section(text: str, name: str = "Item 1A: Risk Factors", start: int = 0, end: int | None = None) -> Section:
    return Section(
        name=name,
        start_line=0,
        end_line=0,
        char_start=start,
        char_end=len(text) if end is None else end,
    )


class TestWindowChunker:
    def test_three_windows_for_2300_chars(self):
        text = "x" * 2300
        chunks = WindowChunker(chunk_size=1000, overlap=200).chunk_section(text, _section(text))

        assert len(chunks) == 3
        starts = [c.metadata.char_start for c in chunks]
        assert starts == [0, 800, 1600]
        assert chunks[1].metadata.char_start == chunks[0].metadata.char_start + 800
        assert chunks[2].metadata.char_end == 2300
        assert len(chunks[2].text) == 700

    def test_offsets_are_absolute(self):
        text = "preamble " * 50 + "y" * 1500
        start = len("preamble " * 50)
        chunks = WindowChunker().chunk_section(text, _section(text, start=start))
        assert chunks[0].metadata.char_start == start
        assert chunks[0].text == text[start:start + 1000]

    def test_short_tail_window_dropped(self):
        text = "z" * 1850
        chunks = WindowChunker(chunk_size=1000, overlap=200).chunk_section(text, _section(text))
        assert len(chunks) == 3

        text = "z" * 1690
        chunks = WindowChunker(chunk_size=1000, overlap=200).chunk_section(text, _section(text))
        assert [c.metadata.char_start for c in chunks] == [0, 800]

    def test_length_threshold_is_strict(self):
        exactly = "a" * 100
        chunks = WindowChunker().chunk_section(exactly, _section(exactly))
        assert chunks == []

        longer = "a" * 101
        chunks = WindowChunker().chunk_section(longer, _section(longer))
        assert len(chunks) == 1

    def test_whitespace_only_window_dropped(self):
        text = " " * 500 + "\n" * 500
        assert WindowChunker().chunk_section(text, _section(text)) == []

    def test_text_is_trimmed(self):
        text = "   " + "b" * 300 + "   \n"
        chunks = WindowChunker().chunk_section(text, _section(text))
        assert chunks[0].text == "b" * 300

    def test_overlap_between_consecutive_windows(self):
        text = "".join(chr(ord("a") + i % 26) for i in range(3000))
        chunks = WindowChunker(chunk_size=1000, overlap=200).chunk_section(text, _section(text))
        for prev, nxt in zip(chunks, chunks[1:]):
            assert prev.text[-200:] == nxt.text[:200]

    def test_chunks_never_cross_sections(self, sec_filing_text):
        key = FilingKey("AAPL", "10-K", "2024-11-01")
        sections = detect_sections(sec_filing_text)
        chunks = WindowChunker().chunk(sec_filing_text, sections, key)

        bounds = {s.name: (s.char_start, s.char_end) for s in sections}
        for c in chunks:
            lo, hi = bounds[c.metadata.section]
            assert lo <= c.metadata.char_start < c.metadata.char_end <= hi

    def test_metadata_carries_filing_identity(self, sec_filing_text):
        key = FilingKey("aapl", "10-k", "2024-11-01")
        chunks = WindowChunker().chunk(sec_filing_text, detect_sections(sec_filing_text), key)
        assert chunks
        assert {(c.metadata.ticker, c.metadata.form, c.metadata.filed) for c in chunks} == {
            ("AAPL", "10-K", "2024-11-01"),
        }

    def test_generation_order(self, sec_filing_text):
        sections = detect_sections(sec_filing_text)
        chunks = WindowChunker().chunk(sec_filing_text, sections)
        starts = [c.metadata.char_start for c in chunks]
        assert starts == sorted(starts)

        names = [s.name for s in sections]
        order = [names.index(c.metadata.section) for c in chunks]
        assert order == sorted(order)

    def test_deterministic(self, sec_filing_text):
        sections = detect_sections(sec_filing_text)
        assert chunk_sections(sec_filing_text, sections) == chunk_sections(sec_filing_text, sections)

    def test_no_sections_no_chunks(self):
        assert WindowChunker().chunk("some text", []) == []

    @pytest.mark.parametrize("size, overlap", [(200, 200), (100, 300), (1000, -1)])
    def test_invalid_window(self, size, overlap):
        with pytest.raises(ValidationError):
            WindowChunker(chunk_size=size, overlap=overlap)

    def test_zero_overlap(self):
        text = "c" * 2500
        chunks = WindowChunker(chunk_size=1000, overlap=0).chunk_section(text, _section(text))
        assert [c.metadata.char_start for c in chunks] == [0, 1000, 2000]


class TestChunkSchema:
    def test_to_dict_uses_snake_case_offsets(self):
        chunk = Chunk(
            text="Demand may decline.",
            metadata=ChunkMetadata(ticker="AAPL", form="10-K", filed="2024-11-01",
                                   section="Item 1A: Risk Factors", char_start=10, char_end=29),
        )
        assert chunk.to_dict() == {
            "text": "Demand may decline.",
            "metadata": {
                "ticker": "AAPL",
                "form": "10-K",
                "filed": "2024-11-01",
                "section": "Item 1A: Risk Factors",
                "char_start": 10,
                "char_end": 29,
            },
        }

    def test_from_dict_accepts_camel_case_offsets(self):
        meta = ChunkMetadata.from_dict({"section": "Item 7", "charStart": 5, "charEnd": 9})
        assert (meta.char_start, meta.char_end) == (5, 9)

    def test_from_dict_missing_metadata(self):
        chunk = Chunk.from_dict({"text": "hello"})
        assert chunk.metadata == ChunkMetadata()


class TestSectionMatches:
    @pytest.mark.parametrize("section, flt, expected", [
        ("Item 1A: Risk Factors", None, True),
        ("Item 1A: Risk Factors", "", True),
        ("Item 1A: Risk Factors", "risk", True),
        ("Item 1A: Risk Factors", "RISK FACTORS", True),
        ("Item 7: Management's Discussion", "risk", False),
        ("", "risk", False),
    ])
    def test_case_insensitive_substring(self, section, flt, expected):
        assert section_matches(section, flt) is expected
