"""Filing text sectioning."""

from filing_rag.documents.schemas import Section, SectionSummary
from filing_rag.documents.sec_parser import HEADING_PATTERNS, HeadingPattern, detect_sections

__all__ = [
    "HEADING_PATTERNS",
    "HeadingPattern",
    "Section",
    "SectionSummary",
    "detect_sections",
]
