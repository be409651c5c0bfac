"""SEC filing section detection for 10-K and 10-Q documents.

Scans the plain text line by line and opens a new section whenever a
trimmed line starts with a known ITEM heading. Text before the first
heading (cover page, table of contents preamble) is never emitted.

A table of contents that lists the items on their own lines produces
sections with the same names as the real ones further down. No attempt
is made to tell them apart; section names are not unique.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from filing_rag.documents.schemas import PREVIEW_CHARS, Section

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Heading patterns
# ---------------------------------------------------------------------------

# Optional punctuation between the item number and the topic words:
# "Item 1A. Risk Factors", "ITEM 1A: RISK FACTORS", "Item 1A - Risk Factors"
_SEP = r"\.?\s*[:\-–—]?\s*"

# Used to build "Item 1A: Risk Factors" from the matched line
_ITEM_NAME_RE = re.compile(r"^Item\s+(\d+[A-Z]?)[\.:]?\s*(.*)$", re.IGNORECASE)

_TOPIC_LEAD = " .:-–—"

# (item number, topic regex). Order is match priority.
_ITEM_HEADINGS: list[tuple[str, str]] = [
    # 10-K
    ("1", r"(?:Business|Description\s+of\s+Business)"),
    ("1A", r"Risk\s+Factors"),
    ("1B", r"Unresolved\s+Staff\s+Comments"),
    ("1C", r"Cybersecurity"),
    ("2", r"Properties"),
    ("3", r"Legal\s+Proceedings"),
    ("4", r"Mine\s+Safety"),
    ("5", r"Market"),
    ("6", r"[\[\(]?(?:Selected\s+Financial\s+Data|Reserved)"),
    ("7", r"Management['’]?s?\s+Discussion"),
    ("7A", r"Quantitative"),
    ("8", r"Financial\s+Statements"),
    ("9", r"Changes\s+in\s+and\s+Disagreements"),
    ("9A", r"Controls"),
    ("9B", r"Other\s+Information"),
    ("9C", r"Disclosure\s+Regarding\s+Foreign\s+Jurisdictions"),
    ("10", r"Directors"),
    ("11", r"Executive"),
    ("12", r"Security"),
    ("13", r"Certain"),
    ("14", r"(?:Principal\s+)?Accountant"),
    ("15", r"Exhibits"),
    ("16", r"Form\s+10-K\s+Summary"),
    # 10-Q (Part I / Part II numbering)
    ("1", r"Financial\s+Statements"),
    ("1", r"Legal\s+Proceedings"),
    ("2", r"Management['’]?s?\s+Discussion"),
    ("2", r"Unregistered\s+Sales"),
    ("3", r"Quantitative"),
    ("3", r"Defaults"),
    ("4", r"Controls"),
    ("5", r"Other\s+Information"),
    ("6", r"Exhibits"),
]


def item_label(line: str) -> str:
    """Build a display name for an item heading line.

    ``"Item 1A. Risk Factors"`` becomes ``"Item 1A: Risk Factors"``. A line
    that does not look like an item heading is returned as-is.
    """
    m = _ITEM_NAME_RE.match(line)
    if not m:
        return line
    number = m.group(1).upper()
    topic = m.group(2).lstrip(_TOPIC_LEAD).strip()
    return f"Item {number}: {topic}" if topic else f"Item {number}"


@dataclass(frozen=True)
class HeadingPattern:
    """One section heading matcher and the label it produces."""

    pattern: re.Pattern[str]
    build_label: Callable[[str], str] = item_label

    def match(self, line: str) -> str | None:
        """Return the section name if ``line`` (already trimmed) matches."""
        if self.pattern.match(line):
            return self.build_label(line)
        return None


def _item_pattern(number: str, topic: str) -> HeadingPattern:
    return HeadingPattern(re.compile(rf"^Item\s+{number}{_SEP}{topic}", re.IGNORECASE))


HEADING_PATTERNS: list[HeadingPattern] = [
    _item_pattern(number, topic) for number, topic in _ITEM_HEADINGS
]


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def match_heading(line: str, patterns: list[HeadingPattern] | None = None) -> str | None:
    """Test ``line`` against the patterns in priority order; first match wins."""
    stripped = line.strip()
    if not stripped:
        return None
    for heading in patterns or HEADING_PATTERNS:
        name = heading.match(stripped)
        if name is not None:
            return name
    return None


def detect_sections(
    text: str,
    patterns: list[HeadingPattern] | None = None,
) -> list[Section]:
    """Split filing text into ordered, non-overlapping sections.

    A section runs from its heading line up to (not including) the newline
    before the next heading, or to the end of the document for the last one.

    Args:
        text: Full plain-text filing.
        patterns: Heading table to use instead of ``HEADING_PATTERNS``.

    Returns:
        Sections in text order. Empty when no heading is found.
    """
    if not text:
        return []

    lines = text.split("\n")
    sections: list[Section] = []

    # (name, start_line, char_start) of the currently open section
    current: tuple[str, int, int] | None = None
    offset = 0

    for i, line in enumerate(lines):
        line_start = offset
        offset += len(line) + 1  # +1 for the \n separator

        name = match_heading(line, patterns)
        if name is None:
            continue

        if current is not None:
            sections.append(_close(text, current, end_line=i - 1, char_end=line_start - 1))

        logger.debug("Heading at line %d: %s", i, name)
        current = (name, i, line_start)

    if current is not None:
        sections.append(_close(text, current, end_line=len(lines) - 1, char_end=len(text)))

    if sections:
        logger.info("Detected %d sections in filing (%d lines)", len(sections), len(lines))
    else:
        logger.warning("No section headings detected in filing (%d lines)", len(lines))

    return sections


def _close(text: str, current: tuple[str, int, int], end_line: int, char_end: int) -> Section:
    name, start_line, char_start = current
    return Section(
        name=name,
        start_line=start_line,
        end_line=end_line,
        char_start=char_start,
        char_end=char_end,
        preview=text[char_start:char_end][:PREVIEW_CHARS],
    )
