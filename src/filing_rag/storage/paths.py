"""Filing identity and on-disk layout.

Layout under the data root::

    {TICKER}/{FORM}_{filed}/text.txt
                           /sections.json
                           /chunks.jsonl
                           /embeddings.json
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from filing_rag.errors import ValidationError

logger = logging.getLogger(__name__)

TEXT_FILE = "text.txt"
SECTIONS_FILE = "sections.json"
CHUNKS_FILE = "chunks.jsonl"
EMBEDDINGS_FILE = "embeddings.json"

_FORBIDDEN_CHARS = ("/", "\\", "\x00")


def is_safe_component(value: str) -> bool:
    """True when ``value`` can name a directory without leaving its parent."""
    return bool(value) and ".." not in value and not any(c in value for c in _FORBIDDEN_CHARS)


def normalize_ticker(ticker: str) -> str:
    """Uppercase with no surrounding whitespace."""
    return str(ticker or "").strip().upper()


def normalize_form(form: str) -> str:
    return str(form or "").strip().upper()


@dataclass(frozen=True)
class FilingKey:
    """Identity of one filing: ticker + form type + filed date.

    Values are normalized on construction, so two keys built from
    ``("aapl ", "10-k", "2024-11-01")`` and ``("AAPL", "10-K", "2024-11-01")``
    compare (and hash) equal and share a storage directory.

    Raises:
        ValidationError: A field is empty or contains a path separator,
            NUL, or ``..``.
    """

    ticker: str
    form: str
    filed: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "ticker", normalize_ticker(self.ticker))
        object.__setattr__(self, "form", normalize_form(self.form))
        object.__setattr__(self, "filed", str(self.filed or "").strip())

        bad = [name for name in ("ticker", "form", "filed") if not is_safe_component(getattr(self, name))]
        if bad:
            raise ValidationError(
                f"Invalid filing identity ({', '.join(bad)}): "
                "values must be non-empty without '/', '\\', '..' or NUL"
            )

    @property
    def folder_name(self) -> str:
        return f"{self.form}_{self.filed}"

    def __str__(self) -> str:
        return f"{self.ticker} {self.form} {self.filed}"


class FilingStorage:
    """Resolve per-filing paths under a data root."""

    def __init__(self, data_root: str | Path = "data"):
        self.data_root = Path(data_root)

    def filing_dir(self, key: FilingKey) -> Path:
        return self.data_root / key.ticker / key.folder_name

    def filing_path(self, key: FilingKey, file_name: str) -> Path:
        return self.filing_dir(key) / file_name

    def exists(self, key: FilingKey, file_name: str) -> bool:
        return self.filing_path(key, file_name).is_file()

    def text_path(self, key: FilingKey) -> Path:
        return self.filing_path(key, TEXT_FILE)

    def sections_path(self, key: FilingKey) -> Path:
        return self.filing_path(key, SECTIONS_FILE)

    def chunks_path(self, key: FilingKey) -> Path:
        return self.filing_path(key, CHUNKS_FILE)

    def embeddings_path(self, key: FilingKey) -> Path:
        return self.filing_path(key, EMBEDDINGS_FILE)

    def list_filings(self) -> list[FilingKey]:
        """Enumerate filings that have a directory under the data root."""
        keys: list[FilingKey] = []
        if not self.data_root.is_dir():
            return keys

        for ticker_dir in sorted(p for p in self.data_root.iterdir() if p.is_dir()):
            for filing_dir in sorted(p for p in ticker_dir.iterdir() if p.is_dir()):
                form, sep, filed = filing_dir.name.partition("_")
                if not sep:
                    continue
                try:
                    keys.append(FilingKey(ticker_dir.name, form, filed))
                except ValidationError:
                    logger.debug("Skipping %s: not a filing directory", filing_dir)
        return keys
