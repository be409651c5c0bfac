"""Filing identity, on-disk layout, and file I/O."""

from filing_rag.storage.locks import filing_lock
from filing_rag.storage.paths import FilingKey, FilingStorage

__all__ = ["FilingKey", "FilingStorage", "filing_lock"]
