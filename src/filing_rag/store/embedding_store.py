"""Per-filing embedding store backed by ``embeddings.json``.

The file is a single JSON array of records. Appending rewrites the whole
merged array through an atomic replace; a filing's chunk set is small
enough for that to be cheap. Callers that read-modify-write must hold
``filing_lock(key)`` across the cycle (see ``EmbeddingStore.lock``).
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager

from filing_rag.chunking.schemas import section_matches
from filing_rag.errors import StorageError
from filing_rag.storage.files import read_json, write_json
from filing_rag.storage.locks import filing_lock
from filing_rag.storage.paths import FilingKey, FilingStorage
from filing_rag.store.schemas import EmbeddingRecord

logger = logging.getLogger(__name__)


class EmbeddingStore:
    """Append-only list of ``EmbeddingRecord`` for one filing."""

    def __init__(self, storage: FilingStorage, key: FilingKey):
        self.storage = storage
        self.key = key
        self.path = storage.embeddings_path(key)
        self._records: list[EmbeddingRecord] | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        return self.path.is_file()

    def lock(self) -> AbstractContextManager[None]:
        """Exclusive lock for this filing's read-modify-write cycle."""
        return filing_lock(self.key)

    def load(self) -> list[EmbeddingRecord]:
        """Read records from disk, replacing anything held in memory."""
        data = read_json(self.path)
        if data is None:
            self._records = []
        elif not isinstance(data, list):
            raise StorageError(f"{self.path} must contain a JSON array")
        else:
            self._records = [EmbeddingRecord.from_dict(item) for item in data]
        return list(self._records)

    def records(self) -> list[EmbeddingRecord]:
        if self._records is None:
            self.load()
        return list(self._records or [])

    def count(self, section_filter: str | None = None) -> int:
        """Number of stored records, optionally scoped to a section filter."""
        return sum(
            1 for r in self.records() if section_matches(r.metadata.section, section_filter)
        )

    @property
    def dimension(self) -> int | None:
        """Vector length shared by every stored record, or None when empty."""
        records = self.records()
        return len(records[0].embedding) if records else None

    def add(self, new_records: list[EmbeddingRecord]) -> int:
        """Append records and persist the merged list.

        Returns:
            Total number of records in the store after the write.
        """
        merged = self.records() + list(new_records)
        if new_records:
            write_json(self.path, [r.to_dict() for r in merged])
            self._records = merged
            logger.info(
                "EmbeddingStore %s: appended %d records (total: %d)",
                self.key, len(new_records), len(merged),
            )
        return len(merged)

    def clear(self) -> None:
        """Delete the store file."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to delete {self.path}: {exc}") from exc
        self._records = []
