"""Per-filing exclusive locks for read-modify-write cycles."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from filing_rag.storage.paths import FilingKey


@dataclass
class _Entry:
    lock: threading.RLock = field(default_factory=threading.RLock)
    users: int = 0


_registry_guard = threading.Lock()
# Only keys with a current holder or waiter have an entry
_locks: dict[FilingKey, _Entry] = {}


@contextmanager
def filing_lock(key: FilingKey) -> Iterator[None]:
    """Hold the exclusive lock for ``key`` for the duration of the block.

    Keys are normalized, so differently-cased spellings of the same filing
    share one lock. The lock is re-entrant within a thread. The entry is
    dropped once its last holder or waiter leaves.
    """
    with _registry_guard:
        entry = _locks.get(key)
        if entry is None:
            entry = _locks[key] = _Entry()
        entry.users += 1

    try:
        with entry.lock:
            yield
    finally:
        with _registry_guard:
            entry.users -= 1
            if entry.users == 0:
                del _locks[key]
