"""Resumable embedding job — chunks.jsonl → embeddings.json.

Each call embeds a bounded slice of the not-yet-embedded chunks and
appends the records to the filing's store. Callers embed a whole filing
by repeating the call with ``resume=True`` until nothing is left.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from filing_rag.chunking.schemas import Chunk, section_matches
from filing_rag.embeddings.base import EmbeddingProvider, embed_texts_checked
from filing_rag.errors import StorageError
from filing_rag.pipeline.artifacts import load_chunks
from filing_rag.pipeline.schemas import NOTHING_TO_EMBED, EmbedOptions, EmbedResult
from filing_rag.storage.paths import FilingKey, FilingStorage
from filing_rag.store.embedding_store import EmbeddingStore
from filing_rag.store.schemas import EmbeddingRecord

logger = logging.getLogger(__name__)


class EmbeddingJob:
    """Embed a filing's chunks incrementally, one bounded call at a time."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        storage: FilingStorage,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.embedding_provider = embedding_provider
        self.storage = storage
        self._sleep = sleep

    def embed_batch(self, key: FilingKey, options: EmbedOptions | None = None) -> EmbedResult:
        """Load the filing's chunks and embed the next slice.

        Raises:
            NotFoundError: ``chunks.jsonl`` is missing.
        """
        chunks = load_chunks(self.storage, key)
        return self.embed_chunks(key, chunks, options)

    def embed_chunks(
        self,
        key: FilingKey,
        chunks: list[Chunk],
        options: EmbedOptions | None = None,
    ) -> EmbedResult:
        """Embed the next slice of ``chunks`` into the filing's store.

        The store lock is held for the whole call, so the resume offset and
        the writes that follow see a consistent store. Each sub-batch is
        persisted before the next one starts; a failure keeps every
        sub-batch already written and loses only the failing one.

        Args:
            key: Filing whose store is appended to.
            chunks: The filing's full chunk list in generation order.
            options: Section scope, resume flag, and call size.

        Returns:
            An ``EmbedResult``; ``embedded == 0`` with a message when the
            scope is already fully embedded.

        Raises:
            UpstreamError: The embedding function failed or returned
                malformed vectors.
            StorageError: The stored records in scope no longer match the
                chunk list (chunks.jsonl was regenerated).
        """
        opts = options or EmbedOptions()
        candidates = [c for c in chunks if section_matches(c.metadata.section, opts.section)]

        store = EmbeddingStore(self.storage, key)
        with store.lock():
            store.load()
            start = store.count(opts.section) if opts.resume else 0

            if start >= len(candidates):
                logger.info(
                    "%s: nothing to embed (section=%r, done=%d, candidates=%d)",
                    key, opts.section, start, len(candidates),
                )
                return EmbedResult(
                    embedded=0,
                    total=store.count(),
                    start=start,
                    candidates=len(candidates),
                    message=NOTHING_TO_EMBED,
                )

            if start:
                self._check_resume_anchor(store, candidates, start, opts.section)

            work = candidates[start : min(start + opts.max_chunks, len(candidates))]
            embedded = 0
            total = store.count()

            for i in range(0, len(work), opts.batch_size):
                if i:
                    self._sleep(opts.pause_seconds)

                part = work[i : i + opts.batch_size]
                vectors = embed_texts_checked(
                    self.embedding_provider,
                    [c.text for c in part],
                    store.dimension,
                )
                total = store.add([
                    EmbeddingRecord.from_chunk(chunk, vec)
                    for chunk, vec in zip(part, vectors, strict=True)
                ])
                embedded += len(part)

        logger.info(
            "%s: embedded %d chunks from offset %d (store total: %d, candidates: %d)",
            key, embedded, start, total, len(candidates),
        )
        return EmbedResult(embedded=embedded, total=total, start=start, candidates=len(candidates))

    def embed_all(self, key: FilingKey, options: EmbedOptions | None = None) -> list[EmbedResult]:
        """Repeat resumable calls until the scope is fully embedded.

        Returns:
            One result per call; the last one is always the no-op result.
        """
        opts = options or EmbedOptions()
        if not opts.resume:
            opts = EmbedOptions(
                section=opts.section,
                resume=True,
                max_chunks=opts.max_chunks,
                batch_size=opts.batch_size,
                pause_seconds=opts.pause_seconds,
            )

        chunks = load_chunks(self.storage, key)
        results: list[EmbedResult] = []
        while True:
            result = self.embed_chunks(key, chunks, opts)
            results.append(result)
            if result.done:
                return results

    @staticmethod
    def _check_resume_anchor(
        store: EmbeddingStore,
        candidates: list[Chunk],
        start: int,
        section: str | None,
    ) -> None:
        """Require the last stored record in scope to match ``candidates[start - 1]``.

        A mismatch means chunks.jsonl was regenerated after embedding began;
        appending would mix two chunkings in one store.
        """
        in_scope = [r for r in store.records() if section_matches(r.metadata.section, section)]
        if in_scope[start - 1].text != candidates[start - 1].text:
            raise StorageError(
                f"{store.path.name} is stale for {store.key}: stored record {start - 1} "
                "no longer matches chunks.jsonl; clear the store and re-embed"
            )
