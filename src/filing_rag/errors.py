"""Error taxonomy shared by every pipeline stage.

Each error carries an HTTP-style ``status_code`` so request handlers can
map it to a response without knowing which stage raised it.
"""

from __future__ import annotations


class FilingRAGError(Exception):
    """Base class for pipeline errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(FilingRAGError):
    """Missing or malformed request fields. Never retried automatically."""

    status_code = 400


class NotFoundError(FilingRAGError):
    """A required upstream artifact (text, chunks, embeddings) is missing."""

    status_code = 404


class UpstreamError(FilingRAGError):
    """The embedding function failed or returned malformed output."""

    status_code = 502


class StorageError(FilingRAGError):
    """Filesystem read/write failure."""

    status_code = 500
