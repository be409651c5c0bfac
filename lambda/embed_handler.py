"""Lambda handler for resumable embedding — triggered by API Gateway (POST).

Each invocation embeds at most ``maxChunks`` chunks. Clients poll with
``resume=true`` until the response reports ``embedded == 0``. Fields the
request omits take their values from the ``embed_job`` settings.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from filing_rag.config import EmbedJobSettings, load_settings
from filing_rag.embeddings.factory import provider_from_settings
from filing_rag.handlers import request_body, respond
from filing_rag.pipeline.embedding_job import EmbeddingJob
from filing_rag.pipeline.requests import EmbedRequest, parse_request
from filing_rag.storage.paths import FilingStorage

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

# Initialize outside handler for Lambda warm-start reuse
_job: EmbeddingJob | None = None
_job_settings: EmbedJobSettings = EmbedJobSettings()


def _get_job() -> EmbeddingJob:
    global _job, _job_settings
    if _job is not None:
        return _job

    settings = load_settings()
    emb = provider_from_settings(settings.embedding)
    _job_settings = settings.embed_job
    _job = EmbeddingJob(
        embedding_provider=emb,
        storage=FilingStorage(settings.storage.data_root),
    )
    return _job


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle ``{ticker, form, filed, batch?, section?, maxChunks?, resume?}``."""

    def action() -> dict[str, Any]:
        request = parse_request(EmbedRequest, request_body(event))
        job = _get_job()
        result = job.embed_batch(request.key(), request.options(_job_settings))
        return result.to_dict()

    return respond(action)
