"""Lambda handler for similarity queries — triggered by API Gateway (POST).

Thin wrapper around Retriever. All business logic lives in src/filing_rag/.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from filing_rag.config import RetrievalSettings, load_settings
from filing_rag.embeddings.factory import provider_from_settings
from filing_rag.handlers import request_body, respond
from filing_rag.pipeline.requests import QueryRequest, parse_request
from filing_rag.retrieval.retriever import Retriever
from filing_rag.storage.paths import FilingStorage

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

# Initialize outside handler for Lambda warm-start reuse
_retriever: Retriever | None = None
_retrieval_settings: RetrievalSettings = RetrievalSettings()


def _get_retriever() -> Retriever:
    global _retriever, _retrieval_settings
    if _retriever is not None:
        return _retriever

    settings = load_settings()
    emb = provider_from_settings(settings.embedding)
    _retrieval_settings = settings.retrieval
    _retriever = Retriever(
        embedding_provider=emb,
        storage=FilingStorage(settings.storage.data_root),
    )
    return _retriever


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle ``{ticker, form, filed, query, topK?}`` — return ranked chunks."""

    def action() -> dict[str, Any]:
        request = parse_request(QueryRequest, request_body(event))
        retriever = _get_retriever()
        top_k = request.resolved_top_k(_retrieval_settings)
        results = retriever.search(request.key(), request.query, top_k=top_k)
        return {"results": [r.to_dict() for r in results]}

    return respond(action)
