"""Lambda handler for sectioning a filing — triggered by API Gateway (POST).

Thin wrapper around SectioningPipeline. All business logic lives in src/filing_rag/.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from filing_rag.chunking.window_chunker import WindowChunker
from filing_rag.config import load_settings
from filing_rag.handlers import request_body, respond
from filing_rag.pipeline.requests import SectionRequest, parse_request
from filing_rag.pipeline.sectioning import SectioningPipeline
from filing_rag.storage.paths import FilingStorage

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

# Initialize outside handler for Lambda warm-start reuse
_pipeline: SectioningPipeline | None = None


def _get_pipeline() -> SectioningPipeline:
    global _pipeline
    if _pipeline is not None:
        return _pipeline

    settings = load_settings()
    chunker = WindowChunker(
        chunk_size=settings.chunking.chunk_size,
        overlap=settings.chunking.overlap,
        min_chars=settings.chunking.min_chars,
    )
    _pipeline = SectioningPipeline(
        storage=FilingStorage(settings.storage.data_root),
        chunker=chunker,
    )
    return _pipeline


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle ``{ticker, form, filed}`` — detect sections and write chunks."""

    def action() -> dict[str, Any]:
        request = parse_request(SectionRequest, request_body(event))
        return _get_pipeline().run(request.key()).to_dict()

    return respond(action)
