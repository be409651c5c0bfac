"""Lambda handler for reading a filing's stored sections (GET)."""

from __future__ import annotations

import logging
import os
from typing import Any

from filing_rag.config import load_settings
from filing_rag.handlers import query_params, respond
from filing_rag.pipeline.artifacts import load_sections
from filing_rag.pipeline.requests import SectionRequest, parse_request
from filing_rag.storage.paths import FilingStorage

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

_storage: FilingStorage | None = None


def _get_storage() -> FilingStorage:
    global _storage
    if _storage is None:
        _storage = FilingStorage(load_settings().storage.data_root)
    return _storage


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Return ``sections.json`` content for ``?ticker=&form=&filed=``."""

    def action() -> dict[str, Any]:
        request = parse_request(SectionRequest, query_params(event))
        key = request.key()
        summaries = load_sections(_get_storage(), key)
        return {
            "ticker": key.ticker,
            "form": key.form,
            "filed": key.filed,
            "sections": [s.to_dict() for s in summaries],
        }

    return respond(action)
