"""Ollama embedding provider — local server, no API key.

Talks to the Ollama REST API (default ``http://localhost:11434``). Filing
chunks go through the batch ``/api/embed`` endpoint; servers that predate it
answer 404 and are served one prompt at a time via ``/api/embeddings``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from filing_rag.embeddings.base import EmbeddingProvider, validate_embeddings
from filing_rag.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "nomic-embed-text"
DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_DIM = 768

BATCH_PATH = "/api/embed"
LEGACY_PATH = "/api/embeddings"


class OllamaEmbeddingProvider(EmbeddingProvider):
    """Embed filing text via a running Ollama server."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        dimension: int = DEFAULT_DIM,
        timeout: float = 60.0,
        client: httpx.Client | None = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._dim = dimension
        self._http = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        payload = self._post(BATCH_PATH, {"model": self.model, "input": texts}, allow_missing=True)
        if payload is None:
            logger.info("%s not served, embedding %d texts via %s", BATCH_PATH, len(texts), LEGACY_PATH)
            vectors = [self._legacy_embed(text) for text in texts]
        else:
            vectors = payload.get("embeddings")
        return validate_embeddings(vectors, len(texts), self._dim)

    def embed_query(self, query: str) -> list[float]:
        return self.embed_texts([query])[0]

    @property
    def dimension(self) -> int:
        return self._dim

    def close(self) -> None:
        self._http.close()

    def _legacy_embed(self, text: str) -> Any:
        payload = self._post(LEGACY_PATH, {"model": self.model, "prompt": text})
        return payload.get("embedding")

    def _post(self, path: str, body: dict, allow_missing: bool = False) -> dict | None:
        """POST *body* and return the decoded JSON object.

        Returns ``None`` for a 404 when *allow_missing* is set. Transport
        failures, error statuses and non-object payloads raise ``UpstreamError``.
        """
        try:
            resp = self._http.post(path, json=body)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Ollama request failed: {exc}") from exc

        if allow_missing and resp.status_code == 404:
            return None
        if resp.is_error:
            raise UpstreamError(f"Ollama returned {resp.status_code} for model {self.model}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamError("Ollama returned a non-JSON response") from exc
        if not isinstance(data, dict):
            raise UpstreamError("Ollama returned an unexpected payload")
        return data
