"""OpenAI embedding provider — text-embedding-3-small/large.

Requires ``openai`` extra and an API key via ``OPENAI_API_KEY`` env var.
The v3 models can shorten their output; when ``dimensions`` is given it is
sent with every request so stored and query vectors agree.
"""

from __future__ import annotations

import logging
from typing import Any

from filing_rag.embeddings.base import EmbeddingProvider, validate_embeddings
from filing_rag.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "text-embedding-3-small"

_NATIVE_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}

# Inputs accepted by a single embeddings request
MAX_INPUTS = 2048


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embed text via the OpenAI Embeddings API."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        dimensions: int | None = None,
    ):
        try:
            import openai
        except ImportError as exc:
            raise ImportError(
                "openai package required: pip install sec-filing-rag[openai]"
            ) from exc

        self.model = model
        self._shortened = dimensions is not None and model.startswith("text-embedding-3")
        self._dim = dimensions if self._shortened else _NATIVE_DIMENSIONS.get(model, 1536)
        self._api_error: type[Exception] = openai.OpenAIError
        self._client: Any = openai.OpenAI(api_key=api_key)

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        vectors: list[list[float]] = []
        for start in range(0, len(texts), MAX_INPUTS):
            vectors.extend(self._request(texts[start : start + MAX_INPUTS]))
        return validate_embeddings(vectors, len(texts), self._dim)

    def embed_query(self, query: str) -> list[float]:
        return self.embed_texts([query])[0]

    @property
    def dimension(self) -> int:
        return self._dim

    def close(self) -> None:
        self._client.close()

    def _request(self, inputs: list[str]) -> list[list[float]]:
        params: dict[str, Any] = {"model": self.model, "input": inputs}
        if self._shortened:
            params["dimensions"] = self._dim
        try:
            resp = self._client.embeddings.create(**params)
        except self._api_error as exc:
            raise UpstreamError(f"OpenAI embeddings request failed: {exc}") from exc
        logger.debug("OpenAI embedded %d inputs with %s", len(inputs), self.model)
        return [item.embedding for item in sorted(resp.data, key=lambda item: item.index)]
