"""Helpers shared by the request handlers in ``lambda/``.

Handlers stay thin: pull the request out of the event, run one stage, and
turn the result or error into an API Gateway style response.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from filing_rag.errors import FilingRAGError, ValidationError

logger = logging.getLogger(__name__)

_HEADERS = {"Content-Type": "application/json"}


def json_response(status_code: int, payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(_HEADERS),
        "body": json.dumps(payload),
    }


def error_response(exc: FilingRAGError) -> dict[str, Any]:
    return json_response(exc.status_code, {"error": exc.message})


def request_body(event: dict[str, Any]) -> dict[str, Any]:
    """Extract the JSON body of a POST event.

    Raises:
        ValidationError: The body is not a JSON object.
    """
    body = event.get("body")
    if body is None or body == "":
        return {}
    if isinstance(body, dict):
        return body
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ValidationError("Request body is not valid JSON") from exc
    if not isinstance(parsed, dict):
        raise ValidationError("Request body must be a JSON object")
    return parsed


def query_params(event: dict[str, Any]) -> dict[str, Any]:
    """Query string parameters of a GET event."""
    return dict(event.get("queryStringParameters") or {})


def respond(action: Callable[[], dict[str, Any]]) -> dict[str, Any]:
    """Run ``action`` and map its outcome to a response.

    Pipeline errors keep their status code; anything else is a 500.
    """
    try:
        return json_response(200, action())
    except FilingRAGError as exc:
        logger.warning("Request failed (%d): %s", exc.status_code, exc.message)
        return error_response(exc)
    except Exception as exc:
        logger.exception("Unhandled error while serving request")
        return json_response(500, {"error": str(exc) or "Unknown error"})
