# src/todo_manager/backend/transport.py

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from .errors import BackendError

logger = logging.getLogger(__name__)


async def send(
        http: httpx.AsyncClient,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        json: Any = None,
) -> httpx.Response:
    """
    Issue one request and turn every failure into BackendError.

    - transport problems (DNS, timeouts, resets) -> BackendError chained to the httpx error
    - HTTP status >= 400 -> BackendError parsed from the response body
    No retries: the caller decides what a failure means.
    """
    try:
        response = await http.request(
            method,
            url,
            headers=dict(headers) if headers else None,
            params=dict(params) if params else None,
            json=json,
        )
    except httpx.TimeoutException as e:
        raise BackendError(f"Request timed out: {method} {url}") from e
    except httpx.HTTPError as e:
        raise BackendError(f"Network error: {e.__class__.__name__}: {e}") from e

    if response.status_code >= 400:
        err = BackendError.from_response(response)
        logger.debug("%s %s -> %s %r", method, url, response.status_code, err)
        raise err
    return response


def json_body(response: httpx.Response) -> Any:
    """Decoded JSON payload, or None for empty bodies (204, return=minimal)."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        raise BackendError(
            "Malformed JSON in backend response",
            status=response.status_code,
            details=response.text[:200],
        ) from e
