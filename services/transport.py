"""Shared request and decoding helpers for the provider clients."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from app.errors import DataFormatError, TransientError, body_excerpt


async def get(
    client: httpx.AsyncClient,
    url: str,
    operation: str,
    params: Optional[Dict[str, str]] = None,
) -> httpx.Response:
    """Issue one GET, turning transport failures into :class:`TransientError`."""
    host = httpx.URL(url).host
    try:
        return await client.get(url, params=params)
    except httpx.TimeoutException as exc:
        raise TransientError(f"request to {host} timed out", operation) from exc
    except httpx.TransportError as exc:
        raise TransientError(
            f"could not reach {host} ({exc.__class__.__name__})", operation
        ) from exc


def decode_json(response: httpx.Response, operation: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise DataFormatError(
            "response body is not valid JSON",
            operation,
            excerpt=body_excerpt(response.text),
        ) from exc
