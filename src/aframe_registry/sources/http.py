"""HTTP access shared by the metadata fetchers."""

import json

import httpx

from aframe_registry.errors import FetchError


async def get(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """GET ``url`` and return the response, raising FetchError on failure.

    Transport errors (including timeouts) and non-2xx statuses are
    normalized to FetchError so callers handle a single failure type.
    """
    try:
        response = await client.get(url, params=params, headers=headers)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(url, f"HTTP {e.response.status_code}") from e
    except httpx.TimeoutException as e:
        raise FetchError(url, "request timed out") from e
    except httpx.RequestError as e:
        raise FetchError(url, f"request error: {e}") from e
    return response


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> dict:
    """GET ``url`` and decode a JSON object body."""
    response = await get(client, url, params=params, headers=headers)
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FetchError(url, f"invalid JSON body: {e}") from e
    if not isinstance(data, dict):
        raise FetchError(url, "expected a JSON object")
    return data
