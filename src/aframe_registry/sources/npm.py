"""Package manifest (package.json) lookup through the package CDN."""

import httpx
from loguru import logger

from aframe_registry.cache import RequestCache
from aframe_registry.sources.http import get_json
from aframe_registry.urls import url_join


def package_json_url(package_root: str) -> str:
    return url_join(package_root, "package.json")


async def fetch_npm(
    client: httpx.AsyncClient, cache: RequestCache, package_root: str
) -> dict:
    """Fetch the package.json served under ``package_root``.

    Args:
        client: HTTP client used for the request
        cache: Shared request cache, keyed by the package.json URL
        package_root: CDN root for one package version,
            e.g. ``https://unpkg.com/aframe-foo@1.2.3``

    Returns:
        The raw manifest (author, description, license, repository, ...)

    Raises:
        FetchError: The manifest could not be fetched or decoded.
    """
    url = package_json_url(package_root)

    async def _fetch() -> dict:
        logger.info(f"Fetching from npm {url} ...")
        return await get_json(client, url)

    return await cache.get_or_fetch(url, _fetch)
