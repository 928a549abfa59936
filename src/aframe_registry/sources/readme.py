"""README lookup with conventional filename fallback."""

import httpx
from loguru import logger

from aframe_registry.cache import RequestCache
from aframe_registry.errors import FetchError, ReadmeNotFoundError
from aframe_registry.sources.http import get
from aframe_registry.urls import url_join

README_FILENAMES = (
    "README.md",
    "readme.md",
    "Readme.md",
    "README.markdown",
    "readme.markdown",
    "README.mkd",
    "readme.mkd",
)


async def fetch_readme(
    client: httpx.AsyncClient, cache: RequestCache, package_root: str
) -> dict:
    """Fetch the README under ``package_root`` as ``{"text", "url"}``.

    Any cached filename variant wins first. Otherwise each filename is
    tried in order and the first successful response is cached and returned.

    Raises:
        ReadmeNotFoundError: Every filename variant failed.
    """
    for filename in README_FILENAMES:
        cached_url = url_join(package_root, filename)
        if cached_url in cache:
            return cache.get(cached_url)

    for filename in README_FILENAMES:
        readme_url = url_join(package_root, filename)

        async def _fetch(url: str = readme_url) -> dict:
            response = await get(client, url)
            return {"text": response.text, "url": url}

        try:
            return await cache.get_or_fetch(readme_url, _fetch)
        except FetchError as e:
            logger.warning(f"README miss: {e}")

    logger.error(f"Error fetching README {package_root}")
    raise ReadmeNotFoundError(package_root, list(README_FILENAMES))
