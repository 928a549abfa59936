"""Metadata fetchers bundled for injection into the resolver."""

from typing import Protocol

import httpx

from aframe_registry.cache import RequestCache
from aframe_registry.sources.github import fetch_github
from aframe_registry.sources.npm import fetch_npm
from aframe_registry.sources.readme import fetch_readme


class MetadataFetchers(Protocol):
    """The three lookups the metadata resolver depends on."""

    async def fetch_npm(self, package_root: str) -> dict: ...

    async def fetch_github(self, repo: str | None) -> dict: ...

    async def fetch_readme(self, package_root: str) -> dict: ...


class HttpFetchers:
    """Fetchers backed by a shared httpx client and request cache."""

    def __init__(
        self, client: httpx.AsyncClient, cache: RequestCache, github_access_token: str
    ):
        self.client = client
        self.cache = cache
        self._github_access_token = github_access_token

    async def fetch_npm(self, package_root: str) -> dict:
        return await fetch_npm(self.client, self.cache, package_root)

    async def fetch_github(self, repo: str | None) -> dict:
        return await fetch_github(self.client, repo, self._github_access_token)

    async def fetch_readme(self, package_root: str) -> dict:
        return await fetch_readme(self.client, self.cache, package_root)
