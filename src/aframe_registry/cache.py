"""Persistent request cache for registry fetches.

Maps a fully-qualified resource URL (package.json or README URL) to the
response body it produced. The cache is loaded from a JSON file at start,
shared by every fetcher during a build, and written back at the end.
Entries never expire: once a URL is cached it is never fetched again.

Concurrent lookups of the same URL share one in-flight request.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from loguru import logger


class RequestCache:
    """URL-keyed cache of response bodies, persisted as a JSON file."""

    def __init__(self, path: Path | None = None, entries: dict[str, Any] | None = None):
        self._path = path
        self._entries: dict[str, Any] = dict(entries or {})
        self._pending: dict[str, asyncio.Future] = {}
        self._hits = 0
        self._misses = 0

    @classmethod
    def load(cls, path: Path) -> "RequestCache":
        """Load the cache from ``path``, or start empty if it is missing or corrupt."""
        entries: dict[str, Any] = {}
        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                if isinstance(data, dict):
                    entries = data
                else:
                    logger.warning(f"Ignoring request cache {path}: not a JSON object")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Ignoring unreadable request cache {path}: {e}")
        logger.debug(f"RequestCache loaded {len(entries)} entries from {path}")
        return cls(path, entries)

    def __contains__(self, url: str) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, url: str) -> Any | None:
        """Get the cached body for ``url``, or None."""
        if url in self._entries:
            self._hits += 1
            logger.debug(f"Cache HIT: {url}")
            return self._entries[url]
        self._misses += 1
        logger.debug(f"Cache MISS: {url}")
        return None

    def set(self, url: str, body: Any) -> None:
        self._entries[url] = body
        logger.debug(f"Cache SET: {url}")

    async def get_or_fetch(self, url: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached body for ``url``, fetching it once if needed.

        Callers racing on the same uncached URL await a single request.
        Only successful results are stored; a failure propagates to every
        waiter and leaves the URL uncached.
        """
        cached = self.get(url)
        if cached is not None:
            return cached

        pending = self._pending.get(url)
        if pending is None:
            pending = asyncio.ensure_future(fetch())
            self._pending[url] = pending
            pending.add_done_callback(lambda fut: self._settle(url, fut))
        else:
            logger.debug(f"Joining in-flight request: {url}")
        return await asyncio.shield(pending)

    def _settle(self, url: str, fut: asyncio.Future) -> None:
        self._pending.pop(url, None)
        if not fut.cancelled() and fut.exception() is None:
            self.set(url, fut.result())

    def stats(self) -> dict:
        """Get cache statistics for the current run."""
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "in_flight": len(self._pending),
        }

    def persist(self, path: Path | None = None) -> Path:
        """Write every entry, including ones added this run, to disk."""
        target = path or self._path
        if target is None:
            raise ValueError("RequestCache has no path to persist to")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(self._entries), encoding="utf-8")
        logger.info(f"Request cache written to {target} ({len(self._entries)} entries)")
        return target

    def clear(self) -> int:
        """Drop all entries and remove the persisted file. Returns entries removed."""
        count = len(self._entries)
        self._entries.clear()
        if self._path is not None and self._path.exists():
            self._path.unlink()
        return count
