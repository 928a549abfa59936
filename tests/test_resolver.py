"""Tests for src/aframe_registry/resolver.py — per-module version chains."""

import asyncio

import pytest
from fakes import CDN, StubFetchers, module_registry

from aframe_registry.errors import FetchError
from aframe_registry.resolver import Resolution, resolve, resolve_module


def _module(versions):
    return module_registry(versions=versions).kind("components")["test"]


def _settled(resolution: Resolution) -> asyncio.Future:
    fut = asyncio.get_running_loop().create_future()
    fut.set_result(resolution)
    return fut


class TestResolve:
    @pytest.mark.asyncio
    async def test_incompatible_yields_no_record(self):
        fetchers = StubFetchers()
        previous = _settled(Resolution("test", "0.2.0", record={"version": "1.0.0"}))
        result = await resolve(
            "test", _module({"0.3.0": None}), "0.3.0", "0.2.0", previous, fetchers
        )
        assert result.record is None
        assert not result.failed
        assert fetchers.calls == []

    @pytest.mark.asyncio
    async def test_first_version_without_entry_yields_no_record(self):
        result = await resolve(
            "test", _module({}), "0.2.0", None, None, StubFetchers()
        )
        assert result == Resolution("test", "0.2.0")

    @pytest.mark.asyncio
    async def test_fallback_copies_previous_record(self):
        prior = {"version": "1.0.0", "names": ["test"]}
        previous = _settled(Resolution("test", "0.2.0", record=prior))
        result = await resolve(
            "test", _module({}), "0.3.0", "0.2.0", previous, StubFetchers()
        )
        assert result.record == {**prior, "fallbackVersion": "0.2.0"}
        # The prior record is never mutated.
        assert "fallbackVersion" not in prior

    @pytest.mark.asyncio
    async def test_fallback_on_failed_previous_yields_nothing(self):
        previous = _settled(Resolution("test", "0.2.0", error="HTTP 404"))
        result = await resolve(
            "test", _module({}), "0.3.0", "0.2.0", previous, StubFetchers()
        )
        assert result.record is None
        assert not result.failed

    @pytest.mark.asyncio
    async def test_fetch_error_is_reported_not_raised(self):
        root = f"{CDN}test@1.2.3"
        fetchers = StubFetchers(fail={root: FetchError(root, "HTTP 500")})
        module = _module({"0.2.0": {"version": "1.2.3", "path": "dist/test.js"}})
        result = await resolve("test", module, "0.2.0", None, None, fetchers, cdn=CDN)
        assert result.failed
        assert result.record is None
        assert "HTTP 500" in result.error


class SlowFetchers(StubFetchers):
    """Holds every npm lookup until ``release`` is set."""

    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()

    async def fetch_npm(self, package_root):
        await self.release.wait()
        return await super().fetch_npm(package_root)


class TestResolveModule:
    @pytest.mark.asyncio
    async def test_one_resolution_per_version_in_order(self):
        module = _module({"0.2.0": {"version": "1.2.3", "path": "dist/test.js"}})
        versions = ["0.2.0", "0.3.0", "0.4.0"]
        results = await resolve_module("test", module, versions, StubFetchers(), cdn=CDN)
        assert [r.platform_version for r in results] == versions
        assert [r.record.get("fallbackVersion") for r in results] == [
            None,
            "0.2.0",
            "0.3.0",
        ]

    @pytest.mark.asyncio
    async def test_fallback_waits_for_previous_fetch(self):
        fetchers = SlowFetchers()
        module = _module({"0.2.0": {"version": "1.2.3", "path": "dist/test.js"}})
        task = asyncio.create_task(
            resolve_module("test", module, ["0.2.0", "0.3.0"], fetchers, cdn=CDN)
        )
        for _ in range(5):
            await asyncio.sleep(0)
        assert not task.done()

        fetchers.release.set()
        pinned, fallback = await task
        assert pinned.record is not None
        assert fallback.record["fallbackVersion"] == "0.2.0"
        assert fallback.record["file"] == pinned.record["file"]

    @pytest.mark.asyncio
    async def test_modules_resolve_independently(self):
        slow = SlowFetchers()
        fast = StubFetchers()
        module = _module({"0.2.0": {"version": "1.2.3", "path": "dist/test.js"}})

        blocked = asyncio.create_task(
            resolve_module("slow", module, ["0.2.0", "0.3.0"], slow, cdn=CDN)
        )
        done = await resolve_module("fast", module, ["0.2.0", "0.3.0"], fast, cdn=CDN)

        assert all(r.record is not None for r in done)
        assert not blocked.done()
        slow.release.set()
        await blocked
