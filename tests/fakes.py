"""Canned registry fixtures and in-memory fetchers shared by the tests."""

import copy

from aframe_registry.registry import parse_registry

CDN = "https://unpkg.com/"
PLATFORM_VERSIONS = ["0.2.0", "0.3.0", "0.4.0", "0.5.0"]

DEFAULT_NPM = {
    "author": "Test Test <test@test.com>",
    "description": "This is test",
    "license": "TEST",
    "repository": "aframevr/aframe",
}
DEFAULT_GITHUB = {
    "created_at": "2000-01-01T12:00:00Z",
    "html_url": "https://github.com/aframevr/aframe",
    "stargazers_count": 9001,
    "updated_at": "2010-01-01T12:00:01Z",
}
DEFAULT_README = {
    "text": "This is my test",
    "url": "https://unpkg.com/aframe/README.md",
}


class StubFetchers:
    """In-memory MetadataFetchers returning canned responses.

    ``fail`` names package roots whose npm lookup raises the given error.
    Every call is recorded in ``calls`` as ``(source, argument)``.
    """

    def __init__(self, npm=None, github=None, readme=None, fail=None):
        self.npm = {**DEFAULT_NPM, **(npm or {})}
        self.github = {**DEFAULT_GITHUB, **(github or {})}
        self.readme = {**DEFAULT_README, **(readme or {})}
        self.fail = fail or {}
        self.calls: list[tuple[str, object]] = []

    async def fetch_npm(self, package_root):
        self.calls.append(("npm", package_root))
        if package_root in self.fail:
            raise self.fail[package_root]
        return copy.deepcopy(self.npm)

    async def fetch_github(self, repo):
        self.calls.append(("github", repo))
        return copy.deepcopy(self.github) if repo else {}

    async def fetch_readme(self, package_root):
        self.calls.append(("readme", package_root))
        return copy.deepcopy(self.readme)


def module_registry(kind="components", versions=None, names=None, **extra):
    """Registry with a single ``test`` module of ``kind``."""
    declaration = {
        "names": names or "test",
        "versions": versions
        if versions is not None
        else {"0.2.0": {"path": "dist/test.js", "version": "1.2.3"}},
        **extra,
    }
    return parse_registry({kind: {"test": declaration}})


