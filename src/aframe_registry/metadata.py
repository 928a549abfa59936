"""Metadata resolution: fuse npm, GitHub and README data into one record.

Only called for a module pinned to an explicit package version at a
platform version. Fallback records are produced by the resolver instead.
"""

import asyncio
import posixpath
import re
from datetime import datetime, timezone
from urllib.parse import urlparse

from loguru import logger

from aframe_registry.config import settings
from aframe_registry.registry import ModuleDeclaration
from aframe_registry.sources.fetchers import MetadataFetchers
from aframe_registry.sources.github import infer_github_repo
from aframe_registry.urls import is_absolute, url_join

NPM_PACKAGE_URL = "https://npmjs.com/package/"

# Markdown image (group 1) or HTML <img src="..."> (group 2), in document order.
_IMAGE_RE = re.compile(
    r"!\[[^\]]*\]\(\s*<?([^)\s>]+)>?[^)]*\)"
    r"|<\s*img\b[^>]*?(?<![\w-])src\s*=\s*[\"']([^\"']+)[\"'][^>]*>",
    re.IGNORECASE,
)

# CI / status badge services; their images never illustrate the module.
_BADGE_HOSTS = (
    "img.shields.io",
    "shields.io",
    "badgen.net",
    "badge.fury.io",
    "badges.gitter.im",
    "travis-ci.org",
    "travis-ci.com",
    "circleci.com",
    "ci.appveyor.com",
    "coveralls.io",
    "codecov.io",
    "codeclimate.com",
    "david-dm.org",
    "nodei.co",
    "saucelabs.com",
    "snyk.io",
    "greenkeeper.io",
)
_BADGE_ENDPOINT_RE = re.compile(r"/badge(?:\.svg|\.png)?$", re.IGNORECASE)


def normalize_author(author: str | dict | None) -> str:
    """Normalize a package.json ``author`` (string or ``{"name": ...}``)."""
    if isinstance(author, dict):
        author = author.get("name")
    if not isinstance(author, str):
        return ""
    return author.strip()


def author_name(author: str) -> str:
    """Strip an email-style suffix: ``"Jo Doe <jo@x.com>"`` -> ``"Jo Doe"``."""
    return author.split("<", 1)[0].strip()


def _is_badge(src: str) -> bool:
    parsed = urlparse(src)
    host = parsed.netloc.lower()
    if host.startswith(("badge.", "badges.")):
        return True
    if any(host == h or host.endswith("." + h) for h in _BADGE_HOSTS):
        return True
    # Status endpoints such as GitHub Actions `.../workflows/ci/badge.svg`.
    return _BADGE_ENDPOINT_RE.search(parsed.path) is not None


def parse_image_from_text(text: str, package_root: str = "") -> str:
    """Return the first non-badge image referenced in a README, or ``""``.

    Handles Markdown (``![alt](src "title")``) and HTML (``<img src="...">``)
    images. Relative sources are made absolute against ``package_root``.
    """
    for match in _IMAGE_RE.finditer(text or ""):
        src = (match.group(1) or match.group(2) or "").strip()
        # `![](/foo.png "Description")`
        src = src.split(" ")[0]
        if not src or _is_badge(src):
            continue
        if not is_absolute(src) and package_root:
            src = url_join(package_root, src)
        return src
    return ""


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return f"{day}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_date(timestamp: str | None) -> str | None:
    """Format an ISO-8601 timestamp as ``"January 1st 2000"`` (UTC date)."""
    if not timestamp:
        return None
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparsable timestamp: {timestamp}")
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return f"{parsed:%B} {_ordinal(parsed.day)} {parsed.year}"


def package_root_url(npm_name: str, package_version: str, cdn: str) -> str:
    return url_join(cdn, f"{npm_name}@{package_version}")


async def get_metadata(
    npm_name: str,
    module: ModuleDeclaration,
    platform_version: str,
    fetchers: MetadataFetchers,
    cdn: str | None = None,
    placeholder_image: str | None = None,
) -> dict:
    """Fetch and fuse the metadata record for an explicitly pinned module.

    Args:
        npm_name: Package name (the module identifier)
        module: Registry declaration of the module
        platform_version: A-Frame version being resolved; must be pinned
        fetchers: npm / GitHub / README lookups
        cdn: Package CDN base (default: settings.cdn)
        placeholder_image: Image used when none is found (default: settings)

    Returns:
        The flat metadata record written to ``build/<version>.json``.

    Raises:
        FetchError: Any of the lookups failed.
    """
    entry = module.entry_for(platform_version)
    if entry is None:
        raise ValueError(f"{npm_name} has no version pinned for {platform_version}")

    cdn = cdn if cdn is not None else settings.cdn
    placeholder_image = (
        placeholder_image if placeholder_image is not None else settings.placeholder_image
    )
    package_root = package_root_url(npm_name, entry.version, cdn)

    logger.info(f"Fetching from npm {npm_name} {entry.version} ...")
    npm_data = await fetchers.fetch_npm(package_root)
    github_data, readme_data = await asyncio.gather(
        fetchers.fetch_github(infer_github_repo(npm_data.get("repository"))),
        fetchers.fetch_readme(package_root),
    )

    path = entry.path or module.path or ""
    author = normalize_author(npm_data.get("author"))
    image = (
        module.image
        or entry.image
        or parse_image_from_text(readme_data.get("text", ""), package_root)
        or placeholder_image
    )

    logger.info(f"{npm_name} registered to use {entry.version} for {platform_version}")
    return {
        "author": author,
        "authorName": author_name(author),
        "description": npm_data.get("description"),
        "file": url_join(package_root, path) if path else package_root,
        "filename": posixpath.basename(path),
        "githubCreated": format_date(github_data.get("created_at")),
        "githubUpdated": format_date(github_data.get("updated_at")),
        "githubUrl": github_data.get("html_url"),
        "githubStars": github_data.get("stargazers_count"),
        "image": image,
        "license": npm_data.get("license"),
        "names": list(module.names),
        "npmName": npm_name,
        "npmUrl": url_join(NPM_PACKAGE_URL, npm_name),
        "readmeUrl": readme_data.get("url"),
        "version": entry.version,
    }
