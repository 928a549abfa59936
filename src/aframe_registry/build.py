"""Registry build: resolve every module at every platform version and write JSON.

Steps:
  For each module kind (components, shaders):
    For each module:
      For each platform version (ascending):
        explicitly incompatible -> skip
        unpinned -> fall back to the previous version's record
        pinned -> fetch metadata (npm, GitHub, README)
  Write build/<version>.json and persist the request cache.
"""

import asyncio
import json
from pathlib import Path

import httpx
from loguru import logger

from aframe_registry.cache import RequestCache
from aframe_registry.config import Settings, settings
from aframe_registry.registry import MODULE_KINDS, Registry, load_registry
from aframe_registry.resolver import Resolution, resolve_module
from aframe_registry.sources.fetchers import HttpFetchers, MetadataFetchers


def empty_output(platform_versions: list[str]) -> dict[str, dict[str, dict]]:
    """One entry per platform version, each with every module kind present."""
    return {version: {kind: {} for kind in MODULE_KINDS} for version in platform_versions}


async def build(
    registry: Registry,
    fetchers: MetadataFetchers,
    platform_versions: list[str] | None = None,
    cdn: str | None = None,
    placeholder_image: str | None = None,
) -> dict[str, dict[str, dict]]:
    """Resolve the whole registry.

    Modules (across both kinds) resolve concurrently; within a module the
    platform versions chain in order. Always completes: failed pairs are
    logged and left out of the output.

    Returns:
        ``{platform_version: {"components": {...}, "shaders": {...}}}``
    """
    if platform_versions is None:
        platform_versions = settings.platform_versions
    versions = list(platform_versions)
    output = empty_output(versions)

    jobs: list[tuple[str, str]] = []
    coros = []
    for kind in MODULE_KINDS:
        for npm_name, module in registry.kind(kind).items():
            jobs.append((kind, npm_name))
            coros.append(
                resolve_module(
                    npm_name,
                    module,
                    versions,
                    fetchers,
                    cdn=cdn,
                    placeholder_image=placeholder_image,
                )
            )

    results: list[list[Resolution]] = await asyncio.gather(*coros)

    failures = 0
    for (kind, npm_name), resolutions in zip(jobs, results):
        for resolution in resolutions:
            if resolution.failed:
                failures += 1
            if resolution.record is not None:
                output[resolution.platform_version][kind][npm_name] = resolution.record

    if failures:
        logger.warning(f"Registry processed with {failures} failed module versions")
    else:
        logger.info("Registry processed")
    return output


def write_output(output: dict[str, dict[str, dict]], build_dir: Path) -> list[Path]:
    """Write one ``<platform_version>.json`` per platform version."""
    build_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for platform_version, registry in output.items():
        output_path = build_dir / f"{platform_version}.json"
        logger.info(f"Writing {output_path} ...")
        output_path.write_text(json.dumps(registry), encoding="utf-8")
        written.append(output_path)
    return written


async def run(config: Settings | None = None) -> dict[str, dict[str, dict]]:
    """Run a full build: load registry and cache, resolve, write files.

    Raises:
        MissingCredentialError: No GitHub access token is configured.
        RegistryFormatError: The registry file is malformed.
    """
    config = config or settings
    token = config.require_github_token()

    registry_path = config.get_registry_path()
    logger.info(f"Processing {registry_path} ...")
    registry = load_registry(registry_path)

    cache = RequestCache.load(config.get_cache_path())
    async with httpx.AsyncClient(
        timeout=config.fetch_timeout, follow_redirects=True
    ) as client:
        fetchers = HttpFetchers(client, cache, token)
        output = await build(
            registry,
            fetchers,
            config.platform_versions,
            cdn=config.cdn,
            placeholder_image=config.placeholder_image,
        )

    logger.info("Registry processed, writing files...")
    write_output(output, config.get_build_dir())
    cache.persist()
    logger.debug(f"Cache stats: {cache.stats()}")
    logger.info("Processing complete!")
    return output
