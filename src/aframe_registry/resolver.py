"""Version resolution: decide, per module and platform version, what to emit.

For each platform version, in ascending order, a module is either:

1. explicitly incompatible (``null`` entry) -> no record, no network access
2. pinned to a package version -> fresh metadata from the fetchers
3. unspecified -> the previous platform version's record, marked with
   ``fallbackVersion``, once that resolution has settled

Each module gets an ordered list of task handles, one per platform version.
A fallback at position ``i`` awaits handle ``i - 1``, so chains carry
forward transitively while separate modules resolve concurrently.
"""

import asyncio
from dataclasses import dataclass

from loguru import logger

from aframe_registry.errors import FetchError
from aframe_registry.metadata import get_metadata
from aframe_registry.registry import ModuleDeclaration
from aframe_registry.sources.fetchers import MetadataFetchers


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one module at one platform version."""

    npm_name: str
    platform_version: str
    record: dict | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


async def resolve(
    npm_name: str,
    module: ModuleDeclaration,
    platform_version: str,
    previous_version: str | None,
    previous: "asyncio.Future[Resolution] | None",
    fetchers: MetadataFetchers,
    cdn: str | None = None,
    placeholder_image: str | None = None,
) -> Resolution:
    """Resolve ``module`` at ``platform_version``. Never raises on fetch errors."""
    if module.is_incompatible(platform_version):
        logger.info(f"{npm_name} marked not compatible with {platform_version}")
        return Resolution(npm_name, platform_version)

    if module.entry_for(platform_version) is not None:
        try:
            record = await get_metadata(
                npm_name,
                module,
                platform_version,
                fetchers,
                cdn=cdn,
                placeholder_image=placeholder_image,
            )
        except FetchError as e:
            logger.error(
                f"Failed to resolve {npm_name} for {platform_version} ({e.url}): {e.reason}"
            )
            return Resolution(npm_name, platform_version, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error resolving {npm_name} for {platform_version}")
            return Resolution(npm_name, platform_version, error=repr(e))
        return Resolution(npm_name, platform_version, record=record)

    if previous is None or previous_version is None:
        return Resolution(npm_name, platform_version)

    prior = await previous
    if prior.record is None:
        return Resolution(npm_name, platform_version)

    logger.info(
        f"{npm_name} marked to fall back to {previous_version} entry for {platform_version}"
    )
    return Resolution(
        npm_name,
        platform_version,
        record={**prior.record, "fallbackVersion": previous_version},
    )


async def resolve_module(
    npm_name: str,
    module: ModuleDeclaration,
    platform_versions: list[str],
    fetchers: MetadataFetchers,
    cdn: str | None = None,
    placeholder_image: str | None = None,
) -> list[Resolution]:
    """Resolve ``module`` at every platform version, in ascending order.

    Returns one Resolution per entry of ``platform_versions``, in the same order.
    """
    handles: list[asyncio.Task[Resolution]] = []
    for index, platform_version in enumerate(platform_versions):
        previous = handles[index - 1] if index > 0 else None
        previous_version = platform_versions[index - 1] if index > 0 else None
        handles.append(
            asyncio.create_task(
                resolve(
                    npm_name,
                    module,
                    platform_version,
                    previous_version,
                    previous,
                    fetchers,
                    cdn=cdn,
                    placeholder_image=placeholder_image,
                )
            )
        )
    return list(await asyncio.gather(*handles))
