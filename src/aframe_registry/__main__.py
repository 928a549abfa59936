"""A-Frame registry builder entry point."""

import asyncio
import sys

from loguru import logger


def _build() -> int:
    """Build ``build/<version>.json`` for every configured A-Frame version."""
    from aframe_registry.build import run
    from aframe_registry.errors import MissingCredentialError, RegistryFormatError

    try:
        asyncio.run(run())
    except MissingCredentialError as e:
        logger.error(str(e))
        return 1
    except (RegistryFormatError, FileNotFoundError) as e:
        logger.error(f"Could not load registry: {e}")
        return 1
    return 0


def _clear_cache() -> int:
    """Remove the persisted request cache."""
    from aframe_registry.cache import RequestCache
    from aframe_registry.config import settings

    removed = RequestCache.load(settings.get_cache_path()).clear()
    print(f"Removed {removed} cached responses from {settings.get_cache_path()}")
    return 0


def _cli() -> None:
    """CLI dispatcher: build (default) or clear-cache subcommand."""
    from aframe_registry.config import settings

    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    if len(sys.argv) >= 2 and sys.argv[1] == "clear-cache":
        sys.exit(_clear_cache())
    elif len(sys.argv) >= 2 and sys.argv[1] not in ("build",):
        print(f"Unknown command: {sys.argv[1]} (expected 'build' or 'clear-cache')")
        sys.exit(2)
    else:
        sys.exit(_build())


if __name__ == "__main__":
    _cli()
