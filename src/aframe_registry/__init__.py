"""A-Frame registry builder - versioned metadata for components and shaders."""

from importlib.metadata import version

from aframe_registry.__main__ import _cli as main
from aframe_registry.build import run

__version__ = version("aframe-registry")
__all__ = ["run", "main", "__version__"]
