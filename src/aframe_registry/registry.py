"""Registry declaration: module kinds, module declarations and version pins.

The registry YAML maps each module kind to its modules, keyed by npm name::

    components:
      aframe-foo-component:
        names: foo
        path: dist/aframe-foo-component.min.js
        versions:
          0.2.0:
            version: 1.0.0
          0.4.0: null          # explicitly incompatible
          0.5.0:
            version: 2.0.0
            path: dist/foo.js  # overrides the module-level path
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from aframe_registry.errors import RegistryFormatError

MODULE_KINDS = ("components", "shaders")


@dataclass(frozen=True)
class VersionEntry:
    """A module pinned to a package version for one platform version."""

    version: str
    path: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class ModuleDeclaration:
    """One component or shader as declared in the registry."""

    identifier: str
    names: list[str]
    versions: dict[str, VersionEntry | None]
    path: str | None = None
    image: str | None = None

    def is_incompatible(self, platform_version: str) -> bool:
        """Explicitly marked null for ``platform_version``."""
        return (
            platform_version in self.versions
            and self.versions[platform_version] is None
        )

    def entry_for(self, platform_version: str) -> VersionEntry | None:
        return self.versions.get(platform_version)


@dataclass(frozen=True)
class Registry:
    """Module declarations grouped by kind."""

    modules: dict[str, dict[str, ModuleDeclaration]] = field(default_factory=dict)

    def kind(self, kind: str) -> dict[str, ModuleDeclaration]:
        return self.modules.get(kind, {})


def normalize_names(names: str | list | None, default: str) -> list[str]:
    """Normalize a ``names`` field to a list; a bare string becomes ``[names]``."""
    if names is None:
        return [default]
    if isinstance(names, str):
        return [names]
    return [str(n) for n in names]


def _parse_entry(identifier: str, platform_version: str, raw) -> VersionEntry | None:
    if raw is None:
        return None
    if not isinstance(raw, dict) or raw.get("version") is None:
        raise RegistryFormatError(
            f"{identifier}: entry for {platform_version} needs a 'version'"
        )
    return VersionEntry(
        version=str(raw["version"]),
        path=raw.get("path"),
        image=raw.get("image"),
    )


def parse_module(identifier: str, raw: dict) -> ModuleDeclaration:
    """Build a ModuleDeclaration from its raw YAML mapping."""
    if not isinstance(raw, dict):
        raise RegistryFormatError(f"{identifier}: declaration must be a mapping")
    versions_raw = raw.get("versions")
    if not isinstance(versions_raw, dict):
        raise RegistryFormatError(f"{identifier}: 'versions' must be a mapping")

    # YAML may read "0.5" as a float; platform versions are always strings.
    versions = {
        str(platform_version): _parse_entry(identifier, str(platform_version), entry)
        for platform_version, entry in versions_raw.items()
    }
    return ModuleDeclaration(
        identifier=identifier,
        names=normalize_names(raw.get("names"), identifier),
        versions=versions,
        path=raw.get("path"),
        image=raw.get("image"),
    )


def parse_registry(data: dict | None) -> Registry:
    """Build a Registry from the decoded YAML document."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RegistryFormatError("registry must be a mapping of module kinds")

    modules: dict[str, dict[str, ModuleDeclaration]] = {}
    for kind in MODULE_KINDS:
        declared = data.get(kind) or {}
        if not isinstance(declared, dict):
            raise RegistryFormatError(f"'{kind}' must be a mapping")
        modules[kind] = {
            str(identifier): parse_module(str(identifier), raw)
            for identifier, raw in declared.items()
        }
    return Registry(modules)


def load_registry(path: Path) -> Registry:
    """Load and parse the registry YAML file at ``path``."""
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RegistryFormatError(f"{path}: invalid YAML: {e}") from e
    return parse_registry(data)
