"""Configuration settings for the A-Frame registry builder."""

from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings

from aframe_registry.errors import MissingCredentialError

# Platform (A-Frame) releases the registry is built for, ascending.
_DEFAULT_PLATFORM_VERSIONS = ["0.2.0", "0.3.0", "0.4.0", "0.5.0"]

_DEFAULT_PLACEHOLDER_IMAGE = (
    "https://cloud.githubusercontent.com/assets/674727/19178879/"
    "5a499302-8c0c-11e6-9bc8-5e6a130cb82e.png"
)


class Settings(BaseSettings):
    """Registry builder configuration.

    Environment variables (or a ``.env`` file):
    - CDN: Package content delivery network (default: https://unpkg.com/)
    - PLACEHOLDER_IMAGE: Image used when no module image can be found
    - GITHUB_ACCESS_TOKEN: GitHub API credential (required for builds)
    - PLATFORM_VERSIONS: JSON list of A-Frame versions, ascending
    - REGISTRY_PATH: Registry YAML file (default: registry.yml)
    - BUILD_DIR: Output directory for <version>.json files (default: build)
    - CACHE_PATH: Persisted request cache (default: .requestcache)
    - FETCH_TIMEOUT: Per-request timeout in seconds (default: 15)
    """

    # Sources
    cdn: str = "https://unpkg.com/"
    placeholder_image: str = _DEFAULT_PLACEHOLDER_IMAGE
    github_access_token: SecretStr | None = None

    # Build
    platform_versions: list[str] = _DEFAULT_PLATFORM_VERSIONS
    registry_path: str = "registry.yml"
    build_dir: str = "build"
    cache_path: str = ".requestcache"

    # Network
    fetch_timeout: float = 15.0

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        # Project .env files commonly carry unrelated keys (NODE_ENV, ...).
        "extra": "ignore",
    }

    def get_build_dir(self) -> Path:
        return Path(self.build_dir).expanduser()

    def get_cache_path(self) -> Path:
        return Path(self.cache_path).expanduser()

    def get_registry_path(self) -> Path:
        return Path(self.registry_path).expanduser()

    def require_github_token(self) -> str:
        """Return the GitHub access token or fail before any work starts."""
        token = (
            self.github_access_token.get_secret_value()
            if self.github_access_token
            else ""
        )
        if not token.strip():
            raise MissingCredentialError(
                "GITHUB_ACCESS_TOKEN is not set; it is required to query the GitHub API"
            )
        return token.strip()


settings = Settings()
