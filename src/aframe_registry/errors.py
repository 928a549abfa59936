"""Error types raised while building the registry."""


class RegistryError(Exception):
    """Base class for registry builder errors."""


class MissingCredentialError(RegistryError):
    """A credential needed before any fetch is not configured."""


class RegistryFormatError(RegistryError):
    """The registry declaration file is malformed."""


class FetchError(RegistryError):
    """Fetching a remote resource failed (network, HTTP status or body)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Error fetching {url}: {reason}")


class ReadmeNotFoundError(FetchError):
    """None of the conventional README filenames resolved."""

    def __init__(self, package_root: str, tried: list[str]):
        self.tried = tried
        super().__init__(package_root, f"no README found (tried {', '.join(tried)})")
