"""Repository metadata lookup through the GitHub REST API."""

import httpx
from loguru import logger

from aframe_registry.sources.http import get_json
from aframe_registry.urls import url_join

GITHUB_API = "https://api.github.com/"

# Fields kept from the repository payload.
_REPO_FIELDS = ("created_at", "updated_at", "html_url", "stargazers_count")

# Shorthand prefixes npm accepts for non-GitHub hosts.
_OTHER_HOST_PREFIXES = ("gitlab:", "bitbucket:", "gist:")


def infer_github_repo(repository: str | dict | None) -> str | None:
    """Infer an ``owner/repo`` slug from a package.json ``repository`` field.

    Accepts a bare slug (``aframevr/aframe``), a URL string
    (``git+https://github.com/aframevr/aframe.git``, ``github.com/aframevr/aframe``,
    ``github:aframevr/aframe``), or an object with a ``url`` field holding
    either form. Returns None for other hosts and unrecognized shapes.
    """
    if isinstance(repository, dict):
        repository = repository.get("url")
    if not isinstance(repository, str):
        return None

    value = repository.strip()
    if not value or value.startswith(_OTHER_HOST_PREFIXES):
        return None

    if value.startswith("git+"):
        value = value[len("git+") :]
    if value.startswith("github:"):
        value = value[len("github:") :]
    value = value.rstrip("/")
    if value.endswith(".git"):
        value = value[: -len(".git")]

    # git@github.com:owner/repo
    value = value.replace("git@github.com:", "github.com/")

    if "://" in value or "." in value.split("/", 1)[0]:
        if "github.com/" not in value:
            return None

    segments = [s for s in value.split("/") if s]
    if len(segments) < 2:
        return None
    return "/".join(segments[-2:])


async def fetch_github(
    client: httpx.AsyncClient, repo: str | None, access_token: str
) -> dict:
    """Fetch repository metadata for ``repo`` (an ``owner/repo`` slug).

    Returns an empty dict without touching the network when no slug could
    be inferred. Results are not cached since star counts change.
    """
    if not repo:
        return {}

    url = url_join(GITHUB_API, "repos", repo)
    logger.info(f"Fetching from GitHub {repo} ...")
    data = await get_json(
        client,
        url,
        params={"access_token": access_token},
        headers={
            "Accept": "application/vnd.github+json",
            "Authorization": f"token {access_token}",
        },
    )
    return {field: data.get(field) for field in _REPO_FIELDS}
