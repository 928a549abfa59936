"""URL helpers shared by the fetchers and the metadata resolver."""

import re

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*:/*", re.IGNORECASE)


def url_join(*parts: str) -> str:
    """Join URL segments with exactly one slash between each pair.

    ``url_join("https://unpkg.com/", "aframe@0.5.0", "/dist/aframe.js")``
    gives ``https://unpkg.com/aframe@0.5.0/dist/aframe.js``. Empty segments
    are skipped and the scheme separator is left intact.
    """
    segments = [p for p in parts if p]
    if not segments:
        return ""

    first = segments[0]
    scheme = ""
    match = _SCHEME_RE.match(first)
    if match:
        scheme = match.group(0)
        first = first[match.end() :]

    cleaned = [first.rstrip("/")]
    cleaned.extend(p.strip("/") for p in segments[1:])
    return scheme + "/".join(s for s in cleaned if s)


def is_absolute(url: str) -> bool:
    """True for ``http(s)://`` and protocol-relative URLs."""
    return url.startswith(("http://", "https://", "//"))
