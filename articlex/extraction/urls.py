"""URL helpers — cache-key normalization and the AMP mirror URL."""

from __future__ import annotations

import re
from urllib.parse import urlsplit, urlunsplit

_AMP_SUFFIX = re.compile(r"/amp/?$")


def normalize_url(url: str) -> str:
    """Canonicalize *url* for cache keys and equality checks.

    Drops the query string and fragment and strips trailing slashes from
    the path, so tracking parameters and trailing slashes never produce a
    distinct key. Input that does not parse as an absolute URL is returned
    unchanged; this never raises.
    """
    try:
        parts = urlsplit(url)
    except (ValueError, TypeError):
        return url
    if not parts.scheme or not parts.netloc:
        return url
    path = parts.path.rstrip("/")
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, "", ""))


def amp_url(url: str) -> str:
    """Return the AMP mirror of *url* (``…/slug/amp/``).

    URLs already pointing at an AMP page are returned unchanged, as is
    anything that does not parse.
    """
    try:
        parts = urlsplit(url)
    except (ValueError, TypeError):
        return url
    if not parts.scheme or not parts.netloc or _AMP_SUFFIX.search(parts.path):
        return url
    path = parts.path if parts.path.endswith("/") else parts.path + "/"
    return urlunsplit((parts.scheme, parts.netloc, path + "amp/", parts.query, ""))
