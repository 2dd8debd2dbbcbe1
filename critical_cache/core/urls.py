"""URL helpers shared by source resolution and the page cache."""

from __future__ import annotations

import hashlib
import re
from typing import Iterable, List
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_PAGINATION_RE = re.compile(r"^page/\d+/?$")


def make_absolute_url(url: str, base_url: str) -> str:
    """Resolve ``url`` against the site base URL.

    Absolute URLs and URLs already prefixed with the base URL are returned
    untouched. Protocol-relative URLs inherit the base scheme.
    """

    if url.lower().startswith(base_url.lower()):
        return url

    parts = urlsplit(url)
    if parts.scheme and parts.netloc:
        return url
    if not parts.scheme and parts.netloc:
        return f"{urlsplit(base_url).scheme}:{url}"

    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


def make_absolute_urls(urls: Iterable[str], base_url: str) -> List[str]:
    """Absolutize a URL list, collapsing duplicates while keeping first occurrences."""

    seen: dict[str, None] = {}
    for url in urls:
        absolute = make_absolute_url(url, base_url)
        if absolute not in seen:
            seen[absolute] = None
    return list(seen.keys())


def normalize_cache_url(url: str) -> str:
    """Canonical page-cache key: lowercase scheme and host, no fragment."""

    parts = urlsplit(url.strip())
    path = parts.path or "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))


def _is_query_variant(candidate: str, url: str) -> bool:
    """``url`` carries a query: only the URL itself and extra arguments appended to it match."""

    return candidate == url or candidate.startswith(f"{url}&")


def is_derived_url(candidate: str, url: str) -> bool:
    """Return True if ``candidate`` is ``url`` itself or lives beneath it.

    ``https://site/a/page/2/`` and ``https://site/a?x=1`` derive from
    ``https://site/a/``; ``https://site/ab`` does not. A ``url`` with a query
    string has no children: ``https://site/?p=9`` only matches itself and
    ``https://site/?p=9&...``.
    """

    if "?" in url:
        return _is_query_variant(candidate, url)
    if candidate == url or candidate.startswith(f"{url}?"):
        return True
    base = url.rstrip("/")
    if candidate == base:
        return True
    return candidate.startswith(f"{base}/") or candidate.startswith(f"{base}?")


def is_paginated_variant(candidate: str, url: str) -> bool:
    """Return True for ``url`` itself, its ``/page/<n>/`` pages and its query variants."""

    if "?" in url:
        return _is_query_variant(candidate, url)
    if candidate == url or candidate.startswith(f"{url}?"):
        return True
    base = url.rstrip("/")
    if candidate == base or candidate.startswith(f"{base}?"):
        return True
    if not candidate.startswith(f"{base}/"):
        return False
    remainder = candidate[len(base) + 1 :].split("?", 1)[0]
    return remainder == "" or bool(_PAGINATION_RE.match(remainder))


def match_prefix(url: str) -> str:
    """Longest string every URL matched by :func:`is_derived_url` starts with."""

    return url if "?" in url else url.rstrip("/")


def remove_query_arg(url: str, name: str) -> str:
    """Drop every occurrence of query argument ``name`` from ``url``."""

    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [(key, val) for key, val in parse_qsl(parts.query, keep_blank_values=True) if key != name]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def add_query_arg(url: str, name: str, value: str) -> str:
    """Set a single query argument on ``url``, replacing an existing value."""

    parts = urlsplit(url)
    query = [(key, val) for key, val in parse_qsl(parts.query, keep_blank_values=True) if key != name]
    query.append((name, value))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def url_hash(url: str) -> str:
    """Stable short identifier for a URL, insensitive to a trailing slash."""

    return hashlib.md5(url.rstrip("/").encode("utf-8")).hexdigest()
