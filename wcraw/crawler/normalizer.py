"""
URL canonicalization for wcraw.

Every URL the crawler compares, stores in the visited set or schedules passes
through :func:`normalize` first. The pipeline is a chain of small pure stages;
each stage receives the string produced by the previous one.
"""
from __future__ import annotations

import posixpath
import re
from typing import Final, Sequence, Tuple
from urllib.parse import SplitResult, unquote, urlsplit, urlunsplit

from wcraw.errors import MalformedUrl

__all__: Sequence[str] = ("URL_PATTERN", "normalize", "is_valid_url", "same_url", "split_url")

#: absolute http/https/ftp URL, as it appears in raw page text
URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(http|ftp|https)://([\w_-]+(?:(?:\.[\w_-]+)+))([\w.,@?^=%&:/~+#-]*[\w@?^=%&/~+#-])",
    re.IGNORECASE,
)

DEFAULT_DIRECTORY_INDEXES: Final[Tuple[str, ...]] = (
    "default.asp",
    "default.aspx",
    "index.htm",
    "index.html",
    "index.php",
)

TRACKING_MARKER: Final[str] = "utm_source="

_DEFAULT_PORTS: Final[dict[str, int]] = {"http": 80, "https": 443, "ftp": 21}
_MULTI_SLASH_RE = re.compile(r"/{2,}")
_UNSAFE_RE = re.compile(r"[\t\r\n]")
_MAX_PASSES: Final[int] = 8


def split_url(url: str) -> SplitResult:
    """Parse *url* as an absolute URI or raise :class:`MalformedUrl`."""
    try:
        parts = urlsplit(url.strip())
        # .port validates the port lazily
        parts.port
    except ValueError as exc:
        raise MalformedUrl(url, str(exc)) from exc
    if not parts.scheme or not parts.hostname:
        raise MalformedUrl(url, "not an absolute URL")
    return parts


def _netloc(parts: SplitResult) -> str:
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    if port is not None and port != _DEFAULT_PORTS.get(parts.scheme.lower()):
        host = f"{host}:{port}"
    return host


def _resolve_dot_segments(path: str) -> str:
    if "/." not in path:
        return path
    resolved = posixpath.normpath(path)
    if resolved.startswith("//"):
        resolved = "/" + resolved.lstrip("/")
    if path.endswith("/") and not resolved.endswith("/"):
        resolved += "/"
    return resolved


def _absolute_form(url: str) -> str:
    """Lower-case scheme and host, drop userinfo and default port, resolve dot segments."""
    parts = split_url(url)
    path = _resolve_dot_segments(parts.path or "/")
    return urlunsplit((parts.scheme.lower(), _netloc(parts), path, parts.query, parts.fragment))


# --------------------------------------------------------------------------- #
# Pipeline stages                                                             #
# --------------------------------------------------------------------------- #


def _to_lower(url: str) -> str:
    decoded = unquote(url)
    while decoded != url:
        url, decoded = decoded, unquote(decoded)
    return _UNSAFE_RE.sub("", decoded).strip().lower()


def _limit_protocols(url: str) -> str:
    if url.startswith("https://"):
        return "http://" + url[len("https://"):]
    return url


def _remove_default_directory_indexes(url: str) -> str:
    parts = split_url(url)
    for index in DEFAULT_DIRECTORY_INDEXES:
        if parts.path.endswith("/" + index):
            path = parts.path[: -len(index)]
            return urlunsplit(parts._replace(path=path))
    return url


def _remove_fragment(url: str) -> str:
    parts = split_url(url)
    if not parts.fragment and "#" not in url:
        return url
    return urlunsplit(parts._replace(fragment=""))


def _remove_duplicate_slashes(url: str) -> str:
    parts = split_url(url)
    if "//" not in parts.path:
        return url
    return urlunsplit(parts._replace(path=_MULTI_SLASH_RE.sub("/", parts.path)))


def _add_www(url: str) -> str:
    parts = split_url(url)
    host = parts.hostname or ""
    if len(host.split(".")) == 2 and not host.startswith("www."):
        return urlunsplit(parts._replace(netloc="www." + parts.netloc))
    return url


def _remove_tracking_part(url: str) -> str:
    parts = split_url(url)
    idx = parts.query.find(TRACKING_MARKER)
    if idx == -1:
        return url
    # the delimiter before the marker goes too ("?" when idx == 0)
    query = parts.query[: max(idx - 1, 0)]
    return urlunsplit(parts._replace(query=query))


def _remove_trailing_slash_and_empty_query(url: str) -> str:
    return url.rstrip("?/ ")


def _canonical_pass(url: str) -> str:
    url = _to_lower(_absolute_form(url))
    url = _limit_protocols(url)
    url = _remove_default_directory_indexes(url)
    url = _remove_fragment(url)
    url = _remove_duplicate_slashes(url)
    url = _add_www(url)
    url = _remove_tracking_part(url)
    return _remove_trailing_slash_and_empty_query(url)


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def normalize(url: str) -> str:
    """
    Return the canonical form of an absolute *url*.

    The stages are repeated until the result stops changing: decoding can
    expose dot segments, forcing ``http`` can turn ``:80`` into a default
    port, and trimming a slash can expose another directory index.

    Raises :class:`~wcraw.errors.MalformedUrl` when *url* cannot be parsed.

    >>> normalize("HTTPS://EXAMPLE.com/index.html")
    'http://www.example.com'
    """
    current = _canonical_pass(url)
    for _ in range(_MAX_PASSES):
        following = _canonical_pass(current)
        if following == current:
            break
        current = following
    return current


def is_valid_url(url: str) -> bool:
    """True if *url* as a whole looks like an absolute http, https or ftp URL."""
    return bool(URL_PATTERN.fullmatch(url.strip()))


def same_url(first: str, second: str) -> bool:
    """Compare two URLs by their canonical forms."""
    return normalize(first) == normalize(second)
