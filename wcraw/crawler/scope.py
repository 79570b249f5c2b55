"""
Domain-scope checks: does a candidate URL belong to the crawl root?
"""
from __future__ import annotations

from typing import Literal, Union
from urllib.parse import SplitResult

from wcraw.crawler.models import CrawlRoot
from wcraw.crawler.normalizer import normalize, split_url

ScopeRule = Literal["segment", "legacy"]

__all__ = ("ScopeRule", "in_scope", "in_scope_by_segment", "in_scope_legacy")


def in_scope_by_segment(candidate: str, root: CrawlRoot) -> bool:
    """
    Same host (and port) as the root and a path at or below the root path.

    Matching is segment aligned: root ``/blog`` accepts ``/blog`` and
    ``/blog/post1`` but not ``/blogroll``.
    """
    parts = split_url(normalize(candidate))
    if parts.netloc != root.netloc:
        return False
    if not root.path:
        return True
    path = parts.path.rstrip("/")
    return path == root.path or path.startswith(root.path + "/")


def in_scope_legacy(candidate: Union[str, SplitResult], root: CrawlRoot) -> bool:
    """Substring containment of ``host/`` in ``root_host + root_path``."""
    parts = candidate if isinstance(candidate, SplitResult) else split_url(candidate)
    domain = root.host + (root.path or "/")
    return ((parts.hostname or "") + "/") in domain


def in_scope(candidate: str, root: CrawlRoot, rule: ScopeRule = "segment") -> bool:
    """Check *candidate* against *root* with the configured scope *rule*."""
    if rule == "legacy":
        return in_scope_legacy(candidate, root)
    return in_scope_by_segment(candidate, root)
