"""
Pattern-based link extraction for wcraw.

Links are found by scanning raw page text for absolute URLs, not by parsing
markup, so URLs inside scripts, comments or plain text are discovered too.
"""
from __future__ import annotations

from typing import List, Optional, Sequence
from urllib.parse import SplitResult

from wcraw.crawler.models import Candidate, CrawlRoot
from wcraw.crawler.normalizer import URL_PATTERN, normalize, split_url
from wcraw.crawler.scope import ScopeRule, in_scope, in_scope_by_segment
from wcraw.errors import MalformedUrl
from wcraw.logger import logger

__all__: Sequence[str] = ("extract_links", "extract_candidates", "segment_prefixes")


def segment_prefixes(parts: SplitResult) -> List[str]:
    """
    Every ancestor path of *parts*, shortest first, ending with the full path.

    ``http://h/a/b/c.html`` gives ``http://h/a``, ``http://h/a/b`` and
    ``http://h/a/b/c.html``. Query and fragment are not carried over.
    """
    base = f"{parts.scheme}://{parts.netloc}"
    segments = [s for s in parts.path.split("/") if s]
    if not segments:
        return [base]
    prefixes: List[str] = []
    path = ""
    for segment in segments:
        path += "/" + segment
        prefixes.append(base + path)
    return prefixes


def _fetch_url(canonical: str, scheme: str, preserve_scheme: bool) -> str:
    if preserve_scheme and scheme == "https" and canonical.startswith("http://"):
        return "https://" + canonical[len("http://"):]
    return canonical


def extract_candidates(
    text: Optional[str],
    root: CrawlRoot,
    rule: ScopeRule = "segment",
    preserve_scheme: bool = False,
) -> List[Candidate]:
    """
    Find in-scope links in *text* and expand them into ancestor candidates.

    The result is ordered by match position, then by expansion order, and
    holds each canonical URL once. Matches that cannot be parsed are dropped.
    Under the ``segment`` rule ancestors above the root path are dropped as
    well; the ``legacy`` rule keeps every ancestor.
    """
    if not text:
        return []

    found: dict[str, Candidate] = {}
    for match in URL_PATTERN.finditer(text):
        raw = match.group(0)
        try:
            parts = split_url(raw)
            if not in_scope(raw, root, rule):
                continue
            expanded = [normalize(prefix) for prefix in segment_prefixes(parts)]
            if rule == "segment":
                expanded = [url for url in expanded if in_scope_by_segment(url, root)]
        except MalformedUrl as exc:
            logger.debug("Dropped link %s: %s", raw, exc)
            continue
        scheme = parts.scheme.lower()
        for canonical in expanded:
            if canonical not in found:
                found[canonical] = Candidate(canonical, _fetch_url(canonical, scheme, preserve_scheme))
    return list(found.values())


def extract_links(text: Optional[str], root: CrawlRoot, rule: ScopeRule = "segment") -> List[str]:
    """Canonical in-scope links found in *text*, de-duplicated, in discovery order."""
    return [c.canonical for c in extract_candidates(text, root, rule)]
