# File: wcraw/crawler/__init__.py
"""wcraw.crawler: URL canonicalization, link extraction, scope and dedup.

The orchestrator lives in :mod:`wcraw.crawler.crawler`; it is not imported
here because it depends on :mod:`wcraw.config`, which imports this package.
"""

from .link_extractor import extract_candidates, extract_links
from .models import Candidate, CrawlMode, CrawlReport, CrawlRoot, CrawlState, FetchResult
from .normalizer import is_valid_url, normalize, same_url
from .scope import in_scope
from .visited import VisitedSet

__all__ = [
    "Candidate",
    "CrawlMode",
    "CrawlReport",
    "CrawlRoot",
    "CrawlState",
    "FetchResult",
    "VisitedSet",
    "extract_candidates",
    "extract_links",
    "in_scope",
    "is_valid_url",
    "normalize",
    "same_url",
]
