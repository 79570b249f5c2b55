"""
Data models for the wcraw crawler.
"""
from __future__ import annotations

import enum
import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from wcraw.crawler.normalizer import normalize, split_url


class CrawlMode(str, enum.Enum):
    """How far a run follows the links found on the root page."""

    RECURSIVE = "recursive"
    SINGLE_LEVEL = "single-level"

    @classmethod
    def from_token(cls, token: str) -> CrawlMode:
        """Map the command-line token (``-r`` / ``-n``) to a mode."""
        try:
            return _MODE_TOKENS[token]
        except KeyError:
            raise ValueError(f"unknown mode token {token!r}") from None


_MODE_TOKENS: Dict[str, CrawlMode] = {"-r": CrawlMode.RECURSIVE, "-n": CrawlMode.SINGLE_LEVEL}


class CrawlState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CrawlRoot:
    """Parsed form of the canonical seed URL; fixed for the whole run."""

    url: str
    scheme: str
    host: str
    netloc: str
    path: str

    @classmethod
    def from_url(cls, url: str) -> CrawlRoot:
        canonical = normalize(url)
        parts = split_url(canonical)
        return cls(
            url=canonical,
            scheme=parts.scheme,
            host=parts.hostname or "",
            netloc=parts.netloc,
            path=parts.path.rstrip("/"),
        )


@dataclass(slots=True)
class Candidate:
    """An extracted link: dedup key plus the URL that should be requested."""

    canonical: str
    fetch_url: str


@dataclass(slots=True)
class FetchResult:
    """Outcome of a successful GET."""

    url: str
    status: int
    reason: str
    final_url: str
    body: Optional[str] = None


@dataclass(slots=True)
class PageRecord:
    url: str
    final_url: str
    status: int
    reason: str
    depth: int
    artifact: Optional[str] = None


@dataclass(slots=True)
class FailureRecord:
    url: str
    kind: str
    message: str
    status: Optional[int] = None


@dataclass(slots=True)
class CrawlReport:
    """Summary of one run: fetched pages, discoveries and recovered failures."""

    root: str
    mode: CrawlMode
    state: CrawlState = CrawlState.IDLE
    partial: bool = False
    pages: List[PageRecord] = field(default_factory=list)
    discovered: List[str] = field(default_factory=list)
    failures: List[FailureRecord] = field(default_factory=list)

    @property
    def fetch_count(self) -> int:
        return len(self.pages) + sum(1 for f in self.failures if f.kind == "fetch")

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        data["state"] = self.state.value
        return data

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the report."""
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


__all__ = [
    "CrawlMode",
    "CrawlState",
    "CrawlRoot",
    "Candidate",
    "FetchResult",
    "PageRecord",
    "FailureRecord",
    "CrawlReport",
]
