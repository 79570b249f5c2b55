# File: tests/conftest.py
import asyncio
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest

from wcraw.config import CrawlerConfig
from wcraw.crawler.models import CrawlRoot, FetchResult
from wcraw.errors import FetchFailure

ROOT = "http://www.example.com"


class FakeFetcher:
    """
    In-memory fetch capability.

    *pages* maps the requested URL to a body (or to an exception to raise);
    unknown URLs fail with a 404. Every call is recorded in :attr:`calls`.
    """

    def __init__(
        self,
        pages: Dict[str, Union[str, None, Exception]],
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        self.pages = pages
        self.delays = delays or {}
        self.calls: List[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)
        if url not in self.pages:
            raise FetchFailure(url, "Not Found", 404)
        body = self.pages[url]
        if isinstance(body, Exception):
            raise body
        return FetchResult(url=url, status=200, reason="OK", final_url=url, body=body)


def links(*urls: str) -> str:
    """HTML body linking to *urls*."""
    return "<html><body>" + "".join(f'<a href="{u}">{u}</a>' for u in urls) + "</body></html>"


@pytest.fixture()
def destination(tmp_path) -> Path:
    """
    Empty destination directory for fetched pages.
    """
    out = tmp_path / "pages"
    out.mkdir()
    return out


@pytest.fixture()
def make_config(destination):
    """
    Build a CrawlerConfig for the example.com root; keyword overrides win.
    """

    def _make(**overrides) -> CrawlerConfig:
        values = dict(
            root_url=ROOT,
            mode="-r",
            destination=destination,
            timeout=2.0,
            concurrency=1,
            retry_times=0,
        )
        values.update(overrides)
        return CrawlerConfig(**values)

    return _make


@pytest.fixture()
def root() -> CrawlRoot:
    return CrawlRoot.from_url(ROOT)
