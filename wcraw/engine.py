# File: wcraw/engine.py
"""wcraw.engine: entry point that runs one crawl for the CLI and tests."""

from __future__ import annotations

from wcraw.config import CrawlerConfig
from wcraw.crawler.crawler import CrawlOrchestrator
from wcraw.crawler.models import CrawlReport

__all__ = ["start_crawl"]


async def start_crawl(cfg: CrawlerConfig, *, handle_signals: bool = False) -> CrawlReport:
    """
    Run the orchestrator inside its session context and return the report.

    Parameters
    ----------
    cfg : CrawlerConfig
        Validated run configuration.
    handle_signals : bool
        Turn SIGINT/SIGTERM into a graceful cancellation (partial run).
    """
    async with CrawlOrchestrator(cfg) as crawler:
        if handle_signals:
            crawler.install_signal_handlers()
        return await crawler.run()
