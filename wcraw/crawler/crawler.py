from __future__ import annotations

import asyncio
import signal
import time
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Set, Tuple

from aiohttp import ClientSession

from wcraw.config import CrawlerConfig
from wcraw.console import print_failure, print_response
from wcraw.crawler.fetcher import Fetcher, HttpFetcher
from wcraw.crawler.link_extractor import extract_candidates
from wcraw.crawler.models import (
    Candidate,
    CrawlMode,
    CrawlReport,
    CrawlRoot,
    CrawlState,
    FailureRecord,
    FetchResult,
    PageRecord,
)
from wcraw.crawler.normalizer import is_valid_url
from wcraw.crawler.visited import VisitedSet
from wcraw.errors import FetchFailure, InvalidDestination, InvalidUrl, StorageWriteFailure
from wcraw.logger import logger
from wcraw.storage import ArtifactStore

__all__ = ("CrawlOrchestrator", "Storage")

_WorkItem = Tuple[Candidate, int]


class Storage(Protocol):
    def save(self, final_url: str, body: Optional[str]) -> Path: ...


class CrawlOrchestrator:
    """
    Drives fetch → extract → filter → schedule for one crawl root.

    A fixed pool of worker tasks pulls from a work queue; the visited set
    guarantees every canonical URL is fetched at most once per run. Failures
    of single fetches or writes are logged and recorded on the report, they
    never abort the run.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        fetcher: Optional[Fetcher] = None,
        store: Optional[Storage] = None,
        on_response: Callable[[FetchResult], None] = print_response,
        on_failure: Callable[[FetchFailure], None] = print_failure,
    ) -> None:
        self.config = config
        self.root = CrawlRoot.from_url(config.root_url)
        self.fetcher = fetcher
        self.store: Storage = store or ArtifactStore(config.destination)
        self.on_response = on_response
        self.on_failure = on_failure
        self.state = CrawlState.IDLE
        self.visited: Optional[VisitedSet] = None
        self.session: Optional[ClientSession] = None
        self._cancelled = asyncio.Event()
        self._in_flight: Set[asyncio.Task] = set()
        self._signals: List[signal.Signals] = []
        self._fetches = 0
        self._enqueued = 0

    async def __aenter__(self) -> CrawlOrchestrator:
        if self.fetcher is None:
            self.session = HttpFetcher.open_session(self.config)
            self.fetcher = HttpFetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.remove_signal_handlers()
        if self.session and not self.session.closed:
            await self.session.close()

    # ------------------------------------------------------------------ #
    # Cancellation                                                       #
    # ------------------------------------------------------------------ #

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Stop issuing fetches; the run then finishes as a partial crawl."""
        if self._cancelled.is_set():
            return
        logger.info("Cancellation requested, %d fetch(es) in flight", len(self._in_flight))
        self._cancelled.set()
        if self.config.abort_in_flight:
            for task in list(self._in_flight):
                task.cancel()

    def install_signal_handlers(self) -> None:
        """Route SIGINT/SIGTERM to :meth:`cancel` (no-op where unsupported)."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.cancel)
            except (NotImplementedError, RuntimeError, ValueError):
                logger.debug("Signal handler for %s not supported here", sig.name)
                continue
            self._signals.append(sig)

    def remove_signal_handlers(self) -> None:
        if not self._signals:
            return
        loop = asyncio.get_running_loop()
        for sig in self._signals:
            loop.remove_signal_handler(sig)
        self._signals.clear()

    # ------------------------------------------------------------------ #
    # Run                                                                #
    # ------------------------------------------------------------------ #

    async def run(self) -> CrawlReport:
        report = CrawlReport(root=self.root.url, mode=self.config.mode)
        try:
            self._validate()
        except (InvalidUrl, InvalidDestination) as exc:
            self.state = report.state = CrawlState.FAILED
            logger.error("Crawl of %s aborted: %s", self.config.root_url, exc)
            raise
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized; use 'async with CrawlOrchestrator(...)'")

        self.state = report.state = CrawlState.RUNNING
        logger.info("Crawl started: %s (%s)", self.root.url, self.config.mode.value)
        start = time.monotonic()
        self._fetches = 0
        visited = VisitedSet([self.root.url])
        self.visited = visited
        # at most max_pages items are ever enqueued per run, see _schedule
        queue_cls = asyncio.LifoQueue if self.config.queue_order == "lifo" else asyncio.Queue
        queue: asyncio.Queue[_WorkItem] = queue_cls(maxsize=self.config.max_pages)
        root_fetch_url = self.config.root_url if self.config.preserve_scheme else self.root.url
        queue.put_nowait((Candidate(self.root.url, root_fetch_url), 0))
        self._enqueued = 1
        workers = [
            asyncio.create_task(self._worker(queue, visited, report))
            for _ in range(self.config.concurrency)
        ]
        try:
            await queue.join()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            visited.clear()

        report.partial = self.cancelled
        self.state = report.state = CrawlState.DONE
        duration = time.monotonic() - start
        logger.info(
            "Crawl finished%s: %d page(s), %d discovered, %d failure(s) in %.2f s",
            " (partial)" if report.partial else "",
            len(report.pages), len(report.discovered), len(report.failures), duration,
        )
        return report

    def _validate(self) -> None:
        if not is_valid_url(self.config.root_url):
            raise InvalidUrl()
        if not Path(self.config.destination).is_dir():
            raise InvalidDestination()

    async def _worker(self, queue: asyncio.Queue[_WorkItem], visited: VisitedSet, report: CrawlReport) -> None:
        while True:
            try:
                candidate, depth = await queue.get()
                try:
                    await self._process(candidate, depth, queue, visited, report)
                except Exception as exc:
                    logger.exception("Unexpected error while crawling %s", candidate.fetch_url)
                    report.failures.append(FailureRecord(candidate.fetch_url, "internal", str(exc)))
                finally:
                    queue.task_done()
            except asyncio.CancelledError:
                break

    async def _process(
        self,
        candidate: Candidate,
        depth: int,
        queue: asyncio.Queue[_WorkItem],
        visited: VisitedSet,
        report: CrawlReport,
    ) -> None:
        url = candidate.fetch_url
        if self.cancelled:
            logger.debug("Skipping %s: run cancelled", url)
            return
        if self._fetches >= self.config.max_pages:
            logger.debug("Skipping %s: page limit %d reached", url, self.config.max_pages)
            return
        self._fetches += 1

        result = await self._fetch(url, report)
        if result is None:
            return
        self.on_response(result)
        artifact = self._persist(result, report)
        report.pages.append(
            PageRecord(
                url=url,
                final_url=result.final_url,
                status=result.status,
                reason=result.reason,
                depth=depth,
                artifact=str(artifact) if artifact else None,
            )
        )

        max_depth = self.config.max_depth
        follow = self.config.mode is CrawlMode.RECURSIVE and (max_depth is None or depth < max_depth)
        candidates = extract_candidates(
            result.body, self.root, self.config.scope_rule, self.config.preserve_scheme
        )
        self._schedule(candidates, depth + 1 if follow else None, queue, visited, report)

    async def _fetch(self, url: str, report: CrawlReport) -> Optional[FetchResult]:
        assert self.fetcher is not None
        task = asyncio.ensure_future(self.fetcher.fetch(url))
        self._in_flight.add(task)
        try:
            return await task
        except FetchFailure as exc:
            logger.warning("Fetch failed: %s", exc)
            self.on_failure(exc)
            report.failures.append(FailureRecord(url, "fetch", exc.reason, exc.status))
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if not task.cancelled() or (current is not None and current.cancelling()):
                raise
            logger.info("Aborted in-flight fetch of %s", url)
            report.failures.append(FailureRecord(url, "cancelled", "fetch aborted by cancellation"))
        finally:
            self._in_flight.discard(task)
        return None

    def _persist(self, result: FetchResult, report: CrawlReport) -> Optional[Path]:
        try:
            return self.store.save(result.final_url, result.body)
        except StorageWriteFailure as exc:
            logger.warning("Could not persist %s: %s", result.final_url, exc)
            report.failures.append(FailureRecord(result.final_url, "storage", str(exc)))
            return None

    def _schedule(
        self,
        candidates: List[Candidate],
        next_depth: Optional[int],
        queue: asyncio.Queue[_WorkItem],
        visited: VisitedSet,
        report: CrawlReport,
    ) -> None:
        """
        Record first sightings; enqueue them when *next_depth* is given.

        No more than ``max_pages`` items are enqueued over a run, which keeps
        the queue within its ``maxsize``. Sightings past that bound are only
        recorded.
        """
        accepted = [c for c in candidates if visited.test_and_insert(c.canonical)]
        report.discovered.extend(c.canonical for c in accepted)
        if next_depth is None:
            return
        room = self.config.max_pages - self._enqueued
        if len(accepted) > room:
            logger.debug("Page limit %d: not scheduling %d URL(s)", self.config.max_pages, len(accepted) - room)
            accepted = accepted[:room]
        self._enqueued += len(accepted)
        if isinstance(queue, asyncio.LifoQueue):
            # first match is popped first
            accepted.reverse()
        for candidate in accepted:
            queue.put_nowait((candidate, next_depth))
