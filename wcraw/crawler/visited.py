"""Per-run set of canonical URLs that have already been scheduled."""

from __future__ import annotations

import threading
from typing import Iterable, Set

from wcraw.logger import logger


class VisitedSet:
    """Thread-safe visited set; the single point of mutual exclusion of a run."""

    def __init__(self, initial: Iterable[str] = ()) -> None:
        self._seen: Set[str] = set(initial)
        self._lock = threading.Lock()

    def test_and_insert(self, url: str) -> bool:
        """
        Add *url* if new. Returns True if added, False if already present.

        Check and insert happen under one lock, so concurrent callers never
        both see True for the same URL.
        """
        with self._lock:
            if url in self._seen:
                return False
            self._seen.add(url)
        logger.debug("Scheduled new URL: %s", url)
        return True

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)

    def snapshot(self) -> Set[str]:
        with self._lock:
            return set(self._seen)

    def clear(self) -> None:
        with self._lock:
            self._seen.clear()


__all__ = ["VisitedSet"]
