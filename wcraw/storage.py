"""
Persistence of fetched bodies in the destination directory.

Files are keyed by host and last path segment, not by content: a page
fetched twice under the same key within a run overwrites the earlier file.
"""
from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import Final, Optional, Union
from urllib.parse import unquote, urlsplit

from wcraw.errors import StorageWriteFailure
from wcraw.logger import logger

__all__ = ["ArtifactStore", "EMPTY_BODY_PLACEHOLDER", "artifact_name"]

EMPTY_BODY_PLACEHOLDER: Final[str] = "No content found in this url!!"
INDEX_MARKER: Final[str] = "index"
DEFAULT_EXTENSION: Final[str] = ".html"

_ILLEGAL_CHARS_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def artifact_name(final_url: str) -> str:
    """
    File name for a body fetched from *final_url*.

    >>> artifact_name("http://www.example.com/a/b/c.html")
    'www.example.com-c.html'
    >>> artifact_name("http://www.example.com/a/b")
    'www.example.com-b.html'
    """
    parts = urlsplit(final_url)
    segment = unquote(PurePosixPath(parts.path).name) if parts.path.strip("/") else ""
    segment = segment or INDEX_MARKER
    name = f"{parts.netloc.lower()}-{segment}"
    if not PurePosixPath(segment).suffix:
        name += DEFAULT_EXTENSION
    return _ILLEGAL_CHARS_RE.sub("_", name)


class ArtifactStore:
    """Writes response bodies into *destination*."""

    def __init__(self, destination: Union[str, Path], encoding: str = "utf-8") -> None:
        self.destination = Path(destination)
        self.encoding = encoding

    def path_for(self, final_url: str) -> Path:
        return self.destination / artifact_name(final_url)

    def save(self, final_url: str, body: Optional[str]) -> Path:
        """Write *body* (or the placeholder when empty) and return the file path."""
        target = self.path_for(final_url)
        payload = (body or EMPTY_BODY_PLACEHOLDER).encode(self.encoding, errors="replace")
        try:
            target.write_bytes(payload)
        except OSError as exc:
            raise StorageWriteFailure(target, exc.strerror or str(exc)) from exc
        logger.debug("Saved %d bytes from %s to %s", len(payload), final_url, target)
        return target
