"""wcraw.errors: exception taxonomy shared by the CLI and the crawl core."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

__all__ = [
    "WcrawError",
    "StartupError",
    "InvalidStartCommand",
    "InvalidUrl",
    "InvalidMode",
    "InvalidDestination",
    "MalformedUrl",
    "FetchFailure",
    "StorageWriteFailure",
]


class WcrawError(Exception):
    """Base class for every error raised by wcraw."""


class StartupError(WcrawError):
    """Input validation failure; fatal to the run, raised before any fetch."""

    message = "Invalid start arguments"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)


class InvalidStartCommand(StartupError):
    message = "The command to start the program is not valid!"


class InvalidUrl(StartupError):
    message = "The url is not valid!"


class InvalidMode(StartupError):
    message = "The entered mode is not valid"


class InvalidDestination(StartupError):
    message = "The entered destination url is not valid"


class MalformedUrl(WcrawError, ValueError):
    """The string cannot be parsed as an absolute URI."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        text = f"Malformed URL {url!r}"
        super().__init__(f"{text}: {reason}" if reason else text)


class FetchFailure(WcrawError):
    """Timeout, transport error or non-success status for a single fetch."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"Failed {url}: {reason}")


class StorageWriteFailure(WcrawError):
    """A fetched body could not be written to the destination directory."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot write {self.path}: {reason}")
