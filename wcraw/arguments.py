"""wcraw.arguments: validation of the four positional start tokens."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from wcraw.crawler.models import CrawlMode
from wcraw.crawler.normalizer import is_valid_url, normalize
from wcraw.errors import (
    InvalidDestination,
    InvalidMode,
    InvalidStartCommand,
    InvalidUrl,
    MalformedUrl,
)
from wcraw.utils import resolve_directory

START_COMMAND = "wcraw"

__all__ = ["START_COMMAND", "StartArguments", "parse_start_arguments"]


@dataclass(frozen=True, slots=True)
class StartArguments:
    start_command: str
    mode: CrawlMode
    root_url: str
    destination: Path


def parse_start_arguments(start_command: str, mode: str, root_url: str, destination: str) -> StartArguments:
    """
    Check the tokens in command-line order and return them typed.

    Raises the matching :class:`~wcraw.errors.StartupError` subclass on the
    first invalid token; nothing touches the network before this passes.
    """
    if start_command != START_COMMAND:
        raise InvalidStartCommand()
    if not is_valid_url(root_url):
        raise InvalidUrl()
    try:
        normalize(root_url)
    except MalformedUrl as exc:
        raise InvalidUrl() from exc
    try:
        crawl_mode = CrawlMode.from_token(mode)
    except ValueError as exc:
        raise InvalidMode() from exc
    try:
        directory = resolve_directory(destination)
    except NotADirectoryError as exc:
        raise InvalidDestination() from exc
    return StartArguments(start_command, crawl_mode, root_url.strip(), directory)
