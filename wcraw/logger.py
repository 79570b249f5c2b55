"""Logging setup for **wcraw**.

Crawl status lines (``Resolving...`` / ``Response...``) own stdout, so log
records go to stderr and, optionally, to a rotating log file::

    from wcraw.logger import logger
    logger.info("Crawl started: %s", root)

The CLI calls :func:`init_logging` with its ``--log-*`` options; library code
only ever uses the shared :data:`logger`.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "wcraw"

#: third-party loggers that follow the wcraw level instead of the root logger
_QUIETED: Final[tuple[str, ...]] = ("aiohttp.client", "aiohttp.internal")

_LevelT = Union[int, str]


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stderr`` is at emit time (it may be swapped)."""

    def __init__(self) -> None:
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


def _build_handlers(log_file: Union[str, Path, None], fmt: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [_StderrHandler()]
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8")
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: _LevelT = "WARNING",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """
    (Re)configure the ``wcraw`` logger and return it.

    With *replace_handlers* the previous handlers are detached and closed,
    which releases an earlier log file.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()
    for handler in _build_handlers(log_file, log_format):
        lg.addHandler(handler)
    lg.propagate = False

    for name in _QUIETED:
        logging.getLogger(name).setLevel(max(lg.level, logging.WARNING))
    return lg


def init_logging(
    level: _LevelT = "WARNING",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    return configure(level=level, log_file=log_file, log_format=log_format)


logger: logging.Logger = init_logging()

__all__ = ["DEFAULT_FORMAT", "logger", "configure", "init_logging"]
