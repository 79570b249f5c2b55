"""wcraw.utils: small filesystem helpers shared by the CLI and start-up checks."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, Union

from wcraw.logger import logger

__all__: Sequence[str] = ("resolve_directory",)


def resolve_directory(path: Union[str, Path]) -> Path:
    """Expand ``~``, check that *path* is an existing directory and return it."""
    p = Path(path).expanduser()
    if not p.is_dir():
        logger.debug("Directory not found: %s", p)
        raise NotADirectoryError(f"Directory not found: {p}")
    return p
