"""
Configuration loading and validation for wcraw.

Pydantic describes the run settings; optional YAML or JSON files carry the
tuning options the four positional start tokens do not cover.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from wcraw import __version__
from wcraw.crawler.models import CrawlMode
from wcraw.crawler.normalizer import is_valid_url, normalize
from wcraw.errors import MalformedUrl

__all__ = ["CrawlerConfig", "TUNING_FIELDS", "load_config"]


class CrawlerConfig(BaseModel):
    """Settings for a single crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    root_url: str = Field(..., description="Seed URL as given on the command line.")
    mode: CrawlMode = Field(CrawlMode.RECURSIVE, description="Recursive or single-level crawl.")
    destination: Path = Field(..., description="Existing directory for fetched bodies.")
    timeout: float = Field(10.0, gt=0, description="Timeout for one request (seconds).")
    concurrency: int = Field(4, ge=1, description="Number of fetch workers.")
    max_depth: Optional[int] = Field(None, ge=0, description="Link depth limit; None means unlimited.")
    max_pages: int = Field(1000, ge=1, description="Hard limit on fetches per run.")
    retry_times: int = Field(2, ge=0, description="Retries on 5xx/429 and transport errors.")
    user_agent: str = Field(f"wcraw/{__version__}", min_length=1, description="User-Agent header.")
    scope_rule: Literal["segment", "legacy"] = Field("segment", description="Domain scope test.")
    queue_order: Literal["fifo", "lifo"] = Field("fifo", description="Breadth- or depth-first scheduling.")
    preserve_scheme: bool = Field(False, description="Request https links over https.")
    abort_in_flight: bool = Field(False, description="Cancel running fetches on cancellation.")

    @field_validator("root_url", mode="before")
    @classmethod
    def _check_root(cls, v: Any) -> Any:
        if not isinstance(v, str) or not is_valid_url(v):
            raise ValueError(f"not a valid absolute URL: {v!r}")
        try:
            normalize(v)
        except MalformedUrl as exc:
            raise ValueError(str(exc)) from exc
        return v.strip()

    @field_validator("mode", mode="before")
    @classmethod
    def _mode_from_token(cls, v: Any) -> Any:
        if isinstance(v, str) and v.startswith("-"):
            return CrawlMode.from_token(v)
        return v

    @field_validator("destination")
    @classmethod
    def _destination_exists(cls, v: Path) -> Path:
        v = v.expanduser()
        if not v.is_dir():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(v))
        return v


#: options a config file may set; the rest come from the start tokens
TUNING_FIELDS = frozenset(CrawlerConfig.model_fields) - {"root_url", "mode", "destination"}


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path]) -> dict[str, Any]:
    """
    Read tuning options from a YAML or JSON file.

    Raises FileNotFoundError for a missing file and ValueError for an
    unsupported format, a parse error or an unknown option.
    """
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    unknown = sorted(set(data) - TUNING_FIELDS)
    if unknown:
        raise ValueError(f"Unknown config options in {path_obj}: {', '.join(unknown)}")
    return data
