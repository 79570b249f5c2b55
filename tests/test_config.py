import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from wcraw.config import CrawlerConfig, load_config
from wcraw.crawler.models import CrawlMode


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("concurrency: 8\nmax_pages: 50", ".yaml", None),
        (json.dumps({"concurrency": 8, "max_pages": 50}), ".json", None),
        ("not: a: mapping", ".yml", ValueError),
        ("- a\n- b", ".yaml", TypeError),
        ("{broken json", ".json", ValueError),
        ("concurrency = 8", ".toml", ValueError),
        ("root_url: http://www.example.com", ".yaml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        assert load_config(cfg_path) == {"concurrency": 8, "max_pages": 50}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_empty_yaml_is_empty_mapping(tmp_path):
    assert load_config(write_file(tmp_path, "", ".yaml")) == {}


def test_defaults(destination):
    cfg = CrawlerConfig(root_url="https://example.com/blog", destination=destination)
    assert cfg.root_url == "https://example.com/blog"
    assert cfg.mode is CrawlMode.RECURSIVE
    assert cfg.timeout == 10.0
    assert cfg.max_pages == 1000
    assert cfg.max_depth is None
    assert cfg.scope_rule == "segment"
    assert cfg.queue_order == "fifo"
    assert cfg.preserve_scheme is False


@pytest.mark.parametrize(
    "value,mode",
    [("-r", CrawlMode.RECURSIVE), ("-n", CrawlMode.SINGLE_LEVEL), ("single-level", CrawlMode.SINGLE_LEVEL)],
)
def test_mode_tokens(destination, value, mode):
    cfg = CrawlerConfig(root_url="http://www.example.com", mode=value, destination=destination)
    assert cfg.mode is mode


@pytest.mark.parametrize(
    "overrides",
    [
        {"root_url": "example.com"},
        {"root_url": "http://www.example.com:99999/x"},
        {"mode": "-x"},
        {"concurrency": 0},
        {"timeout": 0},
        {"scope_rule": "fuzzy"},
        {"unknown": True},
    ],
)
def test_invalid_values(destination, overrides):
    values = {"root_url": "http://www.example.com", "destination": destination, **overrides}
    with pytest.raises(ValidationError):
        CrawlerConfig(**values)


def test_destination_must_exist(tmp_path):
    with pytest.raises(FileNotFoundError):
        CrawlerConfig(root_url="http://www.example.com", destination=tmp_path / "missing")


def test_config_is_frozen(make_config):
    cfg = make_config()
    with pytest.raises(ValidationError):
        cfg.concurrency = 3
