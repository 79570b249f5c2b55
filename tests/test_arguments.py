import pytest

from wcraw.arguments import parse_start_arguments
from wcraw.crawler.models import CrawlMode
from wcraw.errors import (
    InvalidDestination,
    InvalidMode,
    InvalidStartCommand,
    InvalidUrl,
    StartupError,
)


def test_valid_arguments(destination):
    args = parse_start_arguments("wcraw", "-n", "https://example.com/blog", str(destination))
    assert args.mode is CrawlMode.SINGLE_LEVEL
    assert args.root_url == "https://example.com/blog"
    assert args.destination == destination


@pytest.mark.parametrize(
    "tokens,error,message",
    [
        (("crawl", "-r", "http://www.example.com"), InvalidStartCommand, "The command to start the program is not valid!"),
        (("wcraw", "-r", "www.example.com"), InvalidUrl, "The url is not valid!"),
        (("wcraw", "-r", "http://www.example.com:99999"), InvalidUrl, "The url is not valid!"),
        (("wcraw", "-x", "http://www.example.com"), InvalidMode, "The entered mode is not valid"),
    ],
)
def test_invalid_tokens(destination, tokens, error, message):
    with pytest.raises(error) as info:
        parse_start_arguments(*tokens, str(destination))
    assert str(info.value) == message
    assert isinstance(info.value, StartupError)


def test_missing_destination(tmp_path):
    with pytest.raises(InvalidDestination):
        parse_start_arguments("wcraw", "-r", "http://www.example.com", str(tmp_path / "missing"))


def test_checks_run_in_token_order(tmp_path):
    # every token is wrong: the start command is reported first
    with pytest.raises(InvalidStartCommand):
        parse_start_arguments("go", "-x", "nope", str(tmp_path / "missing"))
