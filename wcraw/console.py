"""wcraw.console: status lines printed while a crawl runs."""

from __future__ import annotations

import click

from wcraw.crawler.models import FetchResult
from wcraw.errors import FetchFailure

__all__ = ["print_response", "print_failure"]


def print_response(result: FetchResult) -> None:
    click.echo()
    click.echo(f"Resolving... {result.final_url}")
    click.echo(f"Response... {result.status} {result.reason}")
    click.echo()


def print_failure(failure: FetchFailure) -> None:
    """Failed fetches go to stderr in red so they stand out from the status lines."""
    if failure.status is not None:
        click.echo()
        click.echo(f"Resolving... {failure.url}")
        click.echo(f"Response... {failure.status} {failure.reason}")
    click.secho(str(failure), fg="red", err=True)
