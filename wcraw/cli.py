#!/usr/bin/env python3
"""
Command-line entry point for the wcraw crawler.

Usage:
  crawlerapp wcraw MODE ROOT_URL DESTINATION [OPTIONS]

Positional tokens:
  wcraw               Start command, must be the literal "wcraw"
  MODE                -r  recursive crawl, -n  single level (root page only)
  ROOT_URL            Absolute http/https/ftp URL of the seed page
  DESTINATION         Existing directory for the fetched pages

Options:
  --config PATH       YAML/JSON file with tuning options
  --concurrency INT   Number of fetch workers
  --timeout SEC       Timeout for a single request
  --max-depth INT     Link depth limit (recursive mode)
  --max-pages INT     Hard limit on fetches
  --scope-rule RULE   segment (default) or legacy domain scope test
  --queue-order ORD   fifo (breadth-first) or lifo (depth-first)
  --[no-]preserve-scheme  Request https links over https
  --[no-]abort-in-flight  Cancel running fetches on Ctrl+C
  --json PATH         Save the run report as JSON
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --version, -v       Show the wcraw version

Example:
  crawlerapp wcraw -r https://example.com/blog ./pages --max-pages 200
"""
import asyncio
import sys
from pathlib import Path

import click
from click.core import ParameterSource

from wcraw import __version__
from wcraw.arguments import parse_start_arguments
from wcraw.config import CrawlerConfig, load_config
from wcraw.engine import start_crawl
from wcraw.errors import StartupError
from wcraw.logger import DEFAULT_FORMAT, init_logging
from wcraw.report import render_json

# mode tokens (-r / -n) look like options; keep them as positional arguments
CONTEXT_SETTINGS = dict(help_option_names=["--help"], ignore_unknown_options=True)


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='wcraw, version %(version)s')
@click.argument('start_command')
@click.argument('mode')
@click.argument('root_url')
@click.argument('destination')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='YAML/JSON file with tuning options.'
)
@click.option('--concurrency', type=click.IntRange(min=1), default=None, help='Number of fetch workers.')
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Timeout for a single request (seconds).')
@click.option('--max-depth', 'max_depth', type=click.IntRange(min=0), default=None,
              help='Link depth limit in recursive mode.')
@click.option('--max-pages', 'max_pages', type=click.IntRange(min=1), default=None,
              help='Hard limit on fetches per run.')
@click.option('--scope-rule', 'scope_rule', type=click.Choice(['segment', 'legacy']), default=None,
              help='Domain scope test.')
@click.option('--queue-order', 'queue_order', type=click.Choice(['fifo', 'lifo']), default=None,
              help='Breadth-first (fifo) or depth-first (lifo) scheduling.')
@click.option('--preserve-scheme/--no-preserve-scheme', 'preserve_scheme', default=False,
              help='Request https links over https (dedup still ignores the scheme).')
@click.option('--abort-in-flight/--no-abort-in-flight', 'abort_in_flight', default=False,
              help='Cancel running fetches on Ctrl+C instead of letting them finish.')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the run report as JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level.'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file path (stderr only when omitted).'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Log format string.'
)
def main(start_command, mode, root_url, destination, config_path, json_output,
         log_level, log_file, log_format, **overrides):
    """Crawl ROOT_URL and save its in-scope pages into DESTINATION."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        args = parse_start_arguments(start_command, mode, root_url, destination)
    except StartupError as e:
        print_error(str(e))

    options = {}
    if config_path is not None:
        try:
            options.update(load_config(config_path))
        except (OSError, ValueError, TypeError) as e:
            print_error(f'Error loading configuration: {e}')
    # only options given on the command line override the config file
    ctx = click.get_current_context()
    options.update({
        k: v for k, v in overrides.items()
        if v is not None and ctx.get_parameter_source(k) is not ParameterSource.DEFAULT
    })

    try:
        cfg = CrawlerConfig(root_url=args.root_url, mode=args.mode, destination=args.destination, **options)
    except (OSError, ValueError) as e:
        print_error(f'Invalid configuration: {e}')

    try:
        report = asyncio.run(start_crawl(cfg, handle_signals=True))
    except StartupError as e:
        print_error(str(e))

    click.echo(
        f'{"Partial crawl" if report.partial else "Crawl finished"}: '
        f'{len(report.pages)} page(s) saved, {len(report.discovered)} URL(s) discovered, '
        f'{len(report.failures)} failure(s), {report.fetch_count} request(s)'
    )

    if json_output:
        try:
            saved_json = render_json(report, json_output)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Error saving JSON report: {e}')


# expose these names at module level for test monkey-patching
main.start_crawl = start_crawl
main.render_json = render_json

if __name__ == "__main__":
    main()
