"""
genfilter CLI

Command-line interface for classifying source files as generated or
hand-written.

Usage::

    genfilter check Form1.Designer.cs Program.cs   # Classify individual files
    genfilter scan ./src                           # Classify a whole tree
    genfilter scan ./src --only generated -f json  # Machine-readable output
"""

import json
import logging
import time
from dataclasses import replace
from pathlib import Path

import click

from genfilter.core.config import GenfilterConfig
from genfilter.exceptions import ConfigError, OperationCancelledError, SourceReadError
from genfilter.session import ClassificationSession


# ---------------------------------------------------------------------------
# Logging helpers
# ---------------------------------------------------------------------------

def _configure_logging(config: GenfilterConfig, verbose: bool) -> None:
    """Set up logging for the CLI session."""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level)
    logging.basicConfig(level=level, format=config.log_format)


def _load_config(workers: int | None = None) -> GenfilterConfig:
    """Build the config from the environment, failing with a clean message."""
    try:
        config = GenfilterConfig.from_env()
        if workers is not None:
            config = replace(config, max_workers=workers)
        config.validate()
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)
    return config


def _label(generated: bool) -> str:
    return "generated" if generated else "handwritten"


# ---------------------------------------------------------------------------
# Top-level group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(package_name="genfilter")
def cli():
    """genfilter — detect generated source code so analyzers can skip it."""


# ---------------------------------------------------------------------------
# genfilter check
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("files", nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False))
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def check(files: tuple, verbose: bool):
    """Classify each of FILES as generated or hand-written."""
    config = _load_config()
    _configure_logging(config, verbose)

    failed = False
    with ClassificationSession(config=config) as session:
        for name in files:
            try:
                generated = session.classify_path(name)
            except SourceReadError as exc:
                click.echo(f"Error: {exc}", err=True)
                failed = True
                continue
            click.echo(f"{_label(generated):<12} {name}")

    if failed:
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# genfilter scan
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("directory", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("-f", "--format", "fmt", type=click.Choice(["console", "json"]),
              default="console", help="Output format.")
@click.option("--only", type=click.Choice(["all", "generated", "handwritten"]),
              default="all", help="Which files to list.")
@click.option("-w", "--workers", type=int, default=None,
              help="Worker threads (default: $GENFILTER_MAX_WORKERS or 8).")
@click.option("--progress", is_flag=True, help="Show a progress bar.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def scan(directory: str, fmt: str, only: str, workers: int | None,
         progress: bool, verbose: bool):
    """Classify every source file under DIRECTORY."""
    config = _load_config(workers)
    _configure_logging(config, verbose)
    t0 = time.perf_counter()

    with ClassificationSession(config=config) as session:
        try:
            result = session.scan(Path(directory), show_progress=progress)
        except (KeyboardInterrupt, OperationCancelledError):
            session.cancel()
            click.echo("\nScan interrupted.", err=True)
            raise SystemExit(130)

    elapsed = time.perf_counter() - t0

    if fmt == "json":
        payload = result.to_dict()
        if only == "generated":
            payload.pop("handwritten")
        elif only == "handwritten":
            payload.pop("generated")
        click.echo(json.dumps(payload, indent=2))
        return

    rows = []
    if only in ("all", "generated"):
        rows.extend((path, True) for path in result.generated)
    if only in ("all", "handwritten"):
        rows.extend((path, False) for path in result.handwritten)
    for path, generated in sorted(rows):
        click.echo(f"{_label(generated):<12} {path}")

    line = "─" * 50
    click.echo(line)
    click.echo(f"  Files scanned      {result.files_scanned:>7,}")
    click.echo(f"  Generated          {len(result.generated):>7,}")
    click.echo(f"  Hand-written       {len(result.handwritten):>7,}")
    if result.errors:
        click.echo(f"  Errors             {result.errors:>7,}")
    click.echo(f"  Completed in {elapsed:.3f} seconds")
    click.echo(line)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
