import logging
import sys
from pathlib import Path

import typer
from capl_formatter.engine import format_file

from . import __version__
from .config import resolve_settings
from .errors import CaplFmtError
from .executor import BatchExecutor
from .expand import expand_input
from .reporter import ResultReporter

app = typer.Typer(
    help="CAPL Formatter - Format CAPL files in place", add_completion=False
)


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _version_callback(value: bool):
    if value:
        typer.echo(f"caplfmt {__version__}")
        raise typer.Exit()


@app.command()
def fmt(
    input_pattern: str = typer.Argument(..., help="A file, directory or glob"),
    max_width: int | None = typer.Option(
        None, "--max-width", "-m", min=1, help="Maximum width of each line"
    ),
    tab_spaces: int | None = typer.Option(
        None, "--tab-spaces", "-t", min=1, help="Number of spaces per indentation level"
    ),
    config_file: Path | None = typer.Option(
        None, "--config-file", "-c", help="Config file (skips caplfmt.toml discovery)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Format CAPL files in place"""
    _setup_logging(verbose)

    try:
        settings = resolve_settings(config_file, max_width=max_width, tab_spaces=tab_spaces)
        entries = expand_input(input_pattern)
    except CaplFmtError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)

    reporter = ResultReporter()
    summary = BatchExecutor(settings, engine=format_file).run(entries, reporter.report)
    reporter.summary(summary)


if __name__ == "__main__":
    app()
