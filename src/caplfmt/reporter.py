from collections.abc import Callable

import typer

from .executor import BatchSummary, Success, TaskOutcome


class ResultReporter:
    """Prints one status line per file and the batch summary."""

    def __init__(self, echo: Callable[..., None] = typer.echo):
        self.echo = echo

    def report(self, outcome: TaskOutcome) -> None:
        if isinstance(outcome, Success):
            self.echo(f"✅ {outcome.path}")
            return

        self.echo(f"❌ {outcome.path}")
        self.echo(f"\t\t{outcome.message}", err=True)

    def summary(self, batch: BatchSummary) -> None:
        self.echo(f"Formatted {batch.total} files in {batch.elapsed_ms} ms")
