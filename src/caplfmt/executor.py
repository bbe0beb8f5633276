"""Concurrent in-place formatting of candidate files."""

import logging
import os
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from capl_formatter.engine import format_file
from capl_formatter.errors import FormatError
from capl_formatter.models import FormatterConfig

from .expand import Entry, ExpansionError

logger = logging.getLogger(__name__)

Engine = Callable[[Path, FormatterConfig], str]


@dataclass(frozen=True)
class Success:
    path: Path


@dataclass(frozen=True)
class Failure:
    path: Path
    message: str


TaskOutcome = Success | Failure


@dataclass(frozen=True)
class BatchSummary:
    total: int
    succeeded: int
    failed: int
    elapsed_ms: int


class BatchExecutor:
    """Formats candidate files on a thread pool, one independent task per file.

    Every task ends in exactly one outcome. An engine error, an unexpected
    exception raised by the engine, or a failed write only fails that file.
    """

    def __init__(
        self,
        settings: FormatterConfig,
        engine: Engine = format_file,
        max_workers: int | None = None,
    ):
        self.settings = settings
        self.engine = engine
        self.max_workers = max_workers or os.cpu_count() or 1

    def run(self, entries: Sequence[Entry], on_outcome: Callable[[TaskOutcome], None]) -> BatchSummary:
        """Run every task, handing outcomes to on_outcome in completion order."""
        succeeded = failed = 0
        logger.debug("Formatting %d file(s) with %d worker(s)", len(entries), self.max_workers)

        start = time.perf_counter()
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="caplfmt") as pool:
            futures = [pool.submit(self.run_task, entry) for entry in entries]
            for future in as_completed(futures):
                outcome = future.result()
                if isinstance(outcome, Success):
                    succeeded += 1
                else:
                    failed += 1
                on_outcome(outcome)
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        return BatchSummary(total=len(entries), succeeded=succeeded, failed=failed, elapsed_ms=elapsed_ms)

    def run_task(self, entry: Entry) -> TaskOutcome:
        """Format and rewrite a single file, converting every failure into a Failure."""
        if isinstance(entry, ExpansionError):
            return Failure(entry.path, entry.message)

        path = entry
        try:
            formatted = self.engine(path, self.settings)
        except (FormatError, OSError) as e:
            return Failure(path, str(e))
        except KeyboardInterrupt:
            raise
        except BaseException as e:
            # SystemExit from an engine only ends its own task
            logger.debug("Formatter crashed on %s", path, exc_info=True)
            return Failure(path, f"formatter crashed: {type(e).__name__}: {e}")

        try:
            path.write_text(formatted, encoding="utf-8")
        except OSError as e:
            return Failure(path, f"failed to write file: {e}")
        return Success(path)
