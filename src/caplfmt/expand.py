"""Turning the input argument into the list of files to format."""

import glob
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from .errors import PatternError

SOURCE_EXTENSIONS = (".can", ".cin")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpansionError:
    """A path the pattern matched but that cannot be formatted."""

    path: Path
    message: str


Entry = Path | ExpansionError


def build_patterns(input_pattern: str) -> list[str]:
    """A directory means every CAPL source below it; anything else is a glob."""
    if os.path.isdir(input_pattern):
        base = glob.escape(input_pattern.rstrip("/\\") or input_pattern)
        patterns = [os.path.join(base, "**", f"*{ext}") for ext in SOURCE_EXTENSIONS]
        logger.debug("Expanded directory %s to %s", input_pattern, patterns)
        return patterns
    return [input_pattern]


def validate_pattern(pattern: str) -> None:
    """Raise PatternError for glob syntax that cannot be matched."""
    for component in re.split(r"[\\/]", pattern):
        if "**" in component and component != "**":
            raise PatternError(
                f"invalid glob pattern {pattern!r}: "
                "recursive wildcards must form a single path component"
            )

    i = 0
    while i < len(pattern):
        if pattern[i] != "[":
            i += 1
            continue
        # "!" negates and a leading "]" is a literal member of the class
        j = i + 1
        if pattern[j : j + 1] == "!":
            j += 1
        if pattern[j : j + 1] == "]":
            j += 1
        end = pattern.find("]", j)
        if end == -1:
            raise PatternError(f"invalid glob pattern {pattern!r}: unclosed character class")
        i = end + 1


def expand_input(input_pattern: str) -> list[Entry]:
    """Resolve a file, directory or glob to candidate files, sorted by path.

    Matches that are not readable come back as ExpansionError entries so the
    rest of the batch can still run. No match at all is not an error.
    """
    patterns = build_patterns(input_pattern)
    for pattern in patterns:
        validate_pattern(pattern)

    matches: set[Path] = set()
    for pattern in patterns:
        for match in glob.iglob(pattern, recursive=True, include_hidden=True):
            path = Path(match)
            if path.is_file():
                matches.add(path)

    entries: list[Entry] = []
    for path in sorted(matches):
        if os.access(path, os.R_OK):
            entries.append(path)
        else:
            entries.append(ExpansionError(path, "Permission denied"))

    logger.debug("%d candidate file(s) for %r", len(entries), input_pattern)
    return entries
