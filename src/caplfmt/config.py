"""Locating caplfmt.toml and resolving the effective FormatterConfig."""

import logging
import tomllib
from collections.abc import Callable, Iterator
from pathlib import Path

import typer
from capl_formatter.models import FormatterConfig
from pydantic import ValidationError

from .errors import ConfigError

CONFIG_FILE_NAME = "caplfmt.toml"

logger = logging.getLogger(__name__)


def ancestors(start: Path) -> Iterator[Path]:
    """Yield start and then each parent directory, ending at the filesystem root."""
    current = start
    while True:
        yield current
        parent = current.parent
        if parent == current:
            return
        current = parent


def find_config(
    start: Path | None = None, notify: Callable[[str], None] = typer.echo
) -> Path | None:
    """Return the nearest caplfmt.toml at or above start (default: the working directory).

    Filesystem errors while searching count as "not found".
    """
    try:
        origin = start if start is not None else Path.cwd()
        for directory in ancestors(origin):
            candidate = directory / CONFIG_FILE_NAME
            if candidate.is_file():
                notify(f"Discovered config at {candidate}")
                return candidate
    except OSError as e:
        logger.debug("Config discovery stopped: %s", e)
    return None


def load_settings(path: Path) -> FormatterConfig:
    """Deserialize a caplfmt.toml file. Keys missing from the file keep their defaults."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e.strerror or e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"malformed config file {path}: {e}") from e

    try:
        return FormatterConfig.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"invalid config file {path}: {problems}") from e


def resolve_settings(
    config_file: Path | None = None,
    *,
    max_width: int | None = None,
    tab_spaces: int | None = None,
    discover: Callable[[], Path | None] = find_config,
) -> FormatterConfig:
    """Merge CLI overrides > config file (explicit or discovered) > defaults."""
    path = config_file if config_file is not None else discover()
    settings = load_settings(path) if path is not None else FormatterConfig()

    overrides = {"max_width": max_width, "tab_spaces": tab_spaces}
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)

    logger.debug("Resolved settings from %s: %s", path or "defaults", settings)
    return settings
