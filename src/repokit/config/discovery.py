"""Locating and reading ``repokit.toml``.

Lookup order: the ``REPOKIT_CONFIG`` env var (exact file, no fallback), then
the nearest ``repokit.toml`` in the start directory or any of its parents.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from repokit.config.models import RepokitConfig

CONFIG_FILENAME = "repokit.toml"
CONFIG_ENV_VAR = "REPOKIT_CONFIG"


class ConfigError(ValueError):
    """A config file exists but is not valid TOML or fails validation."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Invalid config {path}: {reason}")


def candidate_paths(start: Path | None = None) -> Iterator[Path]:
    """Yield ``repokit.toml`` locations from *start* up to the filesystem root."""
    directory = (start or Path.cwd()).resolve()
    yield directory / CONFIG_FILENAME
    for parent in directory.parents:
        yield parent / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """Path of the config file in effect, or None when there is none."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None
    return next((path for path in candidate_paths(start) if path.is_file()), None)


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML.

    Raises:
        ConfigError: The file is not valid TOML.
    """
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(path, str(exc)) from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> RepokitConfig:
    """Validated config from *path*, or from the file discovered from *cwd*.

    Missing files yield the code defaults.
    """
    target = path if path is not None else find_config(cwd)
    if target is None:
        return RepokitConfig()
    try:
        return RepokitConfig.model_validate(read_toml(target))
    except ValidationError as exc:
        raise ConfigError(target, str(exc)) from exc
