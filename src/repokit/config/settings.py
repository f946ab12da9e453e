"""RepokitSettings: one object merging CLI flags, env vars and ``repokit.toml``.

Precedence, highest first:

1. keyword arguments (the CLI passes its flags this way)
2. ``REPOKIT_*`` environment variables; nested sections use ``__``,
   e.g. ``REPOKIT_IDS__ENTROPY=false``
3. the discovered or explicit ``repokit.toml``
4. defaults baked into :mod:`repokit.config.models`
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from repokit.config.discovery import find_config, read_toml
from repokit.config.models import (
    DatabaseConfig,
    ErrorsConfig,
    IdsConfig,
    JwtConfig,
    SecurityConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by the parsed contents of one TOML file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = (
            read_toml(toml_path) if toml_path is not None and toml_path.is_file() else {}
        )

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


# Source construction happens inside pydantic, so the path travels per thread.
_pending = threading.local()


class RepokitSettings(BaseSettings):
    """Resolved settings for the CLI and for wiring stores and repositories.

    Attributes:
        config_path: TOML file the settings were read from, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "REPOKIT_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    ids: IdsConfig = Field(default_factory=IdsConfig)
    errors: ErrorsConfig = Field(default_factory=ErrorsConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    jwt: JwtConfig = Field(default_factory=JwtConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlSettingsSource(settings_cls, getattr(_pending, "toml_path", None))
        return init_settings, env_settings, toml

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **flags: Any,
    ) -> RepokitSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* that does not exist is ignored, leaving env
        vars and defaults in effect. Without one, ``repokit.toml`` is
        discovered from *start*.

        Raises:
            ConfigError: The TOML file is malformed.
        """
        if config_path:
            candidate = Path(config_path)
            toml_path = candidate if candidate.is_file() else None
        else:
            toml_path = find_config(start)

        _pending.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **flags)
        finally:
            del _pending.toml_path

    @property
    def errors_path(self) -> Path | None:
        """Catalog path; relative paths are taken from the config file's directory."""
        path = self.errors.path
        if path is None or path.is_absolute() or self.config_path is None:
            return path
        return self.config_path.parent / path
