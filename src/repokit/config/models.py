"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, repokit.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, SecretStr

from repokit.security.password import DEFAULT_ITERATIONS


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    url: str = "sqlite+aiosqlite:///repokit.db"
    echo: bool = False


class IdsConfig(BaseModel):
    """[ids] section."""

    model_config = {"frozen": True}

    entropy: bool = True


class ErrorsConfig(BaseModel):
    """[errors] section: error descriptor catalog."""

    model_config = {"frozen": True}

    path: Path | None = None


class SecurityConfig(BaseModel):
    """[security] section."""

    model_config = {"frozen": True}

    pbkdf2_iterations: int = Field(default=DEFAULT_ITERATIONS, ge=1)


class JwtConfig(BaseModel):
    """[jwt] section: signing key and registered claims for issued tokens.

    Issuing or validating a token needs secret_key, issuer and audience set,
    usually through ``REPOKIT_JWT__SECRET_KEY`` rather than the TOML file.
    """

    model_config = {"frozen": True}

    secret_key: SecretStr | None = None
    issuer: str | None = None
    audience: str | None = None
    expiry_minutes: int = Field(default=60, ge=1)
    algorithm: str = "HS256"


class RepokitConfig(BaseModel):
    """Root config model matching repokit.toml structure."""

    model_config = {"frozen": True}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    ids: IdsConfig = Field(default_factory=IdsConfig)
    errors: ErrorsConfig = Field(default_factory=ErrorsConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    jwt: JwtConfig = Field(default_factory=JwtConfig)
