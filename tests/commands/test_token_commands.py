"""Tests for the `token` command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from repokit.cli import cli


@pytest.fixture
def jwt_config(_isolated_cwd: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = _isolated_cwd / "repokit.toml"
    path.write_text('[jwt]\nissuer = "repokit"\naudience = "clients"\n', encoding="utf-8")
    monkeypatch.setenv("REPOKIT_JWT__SECRET_KEY", "a-signing-key-of-at-least-thirty-two-bytes")
    return path


@pytest.mark.usefixtures("jwt_config")
class TestTokenCommands:
    def _create(self, cli_runner: CliRunner) -> str:
        result = cli_runner.invoke(
            cli, ["--json", "token", "create", "42", "--email", "a@b.io", "--role", "admin"]
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["data"]["token_type"] == "Bearer"
        return payload["data"]["access_token"]

    def test_create_then_validate(self, cli_runner: CliRunner) -> None:
        token = self._create(cli_runner)
        result = cli_runner.invoke(cli, ["--json", "token", "validate", token])
        assert result.exit_code == 0
        claims = json.loads(result.output)["data"]
        assert claims["sub"] == "42"
        assert claims["role"] == "admin"

    def test_rejected_token_exits_one(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "token", "validate", "not-a-token"])
        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["status_code"] == 401
        assert payload["errors"][0]["code"] == "token_invalid"


class TestUnconfigured:
    @pytest.mark.usefixtures("_isolated_cwd")
    def test_missing_settings_is_usage_error(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("REPOKIT_JWT__SECRET_KEY", raising=False)
        result = cli_runner.invoke(cli, ["token", "create", "42", "--email", "a@b.io"])
        assert result.exit_code == 2
        assert "[jwt]" in result.output
