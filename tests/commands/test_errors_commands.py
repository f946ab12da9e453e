"""Tests for the `errors` command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from repokit.cli import cli

CATALOG = {
    "errors": {
        "entity_not_found": {"code": "E404", "message": "No such record."},
        "entity_add_failed": {"code": "E500", "message": "Could not save."},
    }
}


@pytest.fixture
def catalog_file(_isolated_cwd: Path) -> Path:
    path = _isolated_cwd / "errors.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")
    return path


class TestLookup:
    def test_lookup_with_file(self, cli_runner: CliRunner, catalog_file: Path) -> None:
        result = cli_runner.invoke(
            cli,
            ["--json", "errors", "lookup", "entity_not_found", "mystery", "-f", str(catalog_file)],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["errors"]["entity_not_found"]["code"] == "E404"
        assert data["errors"]["mystery"]["code"] == "unknown_error"
        assert data["unknown"] == ["mystery"]

    def test_lookup_from_config(self, cli_runner: CliRunner, catalog_file: Path) -> None:
        (catalog_file.parent / "repokit.toml").write_text('[errors]\npath = "errors.json"\n')
        result = cli_runner.invoke(cli, ["errors", "lookup", "entity_add_failed"])
        assert result.exit_code == 0
        assert "E500" in result.output

    @pytest.mark.usefixtures("_isolated_cwd")
    def test_lookup_without_catalog(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["errors", "lookup", "x"])
        assert result.exit_code == 2
        assert "No error catalog configured" in result.output

    def test_missing_file(self, cli_runner: CliRunner, _isolated_cwd: Path) -> None:
        result = cli_runner.invoke(
            cli, ["errors", "lookup", "x", "--file", str(_isolated_cwd / "absent.json")]
        )
        assert result.exit_code == 1
        assert "ERROR: lookup" in result.output
        assert "catalog_load_failed" in result.output


class TestCheck:
    def test_check_lists_keys(self, cli_runner: CliRunner, catalog_file: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "errors", "check", "-f", str(catalog_file)])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["count"] == 2
        assert data["keys"] == ["entity_add_failed", "entity_not_found"]

    def test_check_malformed(self, cli_runner: CliRunner, _isolated_cwd: Path) -> None:
        bad = _isolated_cwd / "bad.json"
        bad.write_text("{oops", encoding="utf-8")
        result = cli_runner.invoke(cli, ["--json", "errors", "check", "-f", str(bad)])
        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["status"] == "failure"
        assert payload["errors"][0]["code"] == "catalog_load_failed"
