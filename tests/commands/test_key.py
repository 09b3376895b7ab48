"""Tests for the key command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from reqkey.cli import cli

CLASS_KEY = "domain/orders/subdomain/default/class/book_order"


@pytest.mark.usefixtures("_isolated_project")
class TestKeyBuild:
    def test_build_domain(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "key", "build", "domain", "Orders"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["op"] == "build_key"
        assert data["data"]["key"] == "domain/orders"

    def test_build_with_parent(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["-q", "key", "build", "state", "open", "--parent", CLASS_KEY]
        )
        assert result.exit_code == 0
        assert result.output.strip() == f"{CLASS_KEY}/state/open"

    def test_build_state_action(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--json",
                "key",
                "build",
                "saction",
                "submit",
                "--parent",
                f"{CLASS_KEY}/state/open",
                "--action",
                f"{CLASS_KEY}/action/submit",
                "--when",
                "entry",
            ],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["data"]["key"] == f"{CLASS_KEY}/state/open/saction/entry/submit"

    def test_bad_qualifier_fails(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--json",
                "key",
                "build",
                "saction",
                "submit",
                "--parent",
                f"{CLASS_KEY}/state/open",
                "--action",
                f"{CLASS_KEY}/action/submit",
                "--when",
                "afterward",
            ],
        )
        assert result.exit_code == 1
        assert result.stdout == ""
        data = json.loads(result.stderr)
        assert data["error"]["code"] == "INVALID_QUALIFIER"

    def test_adjacency_error_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["key", "build", "class", "book_order", "--parent", "domain/orders"]
        )
        assert result.exit_code == 1
        assert "ERROR" in result.stderr
        assert "INVALID_PARENT" in result.stderr

    def test_lint_warning_on_stderr(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["key", "build", "domain", "order-2"])
        assert result.exit_code == 0
        assert "key: domain/order-2" in result.stdout
        assert "WARNING: domain/order-2: replace hyphens with underscores" in result.stderr

    def test_does_not_create_registry(self, cli_runner: CliRunner, project_root: Path) -> None:
        cli_runner.invoke(cli, ["key", "build", "domain", "orders"])
        assert not (project_root / ".reqkey").exists()


@pytest.mark.usefixtures("_isolated_project")
class TestKeyParse:
    def test_parse(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "key", "parse", f"{CLASS_KEY}/guard/has_items"])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["kind"] == "guard"
        assert data["parent"] == CLASS_KEY
        assert len(data["lineage"]) == 4

    def test_parse_dangling_label(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "key", "parse", "domain/domain_key/subdomain"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "MALFORMED_KEY"


@pytest.mark.usefixtures("_isolated_project")
class TestKeyPreenAndLint:
    def test_preen(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "key", "preen", " Domain / Orders "])
        assert result.exit_code == 0
        assert result.output.strip() == "domain/orders"

    def test_preen_name_only(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "key", "preen", "--name-only", " Book_Order "])
        assert result.output.strip() == "book_order"

    def test_lint_advice(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "key", "lint", "BookOrder"])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["snake_case"] is False
        assert data["suggestions"] == ["convert to lowercase"]

    def test_lint_clean_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["key", "lint", "book_order"])
        assert result.exit_code == 0
        assert "is snake_case" in result.output
