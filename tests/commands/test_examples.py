"""Tests for the --examples flag on CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from reqkey.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["key", "--examples"], ["reqkey key build", "reqkey key lint"]),
    (["key", "build", "--examples"], ["--when entry"]),
    (["key", "parse", "--examples"], ["reqkey key parse"]),
    (["key", "preen", "--examples"], ["--name-only"]),
    (["key", "lint", "--examples"], ["reqkey key lint BookOrder"]),
    (["check", "--examples"], ["reqkey check keys.yaml"]),
    (["index", "--examples"], ["reqkey index load", "reqkey index export"]),
    (["index", "load", "--examples"], ["--model orders"]),
    (["index", "list", "--examples"], ["--kind state"]),
    (["index", "show", "--examples"], ["reqkey index show"]),
    (["index", "remove", "--examples"], ["reqkey index remove"]),
    (["index", "export", "--examples"], ["> keys.yaml"]),
]


@pytest.mark.parametrize(
    ("args", "expected"),
    EXAMPLES_COMMANDS,
    ids=[" ".join(args) for args, _ in EXAMPLES_COMMANDS],
)
def test_examples(cli_runner: CliRunner, args: list[str], expected: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "Examples for" in result.output
    for keyword in expected:
        assert keyword in result.output


def test_examples_skip_command_body(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """--examples exits before the command touches the project."""
    monkeypatch.chdir(tmp_path)
    result = cli_runner.invoke(cli, ["index", "load", "--examples"])
    assert result.exit_code == 0
    assert not (tmp_path / ".reqkey").exists()
