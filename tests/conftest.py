"""Shared pytest fixtures for reqkey tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from reqkey.config.settings import ReqkeySettings
from reqkey.infrastructure.database.engine import init_database
from reqkey.infrastructure.workspace import Workspace

SAMPLE_MANIFEST = """\
domains:
  orders:
    subdomains:
      default:
        classes:
          book_order:
            states: [open, closed]
            actions: [calculate_total, submit]
            guards: [has_items]
            state_actions:
              open:
                - {when: entry, action: calculate_total}
                - {when: exit, action: submit}
        usecases: [place_order]
"""

# 1 domain + 1 subdomain + 1 class + 2 states + 2 actions + 1 guard + 2 sactions + 1 usecase
SAMPLE_KEY_COUNT = 11


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's REQKEY_* environment out of the tests."""
    monkeypatch.delenv("REQKEY_CONFIG", raising=False)
    monkeypatch.delenv("REQKEY_PROJECT__NAME", raising=False)
    monkeypatch.delenv("REQKEY_DATABASE__FILENAME", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project directory with a ``reqkey.toml``."""
    (tmp_path / "reqkey.toml").write_text('[project]\nname = "orders"\n', encoding="utf-8")
    return tmp_path


@pytest.fixture
def manifest_path(project_root: Path) -> Path:
    """The sample manifest written to the default manifest location."""
    path = project_root / "keys.yaml"
    path.write_text(SAMPLE_MANIFEST, encoding="utf-8")
    return path


@pytest.fixture
def workspace(project_root: Path) -> Iterator[Workspace]:
    """Workspace over the temporary project (database opened on demand)."""
    ws = Workspace(ReqkeySettings.from_cli(project_root=project_root))
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp project so the CLI discovers its ``reqkey.toml``.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes.
    """
    monkeypatch.chdir(project_root)
