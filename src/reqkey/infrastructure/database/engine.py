"""Database engine setup for SQLite with WAL mode.

The key registry lives at ``{project_root}/.reqkey/<filename>``.
SQLAlchemy Core (not ORM) is used because reqkey is a short-lived CLI
process with no need for sessions or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from reqkey.infrastructure.database.schema import metadata

DATA_DIRNAME = ".reqkey"
DEFAULT_DB_FILENAME = "reqkey.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(project_root: Path, filename: str = DEFAULT_DB_FILENAME) -> Engine:
    """Initialize the registry database under ``{project_root}/.reqkey/``.

    Idempotent, safe to call on an existing project.
    """
    data_dir = project_root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(data_dir / filename)
    metadata.create_all(engine)
    return engine
