"""Workspace: the single dependency injected into every service.

Owns the project settings and, lazily, the registry database engine.
Pure key operations never touch the database, so ``reqkey key ...``
commands run without creating ``.reqkey/``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from reqkey.infrastructure.database.engine import init_database
from reqkey.infrastructure.repositories.keys import KeyRepository

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from reqkey.config.settings import ReqkeySettings

logger = logging.getLogger(__name__)


class Workspace:
    """Project-level access to settings and the key registry."""

    def __init__(self, settings: ReqkeySettings) -> None:
        self.settings = settings
        self._engine: Engine | None = None
        self._keys: KeyRepository | None = None

    @property
    def root(self) -> Path:
        return self.settings.project_root

    @property
    def engine(self) -> Engine:
        """The registry engine (database initialized on first access)."""
        if self._engine is None:
            logger.debug("Opening key registry under %s", self.root)
            self._engine = init_database(self.root, self.settings.database.filename)
        return self._engine

    @property
    def keys(self) -> KeyRepository:
        if self._keys is None:
            self._keys = KeyRepository(self.engine)
        return self._keys

    def resolve(self, path: str | Path) -> Path:
        """Resolve a project-relative path (absolute paths pass through)."""
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self.root / candidate

    def close(self) -> None:
        """Dispose of the engine, if one was opened."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._keys = None
