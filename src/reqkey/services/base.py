"""BaseService: shared foundation for reqkey services.

Every service receives a :class:`Workspace` at construction time. Services
that only build, parse, or preen keys never touch its database engine.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from reqkey.domain.keys import Key, parse
from reqkey.domain.manifest import ManifestError, ManifestResult, load_manifest
from reqkey.services.result import ServiceResult

if TYPE_CHECKING:
    from reqkey.infrastructure.workspace import Workspace


class BaseService:
    """Base for service-layer classes.

    Usage::

        class KeyService(BaseService):
            def parse(self, raw: str) -> ServiceResult:
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @staticmethod
    def _coerce_key(value: Key | str) -> Key:
        """Accept a Key or a stored key string.

        Raises:
            KeyFormatError: If *value* is a string that does not parse.
        """
        if isinstance(value, Key):
            return value
        return parse(value)

    def _read_manifest(
        self, op: str, path: Path | None
    ) -> tuple[ManifestResult | None, ServiceResult | None]:
        """Load a manifest file, returning ``(manifest, None)`` or ``(None, failure)``.

        *path* defaults to ``[manifest] default_path`` under the project root.
        """
        if path is None:
            path = self._workspace.resolve(self._workspace.settings.manifest.default_path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None, ServiceResult.failure(
                op, "FILE_NOT_FOUND", f"Manifest not found: {path}", path=str(path)
            )
        except (OSError, UnicodeError) as exc:
            return None, ServiceResult.failure(
                op, "READ_ERROR", f"Cannot read manifest {path}: {exc}", path=str(path)
            )
        try:
            return load_manifest(text), None
        except ManifestError as exc:
            return None, ServiceResult.failure(op, "INVALID_MANIFEST", str(exc), path=str(path))
