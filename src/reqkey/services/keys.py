"""KeyService: build, parse, preen, and lint keys; check manifests.

None of these operations touch the registry database.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

from reqkey.domain.canonical import lint_name, preen, preen_name
from reqkey.domain.errors import InvalidParentError, KeyFormatError
from reqkey.domain.keys import Key, StateActionRef, build
from reqkey.services._helpers import describe_key
from reqkey.services.base import BaseService
from reqkey.services.result import ServiceResult

logger = logging.getLogger(__name__)


class KeyService(BaseService):
    """Stateless key operations exposed to the CLI."""

    def build(
        self,
        kind: str,
        name: str,
        *,
        parent: Key | str | None = None,
        action: Key | str | None = None,
        when: str | None = None,
    ) -> ServiceResult:
        """Build a new key of *kind* named *name* under *parent*.

        *action* and *when* together form the state action reference; they
        are only valid for ``saction`` keys.
        """
        op = "build_key"
        try:
            parent_key = self._coerce_key(parent) if parent is not None else None
            extra: StateActionRef | None = None
            if action is not None or when is not None:
                if action is None:
                    msg = "state action keys require an action reference"
                    raise InvalidParentError(msg)
                extra = StateActionRef(action=self._coerce_key(action), qualifier=when)
            key = build(kind, parent_key, name, extra)
        except KeyFormatError as exc:
            logger.debug("build_key rejected %r: %s", name, exc)
            return ServiceResult.from_key_error(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data=describe_key(key),
            warnings=self._lint_warnings([key]),
        )

    def parse(self, raw: str) -> ServiceResult:
        """Parse a stored key string and report its structure."""
        op = "parse_key"
        try:
            key = self._coerce_key(raw)
        except KeyFormatError as exc:
            return ServiceResult.from_key_error(op, exc, input=raw)

        data = describe_key(key)
        data["lineage"] = [str(ancestor) for ancestor in key.lineage()]
        return ServiceResult(ok=True, op=op, data=data)

    def preen(self, raw: str, *, name_only: bool = False) -> ServiceResult:
        """Canonicalize a whole key string, or a single local name."""
        op = "preen_key"
        try:
            preened = preen_name(raw) if name_only else preen(raw)
        except KeyFormatError as exc:
            return ServiceResult.from_key_error(op, exc, input=raw)
        return ServiceResult(ok=True, op=op, data={"input": raw, "preened": preened})

    def lint(self, name: str) -> ServiceResult:
        """Report snake_case advice for a local name (advisory only)."""
        suggestions = lint_name(name)
        try:
            preened: str | None = preen_name(name)
        except KeyFormatError:
            preened = None
        return ServiceResult(
            ok=True,
            op="lint_name",
            data={
                "name": name,
                "preened": preened,
                "snake_case": not suggestions,
                "suggestions": suggestions,
            },
        )

    def check_manifest(self, path: Path | None = None) -> ServiceResult:
        """Build every key in a manifest and report issues."""
        op = "check_manifest"
        manifest, failure = self._read_manifest(op, path)
        if failure is not None:
            return failure
        assert manifest is not None

        counts = Counter(key.kind.value for key in manifest.keys)
        if not manifest.ok:
            issues = [
                {"path": issue.path, "code": issue.code, "message": issue.message}
                for issue in manifest.issues
            ]
            logger.debug("Manifest check found %d issue(s)", len(issues))
            return ServiceResult.failure(
                op,
                "MANIFEST_ISSUES",
                f"{len(issues)} issue(s) found in manifest",
                issues=issues,
                count=len(manifest.keys),
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "count": len(manifest.keys),
                "kinds": dict(sorted(counts.items())),
                "items": [{"key": str(key), "kind": key.kind.value} for key in manifest.keys],
            },
            warnings=self._lint_warnings(manifest.keys),
        )

    def _lint_warnings(self, keys: list[Key]) -> list[str]:
        if not self._workspace.settings.manifest.lint:
            return []
        warnings: list[str] = []
        for key in keys:
            for suggestion in lint_name(key.name):
                warnings.append(f"{key}: {suggestion}")
        return warnings
