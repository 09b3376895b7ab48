"""RegistryService: persist a model's keys and look them up again.

The registry stores canonical key strings only. "Not found" is a
registry condition, reported as ``NOT_FOUND``; it is never a key error.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.exc import IntegrityError

from reqkey.domain.canonical import preen_name
from reqkey.domain.errors import KeyFormatError
from reqkey.domain.grammar import coerce_kind
from reqkey.domain.manifest import dump_keys
from reqkey.services._helpers import describe_key, now_iso
from reqkey.services.base import BaseService
from reqkey.services.result import ServiceResult

logger = logging.getLogger(__name__)


class RegistryService(BaseService):
    """Registry operations scoped to one model (default: ``[project] name``)."""

    def _model(self, model: str | None) -> str:
        """Preened model key.

        Raises:
            InvalidLocalNameError: If the model name is not a valid local name.
        """
        return preen_name(model if model is not None else self._workspace.settings.project.name)

    def load(self, path: Path | None = None, *, model: str | None = None) -> ServiceResult:
        """Register every key of a manifest. Nothing is stored if it has issues."""
        op = "load_manifest"
        try:
            model_key = self._model(model)
        except KeyFormatError as exc:
            return ServiceResult.from_key_error(op, exc)

        manifest, failure = self._read_manifest(op, path)
        if failure is not None:
            return failure
        assert manifest is not None

        if not manifest.ok:
            return ServiceResult.failure(
                op,
                "MANIFEST_ISSUES",
                f"{len(manifest.issues)} issue(s) found in manifest; nothing was loaded",
                issues=[
                    {"path": issue.path, "code": issue.code, "message": issue.message}
                    for issue in manifest.issues
                ],
            )

        try:
            inserted = self._workspace.keys.add_keys(model_key, manifest.keys, created=now_iso())
        except IntegrityError as exc:
            logger.debug("Registry rejected manifest for %s", model_key, exc_info=True)
            return ServiceResult.failure(
                op,
                "MISSING_PARENT",
                "A key's parent is neither in the manifest nor registered",
                model=model_key,
                db_error=str(exc.orig),
            )

        total = self._workspace.keys.count(model_key)
        logger.debug("Loaded %d new key(s) into %s", inserted, model_key)
        return ServiceResult(
            ok=True,
            op=op,
            data={"model": model_key, "inserted": inserted, "total": total},
        )

    def list_keys(self, *, model: str | None = None, kind: str | None = None) -> ServiceResult:
        op = "list_keys"
        try:
            model_key = self._model(model)
            kind_filter = coerce_kind(kind) if kind is not None else None
        except KeyFormatError as exc:
            return ServiceResult.from_key_error(op, exc)

        rows = self._workspace.keys.list_keys(model_key, kind=kind_filter)
        items = [
            {
                "key": str(row["key"]),
                "kind": row["kind"],
                "parent_key": str(row["parent_key"]) if row["parent_key"] is not None else None,
                "created": row["created"],
            }
            for row in rows
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"model": model_key, "count": len(items), "items": items},
        )

    def show(self, key: str, *, model: str | None = None) -> ServiceResult:
        """Show one registered key with its direct children."""
        op = "show_key"
        try:
            model_key = self._model(model)
            parsed = self._coerce_key(key)
        except KeyFormatError as exc:
            return ServiceResult.from_key_error(op, exc, input=key)

        row = self._workspace.keys.get(model_key, parsed)
        if row is None:
            return ServiceResult.failure(
                op, "NOT_FOUND", f"Key '{parsed}' is not registered in model '{model_key}'"
            )

        data = describe_key(parsed)
        data["model"] = model_key
        data["created"] = row["created"]
        children = self._workspace.keys.children(model_key, parsed)
        data["children"] = [str(child) for child in children]
        return ServiceResult(ok=True, op=op, data=data)

    def remove(self, key: str, *, model: str | None = None) -> ServiceResult:
        """Remove a leaf key. Keys with registered children are refused."""
        op = "remove_key"
        try:
            model_key = self._model(model)
            parsed = self._coerce_key(key)
        except KeyFormatError as exc:
            return ServiceResult.from_key_error(op, exc, input=key)

        children = self._workspace.keys.children(model_key, parsed)
        if children:
            return ServiceResult.failure(
                op,
                "HAS_CHILDREN",
                f"Key '{parsed}' still has {len(children)} registered child key(s)",
                children=[str(child) for child in children],
            )
        if not self._workspace.keys.remove(model_key, parsed):
            return ServiceResult.failure(
                op, "NOT_FOUND", f"Key '{parsed}' is not registered in model '{model_key}'"
            )
        return ServiceResult(ok=True, op=op, data={"model": model_key, "key": str(parsed)})

    def export(self, *, model: str | None = None) -> ServiceResult:
        """Render a model's registered keys as a flat YAML manifest."""
        op = "export_keys"
        try:
            model_key = self._model(model)
        except KeyFormatError as exc:
            return ServiceResult.from_key_error(op, exc)

        keys = [row["key"] for row in self._workspace.keys.list_keys(model_key)]
        return ServiceResult(
            ok=True,
            op=op,
            data={"model": model_key, "count": len(keys), "yaml": dump_keys(keys)},
        )
