"""Repository for registered model keys."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.engine import Engine

from reqkey.domain.canonical import preen_name
from reqkey.domain.grammar import KeyKind
from reqkey.domain.keys import Key
from reqkey.infrastructure.database.schema import model_keys


def _row_dict(row: Any) -> dict[str, Any]:
    return {
        "key": row["key"],
        "kind": str(row["kind"]),
        "parent_key": row["parent_key"],
        "created": str(row["created"]),
    }


class KeyRepository:
    """Encapsulates SQL for the ``model_keys`` table.

    Every model key is preened before it reaches a predicate, the same
    way entity keys are canonicalized by :class:`KeyColumn`.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def add_keys(self, model_key: str, keys: Iterable[Key], *, created: str) -> int:
        """Insert *keys* in one transaction, parents before children.

        Keys already registered are left untouched. Returns the number of
        newly inserted rows.

        Raises:
            sqlalchemy.exc.IntegrityError: If a key's parent is not registered.
        """
        model = preen_name(model_key)
        ordered = sorted(set(keys), key=lambda k: (len(k.segments), str(k)))
        inserted = 0
        with self._engine.begin() as conn:
            for key in ordered:
                stmt = (
                    insert(model_keys)
                    .values(
                        model_key=model,
                        key=key,
                        kind=key.kind.value,
                        parent_key=key.parent,
                        created=created,
                    )
                    .on_conflict_do_nothing(index_elements=["model_key", "key"])
                )
                inserted += conn.execute(stmt).rowcount
        return inserted

    def get(self, model_key: str, key: Key) -> dict[str, Any] | None:
        """Fetch one registered key row, or None."""
        stmt = select(model_keys).where(
            model_keys.c.model_key == preen_name(model_key),
            model_keys.c.key == key,
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _row_dict(row) if row is not None else None

    def children(self, model_key: str, key: Key) -> list[Key]:
        """Direct children of *key*, ordered by key."""
        stmt = (
            select(model_keys.c.key)
            .where(
                model_keys.c.model_key == preen_name(model_key),
                model_keys.c.parent_key == key,
            )
            .order_by(model_keys.c.key)
        )
        with self._engine.connect() as conn:
            return list(conn.execute(stmt).scalars().all())

    def list_keys(self, model_key: str, *, kind: KeyKind | None = None) -> list[dict[str, Any]]:
        """All registered keys of a model, optionally filtered by kind."""
        stmt = select(model_keys).where(model_keys.c.model_key == preen_name(model_key))
        if kind is not None:
            stmt = stmt.where(model_keys.c.kind == kind.value)
        stmt = stmt.order_by(model_keys.c.key)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_dict(row) for row in rows]

    def count(self, model_key: str) -> int:
        stmt = (
            select(func.count())
            .select_from(model_keys)
            .where(model_keys.c.model_key == preen_name(model_key))
        )
        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one() or 0)

    def remove(self, model_key: str, key: Key) -> bool:
        """Delete one key. Returns False if it was not registered.

        Raises:
            sqlalchemy.exc.IntegrityError: If the key still has children.
        """
        stmt = delete(model_keys).where(
            model_keys.c.model_key == preen_name(model_key),
            model_keys.c.key == key,
        )
        with self._engine.begin() as conn:
            return conn.execute(stmt).rowcount > 0
