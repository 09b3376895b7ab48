"""SQLAlchemy Core table definitions for the reqkey database.

Keys are stored as their canonical strings. :class:`KeyColumn` is the only
way a key reaches a column or a query predicate: plain strings are parsed
(and therefore preened) on bind, so logically identical keys always
collide. Referential integrity between a key and its parent is left to
the composite foreign key on ``model_keys``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import (
    Column,
    ForeignKeyConstraint,
    Index,
    MetaData,
    PrimaryKeyConstraint,
    Table,
    Text,
)
from sqlalchemy.types import TypeDecorator

from reqkey.domain.keys import Key, parse


class KeyColumn(TypeDecorator[Key]):
    """Text column holding a canonical key string, loaded back as a :class:`Key`."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Key | str | None, dialect: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, Key):
            return str(value)
        return str(parse(value))

    def process_result_value(self, value: str | None, dialect: Any) -> Key | None:
        if value is None:
            return None
        return parse(value)


metadata = MetaData()

model_keys = Table(
    "model_keys",
    metadata,
    Column("model_key", Text, nullable=False),
    Column("key", KeyColumn, nullable=False),
    Column("kind", Text, nullable=False),
    Column("parent_key", KeyColumn),  # NULL for domain keys
    Column("created", Text, nullable=False),
    PrimaryKeyConstraint("model_key", "key"),
    ForeignKeyConstraint(
        ["model_key", "parent_key"],
        ["model_keys.model_key", "model_keys.key"],
    ),
)

Index("ix_model_keys_parent", model_keys.c.model_key, model_keys.c.parent_key)
Index("ix_model_keys_kind", model_keys.c.model_key, model_keys.c.kind)
