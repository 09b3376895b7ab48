"""Tests for the key column type and the model_keys table constraints."""

from __future__ import annotations

import pytest
from sqlalchemy import insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, StatementError

from reqkey.domain.keys import Key, new_domain_key, new_subdomain_key
from reqkey.infrastructure.database.schema import model_keys


def _row(key: Key | str, parent: Key | str | None, kind: str) -> dict[str, object]:
    return {
        "model_key": "orders",
        "key": key,
        "kind": kind,
        "parent_key": parent,
        "created": "2026-01-01T00:00:00+00:00",
    }


class TestKeyColumn:
    def test_round_trips_as_key(self, db_engine: Engine) -> None:
        domain = new_domain_key("orders")
        with db_engine.begin() as conn:
            conn.execute(insert(model_keys).values(_row(domain, None, "domain")))
        with db_engine.connect() as conn:
            stored = conn.execute(select(model_keys.c.key)).scalar_one()
        assert isinstance(stored, Key)
        assert stored == domain

    def test_strings_are_preened_on_bind(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            conn.execute(insert(model_keys).values(_row(" DOMAIN/Orders ", None, "domain")))
        with db_engine.connect() as conn:
            raw = conn.exec_driver_sql('SELECT "key" FROM model_keys').scalar_one()
            found = conn.execute(
                select(model_keys.c.kind).where(model_keys.c.key == "domain/ORDERS")
            ).scalar_one()
        assert raw == "domain/orders"
        assert found == "domain"

    def test_invalid_string_rejected_on_bind(self, db_engine: Engine) -> None:
        with pytest.raises(StatementError), db_engine.begin() as conn:
            conn.execute(insert(model_keys).values(_row("class/x", None, "class")))


class TestConstraints:
    def test_duplicate_key_rejected(self, db_engine: Engine) -> None:
        domain = new_domain_key("orders")
        with db_engine.begin() as conn:
            conn.execute(insert(model_keys).values(_row(domain, None, "domain")))
        with pytest.raises(IntegrityError), db_engine.begin() as conn:
            conn.execute(insert(model_keys).values(_row("Domain/Orders", None, "domain")))

    def test_parent_must_exist(self, db_engine: Engine) -> None:
        domain = new_domain_key("orders")
        subdomain = new_subdomain_key(domain, "default")
        with pytest.raises(IntegrityError), db_engine.begin() as conn:
            conn.execute(insert(model_keys).values(_row(subdomain, domain, "subdomain")))
