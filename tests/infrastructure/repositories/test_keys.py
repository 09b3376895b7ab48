"""Tests for KeyRepository."""

from __future__ import annotations

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from reqkey.domain.grammar import KeyKind
from reqkey.domain.keys import Key, new_class_key, new_domain_key, new_subdomain_key
from reqkey.infrastructure.repositories.keys import KeyRepository

CREATED = "2026-01-01T00:00:00+00:00"


@pytest.fixture
def repo(db_engine: Engine) -> KeyRepository:
    return KeyRepository(db_engine)


@pytest.fixture
def chain() -> list[Key]:
    domain = new_domain_key("orders")
    subdomain = new_subdomain_key(domain, "default")
    return [domain, subdomain, new_class_key(subdomain, "book_order")]


class TestAddKeys:
    def test_inserts_parents_first_regardless_of_order(
        self, repo: KeyRepository, chain: list[Key]
    ) -> None:
        assert repo.add_keys("orders", reversed(chain), created=CREATED) == 3
        assert repo.count("orders") == 3

    def test_existing_keys_are_skipped(self, repo: KeyRepository, chain: list[Key]) -> None:
        repo.add_keys("orders", chain[:2], created=CREATED)
        assert repo.add_keys("orders", chain, created=CREATED) == 1
        assert repo.count("orders") == 3

    def test_missing_parent_rolls_back(self, repo: KeyRepository, chain: list[Key]) -> None:
        with pytest.raises(IntegrityError):
            repo.add_keys("orders", [chain[0], chain[2]], created=CREATED)
        assert repo.count("orders") == 0

    def test_models_are_isolated(self, repo: KeyRepository, chain: list[Key]) -> None:
        repo.add_keys("orders", chain, created=CREATED)
        assert repo.count("billing") == 0
        assert repo.get("billing", chain[0]) is None

    def test_model_key_is_preened(self, repo: KeyRepository, chain: list[Key]) -> None:
        repo.add_keys(" Orders ", chain, created=CREATED)
        assert repo.count("orders") == 3


class TestQueries:
    def test_get(self, repo: KeyRepository, chain: list[Key]) -> None:
        repo.add_keys("orders", chain, created=CREATED)
        row = repo.get("orders", chain[2])
        assert row is not None
        assert row["key"] == chain[2]
        assert row["kind"] == "class"
        assert row["parent_key"] == chain[1]
        assert row["created"] == CREATED

    def test_get_root_has_no_parent(self, repo: KeyRepository, chain: list[Key]) -> None:
        repo.add_keys("orders", chain, created=CREATED)
        row = repo.get("orders", chain[0])
        assert row is not None
        assert row["parent_key"] is None

    def test_children(self, repo: KeyRepository, chain: list[Key]) -> None:
        repo.add_keys("orders", chain, created=CREATED)
        assert repo.children("orders", chain[1]) == [chain[2]]
        assert repo.children("orders", chain[2]) == []

    def test_list_keys_ordered(self, repo: KeyRepository, chain: list[Key]) -> None:
        repo.add_keys("orders", reversed(chain), created=CREATED)
        rows = repo.list_keys("orders")
        assert [row["key"] for row in rows] == chain

    def test_list_keys_by_kind(self, repo: KeyRepository, chain: list[Key]) -> None:
        repo.add_keys("orders", chain, created=CREATED)
        rows = repo.list_keys("orders", kind=KeyKind.SUBDOMAIN)
        assert [row["key"] for row in rows] == [chain[1]]


class TestRemove:
    def test_remove_leaf(self, repo: KeyRepository, chain: list[Key]) -> None:
        repo.add_keys("orders", chain, created=CREATED)
        assert repo.remove("orders", chain[2]) is True
        assert repo.get("orders", chain[2]) is None

    def test_remove_missing(self, repo: KeyRepository, chain: list[Key]) -> None:
        assert repo.remove("orders", chain[0]) is False

    def test_remove_with_children_rejected(self, repo: KeyRepository, chain: list[Key]) -> None:
        repo.add_keys("orders", chain, created=CREATED)
        with pytest.raises(IntegrityError):
            repo.remove("orders", chain[0])
