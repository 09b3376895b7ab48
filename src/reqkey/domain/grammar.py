"""Segment grammar: key kinds, local-name syntax, and the adjacency table.

Stored key format::

    domain/<name>[/subdomain/<name>[/class/<name>[/state/<name>[/saction/<qualifier>/<name>]
                                                  |/action/<name>
                                                  |/guard/<name>]
                                    |/usecase/<name>]]

The adjacency table below is the only place parent/child kind rules live.
Both the builder and the parser consult it.
"""

from __future__ import annotations

import re
from enum import StrEnum

from reqkey.domain.errors import InvalidKindError, InvalidParentError, InvalidQualifierError

DELIMITER = "/"

# Contract with the identifier column: lowercase ASCII, digits, '_' and '-'.
NAME_PATTERN: re.Pattern[str] = re.compile(r"^[a-z0-9_-]+$")


class KeyKind(StrEnum):
    """Segment kinds, spelled exactly as their stored labels."""

    DOMAIN = "domain"
    SUBDOMAIN = "subdomain"
    CLASS = "class"
    STATE = "state"
    ACTION = "action"
    GUARD = "guard"
    USECASE = "usecase"
    SACTION = "saction"


class Qualifier(StrEnum):
    """Lifecycle phase at which a state action fires."""

    ENTRY = "entry"
    DO = "do"
    EXIT = "exit"


# --- Adjacency (parent kind -> allowed child kinds) ---

CHILD_KINDS: dict[KeyKind | None, frozenset[KeyKind]] = {
    None: frozenset({KeyKind.DOMAIN}),
    KeyKind.DOMAIN: frozenset({KeyKind.SUBDOMAIN}),
    KeyKind.SUBDOMAIN: frozenset({KeyKind.CLASS, KeyKind.USECASE}),
    KeyKind.CLASS: frozenset({KeyKind.STATE, KeyKind.ACTION, KeyKind.GUARD}),
    KeyKind.STATE: frozenset({KeyKind.SACTION}),
}

# Every kind has exactly one parent kind, so the inverse is a plain mapping.
PARENT_KIND: dict[KeyKind, KeyKind | None] = {
    child: parent for parent, children in CHILD_KINDS.items() for child in children
}

ROOT_KINDS: frozenset[KeyKind] = CHILD_KINDS[None]


def coerce_kind(value: KeyKind | str) -> KeyKind:
    """Return *value* as a :class:`KeyKind`.

    Labels are matched after stripping whitespace and lowercasing.

    Raises:
        InvalidKindError: If the label is not an enumerated kind.
    """
    if isinstance(value, KeyKind):
        return value
    label = str(value).strip().lower()
    try:
        return KeyKind(label)
    except ValueError:
        msg = f"unknown key kind {value!r}"
        raise InvalidKindError(msg) from None


def coerce_qualifier(value: Qualifier | str | None) -> Qualifier:
    """Return *value* as a :class:`Qualifier`.

    Raises:
        InvalidQualifierError: If *value* is missing or not entry/do/exit.
    """
    if isinstance(value, Qualifier):
        return value
    if value is None:
        msg = "state action qualifier is required (one of: entry, do, exit)"
        raise InvalidQualifierError(msg)
    label = str(value).strip().lower()
    try:
        return Qualifier(label)
    except ValueError:
        msg = f"state action qualifier {value!r} must be one of: entry, do, exit"
        raise InvalidQualifierError(msg) from None


def check_adjacency(parent_kind: KeyKind | None, kind: KeyKind) -> None:
    """Raise :class:`InvalidParentError` unless *kind* may sit under *parent_kind*."""
    expected = PARENT_KIND[kind]
    if parent_kind == expected:
        return
    if expected is None:
        msg = f"'{kind}' key should not have a parent, got parent of type '{parent_kind}'"
    elif parent_kind is None:
        msg = f"'{kind}' key requires a parent of type '{expected}'"
    else:
        msg = f"'{kind}' key requires parent of type '{expected}', but got '{parent_kind}'"
    raise InvalidParentError(msg)
