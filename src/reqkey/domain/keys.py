"""Hierarchical keys: the Key value, builder, parser, and serializer.

A :class:`Key` is the full ancestor chain of one modeled entity, root first.
Keys are created only by :func:`build` (bottom-up, while creating an entity)
or :func:`parse` (while loading a stored string). Both preen their input,
so every Key is canonical and compares by its serialized string.

INVARIANT: Keys are immutable. Renaming an entity means building a new Key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, model_serializer, model_validator

from reqkey.domain.canonical import normalize_token, preen_name
from reqkey.domain.errors import (
    InvalidLocalNameError,
    InvalidParentError,
    InvalidQualifierError,
    MalformedKeyError,
)
from reqkey.domain.grammar import (
    DELIMITER,
    KeyKind,
    Qualifier,
    check_adjacency,
    coerce_kind,
    coerce_qualifier,
)


class Segment(BaseModel):
    """One ``(kind, name)`` step of a key's ancestor chain."""

    model_config = {"frozen": True}

    kind: KeyKind
    name: str
    qualifier: Qualifier | None = None

    def tokens(self) -> tuple[str, ...]:
        """Stored tokens for this segment (``saction`` carries its qualifier)."""
        if self.qualifier is None:
            return (self.kind.value, self.name)
        return (self.kind.value, self.qualifier.value, self.name)


class Key(BaseModel):
    """Structured identifier for one modeled entity.

    Validates from either a segment tuple or a stored key string, and
    serializes to the canonical stored string.

    Attributes:
        segments: Ancestor chain from the root ``domain`` to this key, inclusive.
    """

    model_config = {"frozen": True}

    segments: tuple[Segment, ...]

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"segments": parse(data).segments}
        return data

    @model_validator(mode="after")
    def _check_segments(self) -> Key:
        _check_chain(self.segments)
        return self

    @model_serializer
    def _dump(self) -> str:
        return serialize(self)

    # --- Identity ---

    def __str__(self) -> str:
        return serialize(self)

    def __repr__(self) -> str:
        return f"Key({serialize(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return serialize(self) == serialize(other)

    def __hash__(self) -> int:
        return hash(serialize(self))

    # --- Own segment ---

    @property
    def kind(self) -> KeyKind:
        return self.segments[-1].kind

    @property
    def name(self) -> str:
        return self.segments[-1].name

    @property
    def qualifier(self) -> Qualifier | None:
        return self.segments[-1].qualifier

    # --- Hierarchy ---

    @property
    def parent(self) -> Key | None:
        """The parent key, or None for a root key."""
        if len(self.segments) == 1:
            return None
        return Key.model_construct(segments=self.segments[:-1])

    def has_no_parent(self) -> bool:
        return len(self.segments) == 1

    def lineage(self) -> tuple[Key, ...]:
        """Every key on the chain from the root down to (and including) this key."""
        return tuple(
            Key.model_construct(segments=self.segments[:depth])
            for depth in range(1, len(self.segments) + 1)
        )

    def is_descendant_of(self, other: Key) -> bool:
        """True if *other* is a strict ancestor of this key."""
        depth = len(other.segments)
        return depth < len(self.segments) and self.segments[:depth] == other.segments

    def validate_parent(self, parent: Key | None) -> None:
        """Check that *parent* is exactly this key's parent.

        Raises:
            InvalidParentError: If the parent is missing, unexpected, of the
                wrong kind, or a different key of the right kind.
        """
        expected = self.parent
        if expected is None:
            if parent is not None:
                msg = f"'{self.kind}' key should not have a parent, got '{parent}'"
                raise InvalidParentError(msg)
            return
        if parent is None:
            msg = f"'{self.kind}' key requires a parent of type '{expected.kind}'"
            raise InvalidParentError(msg)
        if parent.kind is not expected.kind:
            msg = (
                f"'{self.kind}' key requires parent of type '{expected.kind}', "
                f"but got '{parent.kind}'"
            )
            raise InvalidParentError(msg)
        if parent != expected:
            msg = f"parent '{parent}' does not match expected parent '{expected}'"
            raise InvalidParentError(msg)


@dataclass(frozen=True)
class StateActionRef:
    """Extra input for ``saction`` keys: the fired action and when it fires."""

    action: Key
    qualifier: Qualifier | str | None


def _check_chain(segments: tuple[Segment, ...]) -> None:
    """Validate a full segment chain against the grammar."""
    if not segments:
        msg = "key must have at least one segment"
        raise MalformedKeyError(msg)
    parent_kind: KeyKind | None = None
    for segment in segments:
        check_adjacency(parent_kind, segment.kind)
        if segment.kind is KeyKind.SACTION and segment.qualifier is None:
            msg = "'saction' segment is missing its qualifier"
            raise InvalidQualifierError(msg)
        if segment.kind is not KeyKind.SACTION and segment.qualifier is not None:
            msg = f"'{segment.kind}' segment cannot carry a qualifier"
            raise InvalidQualifierError(msg)
        if preen_name(segment.name) != segment.name:
            msg = f"local name {segment.name!r} is not in canonical form"
            raise InvalidLocalNameError(msg)
        parent_kind = segment.kind


# ---------------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------------


def serialize(key: Key) -> str:
    """Render *key* as its canonical stored string."""
    return DELIMITER.join(token for segment in key.segments for token in segment.tokens())


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def parse(raw: str) -> Key:
    """Parse a stored key string into a :class:`Key`.

    Tokens are preened before use, so ``" DOMAIN / Orders "`` parses to
    ``domain/orders``.

    Raises:
        MalformedKeyError: Blank input, empty tokens, unknown kind labels,
            or a kind label without a value.
        InvalidParentError: The kinds violate the adjacency table.
        InvalidQualifierError: A ``saction`` qualifier is not entry/do/exit.
        InvalidLocalNameError: A value uses disallowed characters.
    """
    if not raw or not raw.strip():
        msg = "invalid key format: key cannot be blank"
        raise MalformedKeyError(msg)

    tokens = [normalize_token(token) for token in raw.split(DELIMITER)]
    if not all(tokens):
        msg = f"invalid key format {raw!r}: empty segment"
        raise MalformedKeyError(msg)

    segments: list[Segment] = []
    pos = 0
    while pos < len(tokens):
        label = tokens[pos]
        try:
            kind = KeyKind(label)
        except ValueError:
            msg = f"invalid key format {raw!r}: unknown key kind {label!r}"
            raise MalformedKeyError(msg) from None
        pos += 1

        qualifier: Qualifier | None = None
        if kind is KeyKind.SACTION:
            if pos >= len(tokens):
                msg = f"invalid key format {raw!r}: 'saction' has no qualifier"
                raise MalformedKeyError(msg)
            qualifier = coerce_qualifier(tokens[pos])
            pos += 1

        if pos >= len(tokens):
            msg = f"invalid key format {raw!r}: '{kind}' has no value"
            raise MalformedKeyError(msg)
        segments.append(Segment(kind=kind, name=preen_name(tokens[pos]), qualifier=qualifier))
        pos += 1

    chain = tuple(segments)
    _check_chain(chain)
    return Key.model_construct(segments=chain)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def build(
    kind: KeyKind | str,
    parent: Key | None,
    local_name: str,
    extra: StateActionRef | None = None,
) -> Key:
    """Build the key for a new entity of *kind* under *parent*.

    Raises:
        InvalidKindError: *kind* is not an enumerated kind.
        InvalidParentError: *parent* is not allowed for *kind* (including a
            missing parent for a non-root kind), or a ``saction`` references
            an action outside the state's class.
        InvalidLocalNameError: *local_name* is blank or uses disallowed characters.
        InvalidQualifierError: ``saction`` without a valid qualifier, or
            *extra* given for any other kind.
    """
    kind = coerce_kind(kind)
    check_adjacency(parent.kind if parent is not None else None, kind)
    name = preen_name(local_name)

    qualifier: Qualifier | None = None
    if kind is KeyKind.SACTION:
        if extra is None:
            msg = "'saction' keys require an action reference and a qualifier"
            raise InvalidQualifierError(msg)
        qualifier = coerce_qualifier(extra.qualifier)
        assert parent is not None  # guaranteed by check_adjacency
        _check_action_ref(parent, extra.action)
    elif extra is not None:
        msg = f"'{kind}' keys do not take an action reference or qualifier"
        raise InvalidQualifierError(msg)

    base = parent.segments if parent is not None else ()
    segment = Segment(kind=kind, name=name, qualifier=qualifier)
    return Key.model_construct(segments=(*base, segment))


def _check_action_ref(state: Key, action: Key) -> None:
    """A state action may only fire an action defined on the state's own class."""
    if action.kind is not KeyKind.ACTION:
        msg = f"state action must reference an 'action' key, got '{action.kind}'"
        raise InvalidParentError(msg)
    if action.parent != state.parent:
        msg = f"action '{action}' is not defined on class '{state.parent}'"
        raise InvalidParentError(msg)


# --- Per-kind constructors ---


def new_domain_key(name: str) -> Key:
    return build(KeyKind.DOMAIN, None, name)


def new_subdomain_key(domain: Key, name: str) -> Key:
    return build(KeyKind.SUBDOMAIN, domain, name)


def new_class_key(subdomain: Key, name: str) -> Key:
    return build(KeyKind.CLASS, subdomain, name)


def new_usecase_key(subdomain: Key, name: str) -> Key:
    return build(KeyKind.USECASE, subdomain, name)


def new_state_key(class_key: Key, name: str) -> Key:
    return build(KeyKind.STATE, class_key, name)


def new_action_key(class_key: Key, name: str) -> Key:
    return build(KeyKind.ACTION, class_key, name)


def new_guard_key(class_key: Key, name: str) -> Key:
    return build(KeyKind.GUARD, class_key, name)


def new_state_action_key(state: Key, qualifier: Qualifier | str, action: Key) -> Key:
    """Key for *action* firing at *qualifier* in *state*, named after the action."""
    return build(
        KeyKind.SACTION,
        state,
        action.name,
        StateActionRef(action=action, qualifier=qualifier),
    )
