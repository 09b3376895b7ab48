"""Key validation errors.

All of them are local, deterministic input-validation failures. They are
never transient and never retried. Each carries a stable ``code`` that the
service layer copies into :class:`~reqkey.services.result.ServiceError`.
"""

from __future__ import annotations

from typing import ClassVar


class KeyFormatError(ValueError):
    """Base class for every key construction or parsing failure."""

    code: ClassVar[str] = "INVALID_KEY"


class InvalidKindError(KeyFormatError):
    """The kind is not one of the enumerated segment kinds."""

    code: ClassVar[str] = "INVALID_KIND"


class InvalidParentError(KeyFormatError):
    """The parent/child kinds violate the adjacency table."""

    code: ClassVar[str] = "INVALID_PARENT"


class InvalidLocalNameError(KeyFormatError):
    """A local name is blank, contains a delimiter, or uses disallowed characters."""

    code: ClassVar[str] = "INVALID_LOCAL_NAME"


class InvalidQualifierError(KeyFormatError):
    """A state action qualifier is missing or not one of entry/do/exit."""

    code: ClassVar[str] = "INVALID_QUALIFIER"


class MalformedKeyError(KeyFormatError):
    """A stored key string cannot be split into kind/value tokens."""

    code: ClassVar[str] = "MALFORMED_KEY"
