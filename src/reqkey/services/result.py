"""ServiceResult and ServiceError: the contract between services and the CLI.

INVARIANT: Every service-layer method returns a ServiceResult. Key
validation failures never escape a service as exceptions; they become
``ServiceError`` payloads carrying the domain error's stable code.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from reqkey.domain.errors import KeyFormatError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"build_key"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues (lint advice, skipped entries).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (counts, source paths).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Build a failed result with a single structured error."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))

    @classmethod
    def from_key_error(cls, op: str, exc: KeyFormatError, **detail: Any) -> ServiceResult:
        """Map a domain key error onto a failed result, keeping its code."""
        return cls.failure(op, exc.code, str(exc), **detail)
