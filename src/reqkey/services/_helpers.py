"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from reqkey.domain.keys import Key


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (registry audit column)."""
    return datetime.now(UTC).isoformat()


def describe_key(key: Key) -> dict[str, Any]:
    """Flatten a key into the JSON-friendly payload every key op returns."""
    parent = key.parent
    return {
        "key": str(key),
        "kind": key.kind.value,
        "name": key.name,
        "qualifier": key.qualifier.value if key.qualifier is not None else None,
        "parent": str(parent) if parent is not None else None,
        "segments": [
            {"kind": segment.kind.value, "name": segment.name}
            | ({"qualifier": segment.qualifier.value} if segment.qualifier is not None else {})
            for segment in key.segments
        ],
    }
