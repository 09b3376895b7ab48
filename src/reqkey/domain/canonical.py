"""Key preening: canonical forms for names and whole key strings.

Every storage lookup and every map/index key must use the preened form.
Two inputs that differ only by case or surrounding whitespace preen to
the same string, so they collide instead of producing duplicate rows.

The canonical case convention is lowercase. Preening is idempotent:
``preen(preen(s)) == preen(s)``.
"""

from __future__ import annotations

import re
import unicodedata

from reqkey.domain.errors import InvalidLocalNameError
from reqkey.domain.grammar import DELIMITER, NAME_PATTERN

# Advisory naming convention for local names (lint only, never enforced).
SNAKE_CASE_PATTERN: re.Pattern[str] = re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)*$")


def normalize_token(raw: str) -> str:
    """NFKC-normalize, strip surrounding whitespace, and lowercase."""
    text = unicodedata.normalize("NFKC", raw)
    return text.strip().lower()


def preen_name(raw: str) -> str:
    """Preen a single local-name component.

    Raises:
        InvalidLocalNameError: If the name is blank after normalization,
            contains the path delimiter, or uses characters outside
            ``[a-z0-9_-]``.
    """
    name = normalize_token(raw)
    if not name:
        msg = "local name cannot be blank"
        raise InvalidLocalNameError(msg)
    if DELIMITER in name:
        msg = f"local name {name!r} cannot contain {DELIMITER!r}"
        raise InvalidLocalNameError(msg)
    if NAME_PATTERN.match(name) is None:
        msg = f"local name {name!r} may only contain lowercase letters, digits, '_' and '-'"
        raise InvalidLocalNameError(msg)
    return name


def preen(raw: str) -> str:
    """Preen a whole key string, token by token.

    Only the spelling of each token is canonicalized; kind labels and
    hierarchy are checked by :func:`reqkey.domain.keys.parse`.
    """
    return DELIMITER.join(preen_name(token) for token in raw.split(DELIMITER))


def lint_name(raw: str) -> list[str]:
    """Suggest fixes that would turn *raw* into a snake_case local name.

    Returns an empty list when the stripped name is already snake_case.
    """
    name = raw.strip()
    if not name:
        return ["local name cannot be blank"]
    if SNAKE_CASE_PATTERN.match(name):
        return []

    issues: list[str] = []
    if name.lower() != name:
        issues.append("convert to lowercase")
    if "-" in name:
        issues.append("replace hyphens with underscores")
    if " " in name:
        issues.append("replace spaces with underscores")
    if "." in name:
        issues.append("replace dots with underscores")
    if name[0].isdigit():
        issues.append("local names cannot start with a number")
    if name.startswith("_"):
        issues.append("local names cannot start with an underscore")
    if name.endswith("_"):
        issues.append("local names cannot end with an underscore")
    if "__" in name:
        issues.append("local names cannot have consecutive underscores")

    if not issues:
        issues.append("use only lowercase letters, digits, and single underscores between words")
    return issues
