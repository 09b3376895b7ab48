"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, reqkey.toml only contains overrides.
A fresh project needs only ``[project] name``.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from reqkey.domain.canonical import preen_name

# --- reqkey.toml sections ---


class ProjectConfig(BaseModel):
    """[project] section.

    ``name`` is the default registry model, so it must be a valid local
    name. It is stored preened (``Orders`` becomes ``orders``).
    """

    model_config = {"frozen": True}

    name: str = "default"

    @field_validator("name")
    @classmethod
    def _preen_name(cls, value: str) -> str:
        return preen_name(value)


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    filename: str = "reqkey.db"


class ManifestConfig(BaseModel):
    """[manifest] section."""

    model_config = {"frozen": True}

    default_path: str = "keys.yaml"
    lint: bool = True
