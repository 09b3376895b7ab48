"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``REQKEY_*`` prefix (``REQKEY_DATABASE__FILENAME`` etc.)
  3. TOML file: ``reqkey.toml`` found by walking up from the cwd
  4. Code defaults: baked into :mod:`reqkey.config.models`
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from reqkey.config.models import DatabaseConfig, ManifestConfig, ProjectConfig

CONFIG_FILENAME = "reqkey.toml"
CONFIG_ENV_VAR = "REQKEY_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Locate ``reqkey.toml`` for *start* (default: cwd).

    ``REQKEY_CONFIG`` wins when set; otherwise the nearest ancestor
    directory holding the file is used.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        return candidate if candidate.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered ``reqkey.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class ReqkeySettings(BaseSettings):
    """Settings for the reqkey CLI, frozen after construction.

    Attributes:
        project_root: Directory holding ``reqkey.toml`` (or the cwd when
            none was found). The registry database lives beneath it.
        config_path: The TOML file that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "REQKEY_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    manifest: ManifestConfig = Field(default_factory=ManifestConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> ReqkeySettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* that does not exist is ignored, matching
        the behavior when no file is discovered.
        """
        toml_path: Path | None = None
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(project_root)

        root = project_root
        if root is None:
            root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(project_root=root, config_path=toml_path, **cli_flags)
        except ValidationError as exc:
            where = toml_path or "the environment"
            raise click.ClickException(f"Invalid settings from {where}: {exc}") from exc
        finally:
            _tls.toml_path = None
