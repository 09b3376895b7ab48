"""Command: validate a key manifest without touching the registry."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from reqkey.commands._base import ReqkeyCommand

if TYPE_CHECKING:
    from reqkey.commands._context import AppContext


@click.command(
    cls=ReqkeyCommand,
    examples="""\
  reqkey check
  reqkey check model/keys.yaml
  reqkey --json check keys.yaml
  reqkey -v check keys.yaml""",
)
@click.argument(
    "manifest",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.pass_obj
def check(app: AppContext, manifest: Path | None) -> None:
    """Build every key in MANIFEST and report issues.

    MANIFEST defaults to ``[manifest] default_path`` under the project root.
    """
    from reqkey.services.keys import KeyService

    svc = KeyService(app.workspace)
    app.emit(svc.check_manifest(manifest))
