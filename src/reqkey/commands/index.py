"""Command group: the persistent key registry."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from reqkey.commands._base import ReqkeyGroup
from reqkey.domain.grammar import KeyKind
from reqkey.services.registry import RegistryService

if TYPE_CHECKING:
    from reqkey.commands._context import AppContext

_INDEX_EXAMPLES = """\
  reqkey index load keys.yaml
  reqkey index list --kind class
  reqkey index show domain/orders/subdomain/default
  reqkey index remove domain/orders/subdomain/default/class/book_order/guard/is_paid
  reqkey index export --model orders > keys.yaml"""

model_option = click.option(
    "--model",
    default=None,
    help="Model to operate on (default: [project] name from reqkey.toml).",
)


@click.group(cls=ReqkeyGroup, examples=_INDEX_EXAMPLES)
@click.pass_obj
def index(app: AppContext) -> None:
    """Register, list, and look up keys in the project registry."""


@index.command(
    examples="""\
  reqkey index load
  reqkey index load model/keys.yaml --model orders
  reqkey --json index load keys.yaml"""
)
@click.argument(
    "manifest",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@model_option
@click.pass_obj
def load(app: AppContext, manifest: Path | None, model: str | None) -> None:
    """Register every key of MANIFEST. Nothing is stored if it has issues."""
    svc = RegistryService(app.workspace)
    app.emit(svc.load(manifest, model=model))


@index.command(
    "list",
    examples="""\
  reqkey index list
  reqkey index list --kind state
  reqkey -q index list --model orders""",
)
@click.option(
    "--kind",
    type=click.Choice([kind.value for kind in KeyKind]),
    default=None,
    help="Only list keys of this kind.",
)
@model_option
@click.pass_obj
def list_cmd(app: AppContext, kind: str | None, model: str | None) -> None:
    """List registered keys in key order."""
    svc = RegistryService(app.workspace)
    app.emit(svc.list_keys(model=model, kind=kind))


@index.command(
    examples="""\
  reqkey index show domain/orders
  reqkey --json index show domain/orders/subdomain/default/class/book_order"""
)
@click.argument("raw")
@model_option
@click.pass_obj
def show(app: AppContext, raw: str, model: str | None) -> None:
    """Show a registered key and its direct children."""
    svc = RegistryService(app.workspace)
    app.emit(svc.show(raw, model=model))


@index.command(
    examples="""\
  reqkey index remove domain/orders/subdomain/default/class/book_order/guard/is_paid"""
)
@click.argument("raw")
@model_option
@click.pass_obj
def remove(app: AppContext, raw: str, model: str | None) -> None:
    """Remove a registered key that has no registered children."""
    svc = RegistryService(app.workspace)
    app.emit(svc.remove(raw, model=model))


@index.command(
    examples="""\
  reqkey index export
  reqkey index export --model orders > keys.yaml"""
)
@model_option
@click.pass_obj
def export(app: AppContext, model: str | None) -> None:
    """Print the registered keys as a flat YAML manifest."""
    svc = RegistryService(app.workspace)
    app.emit(svc.export(model=model))
