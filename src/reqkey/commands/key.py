"""Command group: build, parse, preen, and lint individual keys."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from reqkey.commands._base import ReqkeyGroup
from reqkey.services.keys import KeyService

if TYPE_CHECKING:
    from reqkey.commands._context import AppContext

_KEY_EXAMPLES = """\
  reqkey key build domain orders
  reqkey key build class book_order --parent domain/orders/subdomain/default
  reqkey key parse domain/orders/subdomain/default/class/book_order
  reqkey key preen " Domain / Orders "
  reqkey key lint BookOrder"""


@click.group(cls=ReqkeyGroup, examples=_KEY_EXAMPLES)
@click.pass_obj
def key(app: AppContext) -> None:
    """Build, parse, and canonicalize keys."""


@key.command(
    examples="""\
  reqkey key build domain orders
  reqkey key build subdomain default --parent domain/orders
  reqkey key build state open --parent domain/orders/subdomain/default/class/book_order
  reqkey key build saction submit \\
      --parent domain/orders/subdomain/default/class/book_order/state/open \\
      --action domain/orders/subdomain/default/class/book_order/action/submit \\
      --when entry
  reqkey --json key build guard is_paid --parent domain/orders/subdomain/default/class/book_order"""
)
@click.argument("kind")
@click.argument("name")
@click.option("--parent", default=None, help="Stored key of the parent entity.")
@click.option("--action", default=None, help="Action fired by a state action (saction only).")
@click.option(
    "--when",
    default=None,
    help="When a state action fires: entry, do, or exit (saction only).",
)
@click.pass_obj
def build(
    app: AppContext,
    kind: str,
    name: str,
    parent: str | None,
    action: str | None,
    when: str | None,
) -> None:
    """Build the key for a new KIND entity called NAME."""
    svc = KeyService(app.workspace)
    app.emit(svc.build(kind, name, parent=parent, action=action, when=when))


@key.command(
    examples="""\
  reqkey key parse domain/orders
  reqkey key parse domain/orders/subdomain/default/class/book_order/state/open/saction/entry/submit
  reqkey -v key parse domain/orders/subdomain/default/usecase/checkout"""
)
@click.argument("raw")
@click.pass_obj
def parse(app: AppContext, raw: str) -> None:
    """Parse a stored key string and show its structure."""
    svc = KeyService(app.workspace)
    app.emit(svc.parse(raw))


@key.command(
    examples="""\
  reqkey key preen " Domain / Orders "
  reqkey key preen --name-only " Book_Order "
  reqkey -q key preen DOMAIN/Orders"""
)
@click.argument("raw")
@click.option("--name-only", is_flag=True, help="Preen a single local name, not a whole key.")
@click.pass_obj
def preen(app: AppContext, raw: str, name_only: bool) -> None:
    """Canonicalize a key string (trim and lowercase every token)."""
    svc = KeyService(app.workspace)
    app.emit(svc.preen(raw, name_only=name_only))


@key.command(
    examples="""\
  reqkey key lint book_order
  reqkey key lint BookOrder
  reqkey --json key lint "book order\""""
)
@click.argument("name")
@click.pass_obj
def lint(app: AppContext, name: str) -> None:
    """Suggest snake_case fixes for a local name (advisory only)."""
    svc = KeyService(app.workspace)
    app.emit(svc.lint(name))
