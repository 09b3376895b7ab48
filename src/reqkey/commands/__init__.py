"""Subcommand modules for reqkey.

:func:`register_commands` imports command modules only when the root group
is built, keeping ``reqkey --help`` cheap.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command groups and standalone commands on *cli*."""
    # --- Groups ---
    from reqkey.commands.index import index
    from reqkey.commands.key import key

    cli.add_command(key)
    cli.add_command(index)

    # --- Standalone commands ---
    from reqkey.commands.check import check

    cli.add_command(check)
