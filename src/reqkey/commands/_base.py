"""Click base classes that add an ``--examples`` flag.

``ReqkeyCommand`` and ``ReqkeyGroup`` accept an ``examples`` string. Passing
``--examples`` prints it and exits, which keeps ``--help`` short.
"""

from __future__ import annotations

from typing import Any

import click


def _attach_examples(cmd: click.Command, examples: str) -> None:
    """Append an eager ``--examples`` option to *cmd*."""

    def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=_print_examples,
            help="Show usage examples.",
        )
    )


class ReqkeyCommand(click.Command):
    """Command with an optional ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _attach_examples(self, examples)


class ReqkeyGroup(click.Group):
    """Group with an optional ``--examples`` flag.

    Subcommands default to :class:`ReqkeyCommand`, so ``examples=`` works on
    ``@group.command(...)`` without passing ``cls=``.
    """

    command_class = ReqkeyCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _attach_examples(self, examples)
