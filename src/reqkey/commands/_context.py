"""AppContext: shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. It opens the workspace lazily and owns result
emission: stdout and exit 0 on success, stderr and exit 1 on failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from reqkey.config.logging import configure_logging
from reqkey.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from reqkey.config.settings import ReqkeySettings
    from reqkey.infrastructure.workspace import Workspace
    from reqkey.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The workspace is created on first use, so ``--help`` and ``--version``
    never touch the project directory.
    """

    def __init__(self, settings: ReqkeySettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def workspace(self) -> Workspace:
        if self._workspace is None:
            from reqkey.infrastructure.workspace import Workspace

            self._workspace = Workspace(self.settings)
        return self._workspace

    def close(self) -> None:
        if self._workspace is not None:
            self._workspace.close()

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: output goes to stdout. Warnings go to stderr, except in
          JSON mode where they are part of the payload.
        * Failure: output goes to stderr and the process exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
