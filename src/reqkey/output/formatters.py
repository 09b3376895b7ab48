"""Output mode selection for ServiceResult.

The CLI renders a ServiceResult for humans (Rich tables and status lines),
for scripts (``--quiet``: bare keys, one per line), or for machines
(``--json``). JSON wins over quiet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from reqkey.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from reqkey.services.result import ServiceResult


class OutputSettings(BaseModel):
    """The subset of CLI flags that affects rendering."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        settings: Output mode; defaults to human-readable, non-verbose.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
