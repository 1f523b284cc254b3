"""Rich/JSON output dispatch.

The CLI renders ServiceResult for humans (Rich tables, colored verdicts)
or machines (--json). The formatter layer picks the mode; the
renderers in :mod:`trifree.output.renderers` do the drawing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from trifree.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from trifree.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output-mode flags resolved from the CLI."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    max_triangles: int = 50


def format_result(
    result: ServiceResult,
    *,
    settings: OutputSettings | None = None,
    json_output: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        settings: Output mode; when omitted, built from *json_output*.
        json_output: Shorthand for ``OutputSettings(json_output=True)``.
    """
    if settings is None:
        settings = OutputSettings(json_output=json_output)
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose, max_triangles=settings.max_triangles)
