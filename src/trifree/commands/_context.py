"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Configures logging and telemetry, builds graph
engines for the files commands name, and centralizes result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from trifree.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from trifree.config.settings import TrifreeSettings
    from trifree.infrastructure.graph.engine import GraphEngine
    from trifree.services.base import BaseService
    from trifree.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. Graph files are only
    read when a service first touches the graph, so ``--help`` and
    ``--version`` never do any I/O.
    """

    def __init__(self, settings: TrifreeSettings) -> None:
        self.settings = settings

        from trifree.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )

        if settings.verbose:
            from trifree.services.telemetry import enable_telemetry

            enable_telemetry()

    def engine(self, graph_path: Path) -> GraphEngine:
        """A lazily loading engine for *graph_path*."""
        from trifree.infrastructure.graph.engine import GraphEngine

        return GraphEngine(graph_path)

    def service[S: BaseService](self, cls: type[S], graph_path: Path) -> S:
        """Construct *cls* over *graph_path* with the configured sections."""
        return cls(
            self.engine(graph_path),
            analysis=self.settings.analysis,
            certify=self.settings.certify,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            max_triangles=self.settings.output.max_triangles,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
