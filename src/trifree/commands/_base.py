"""Custom Click base classes and shared parameters.

TriCommand and TriGroup accept an ``examples`` parameter; passing
``--examples`` prints them and exits, keeping ``--help`` short.
``graph_argument`` and ``epsilon_option`` are reused by every analysis
command so file handling and epsilon parsing look the same everywhere.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
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
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class TriCommand(click.Command):
    """Click Command that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class TriGroup(click.Group):
    """Click Group that supports an ``--examples`` flag.

    ``command_class = TriCommand`` lets every subcommand take ``examples=``.
    """

    command_class = TriCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


def _file_type() -> click.Path:
    return click.Path(exists=True, dir_okay=False, readable=True, path_type=Path)


def graph_argument(name: str = "graph_path") -> Any:
    """Positional GRAPH file argument."""
    return click.argument(name, metavar="GRAPH", type=_file_type())


def file_option(*decls: str, required: bool = False, help: str) -> Any:  # noqa: A002
    """An option naming an existing file (subgraph or packing)."""
    return click.option(*decls, type=_file_type(), required=required, help=help)


def epsilon_option() -> Any:
    """``--epsilon`` accepting decimals or fractions such as ``1/20``."""
    return click.option(
        "-e",
        "--epsilon",
        default=None,
        help="Threshold fraction (e.g. 0.05 or 1/20). Defaults to [certify] default_epsilon.",
    )
