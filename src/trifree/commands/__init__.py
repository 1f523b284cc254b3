"""Subcommand modules for trifree.

Provides register_commands() which uses deferred imports to keep
``trifree --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from trifree.commands.far import far

    cli.add_command(far)

    # --- Standalone commands ---
    from trifree.commands.bound import bound
    from trifree.commands.check import check
    from trifree.commands.triangles import triangles

    cli.add_command(triangles)
    cli.add_command(check)
    cli.add_command(bound)
