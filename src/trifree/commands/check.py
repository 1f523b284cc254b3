"""Standalone command: triangle structure checks."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from trifree.commands._base import TriCommand, graph_argument
from trifree.services.triangles import TriangleService

if TYPE_CHECKING:
    from trifree.commands._context import AppContext


@click.command(
    cls=TriCommand,
    examples="""\
  trifree check graph.txt
  trifree -q check graph.txt
  trifree --json check graph.json""",
)
@graph_argument()
@click.pass_obj
def check(app: AppContext, graph_path: Path) -> None:
    """Decide triangle-free, edge-disjoint triangles, and local linearity."""
    app.emit(app.service(TriangleService, graph_path).structure())
