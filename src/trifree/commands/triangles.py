"""Standalone command: enumerate triangles."""

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
  trifree triangles graph.txt
  trifree -q triangles graph.json
  trifree --json triangles graph.yaml""",
)
@graph_argument()
@click.pass_obj
def triangles(app: AppContext, graph_path: Path) -> None:
    """List every triangle (3-clique) of GRAPH."""
    app.emit(app.service(TriangleService, graph_path).triangles())
