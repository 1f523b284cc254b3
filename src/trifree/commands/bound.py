"""Standalone command: verify the triangle-packing bound."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from trifree.commands._base import TriCommand, file_option, graph_argument
from trifree.services.packing import PackingService

if TYPE_CHECKING:
    from trifree.commands._context import AppContext


@click.command(
    cls=TriCommand,
    examples="""\
  trifree bound graph.txt --subgraph pruned.txt
  trifree bound graph.txt -s pruned.txt -p packing.txt
  trifree -v bound graph.json -s pruned.json""",
)
@graph_argument()
@file_option("-s", "--subgraph", "subgraph_path", required=True, help="Triangle-free subgraph H.")
@file_option("-p", "--packing", "packing_path", help="Edge-disjoint packing (default: greedy).")
@click.pass_obj
def bound(
    app: AppContext,
    graph_path: Path,
    subgraph_path: Path,
    packing_path: Path | None,
) -> None:
    """Prove |packing| <= |E(G)| - |E(H)| for a triangle-free subgraph H."""
    service = app.service(PackingService, graph_path)
    app.emit(service.bound(subgraph_path, packing_path=packing_path))
