"""Command group: far-from-triangle-free certification."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from trifree.commands._base import TriGroup, epsilon_option, file_option, graph_argument
from trifree.services.farness import FarnessService

if TYPE_CHECKING:
    from trifree.commands._context import AppContext

_FAR_EXAMPLES = """\
  trifree far decide graph.txt --epsilon 1/50
  trifree far certify graph.txt --packing packing.txt --epsilon 0.02
  trifree --json far decide graph.json -e 0.1"""


@click.group(cls=TriGroup, examples=_FAR_EXAMPLES)
def far() -> None:
    """Certify or refute that a graph is far from triangle-free."""


@far.command(
    examples="""\
  trifree far certify graph.txt --packing packing.txt --epsilon 1/50
  trifree -q far certify graph.txt -p packing.yaml"""
)
@graph_argument()
@file_option("-p", "--packing", "packing_path", required=True, help="Edge-disjoint packing.")
@epsilon_option()
@click.pass_obj
def certify(app: AppContext, graph_path: Path, packing_path: Path, epsilon: str | None) -> None:
    """Check whether a packing proves GRAPH is epsilon-far from triangle-free."""
    app.emit(app.service(FarnessService, graph_path).certify(packing_path, epsilon=epsilon))


@far.command(
    examples="""\
  trifree far decide graph.txt --epsilon 0.05
  trifree -q far decide graph.txt -e 1/20"""
)
@graph_argument()
@epsilon_option()
@click.pass_obj
def decide(app: AppContext, graph_path: Path, epsilon: str | None) -> None:
    """Decide far-from-triangle-free by certificate or refutation."""
    app.emit(app.service(FarnessService, graph_path).decide(epsilon=epsilon))
