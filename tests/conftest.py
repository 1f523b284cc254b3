"""Shared pytest fixtures and test helpers for trifree tests."""

from __future__ import annotations

import json
from collections.abc import Generator, Iterable
from pathlib import Path

import pytest
from click.testing import CliRunner

from trifree.domain.triangles import EdgeListGraph, Vertex
from trifree.infrastructure.graph.engine import GraphEngine
from trifree.services.telemetry import disable_telemetry

type EdgeList = list[tuple[Vertex, Vertex]]

# ---------------------------------------------------------------------------
# Reference graphs
# ---------------------------------------------------------------------------

TWO_TRIANGLES: EdgeList = [(1, 2), (2, 3), (1, 3), (4, 5), (5, 6), (4, 6)]
# Triangle {1,2,3} plus vertex 4 joined to 1 and 2; {1,2,4} closes a second triangle
PARTIAL_EXTENSION: EdgeList = [(1, 2), (2, 3), (1, 3), (1, 4), (2, 4)]
# Triangle {1,2,3} plus a pendant vertex 4 joined to 1 only
PENDANT: EdgeList = [(1, 2), (2, 3), (1, 3), (1, 4)]
K4: EdgeList = [(1, 2), (1, 3), (1, 4), (2, 3), (2, 4), (3, 4)]
# Two triangles sharing vertex 3 only
BOWTIE: EdgeList = [(1, 2), (2, 3), (1, 3), (3, 4), (4, 5), (3, 5)]
C5: EdgeList = [(1, 2), (2, 3), (3, 4), (4, 5), (1, 5)]


def complete_edges(n: int) -> EdgeList:
    return [(u, v) for u in range(1, n + 1) for v in range(u + 1, n + 1)]


def oracle(
    edges: Iterable[tuple[Vertex, Vertex]], vertices: Iterable[Vertex] = ()
) -> EdgeListGraph:
    """An in-memory adjacency oracle for domain tests."""
    return EdgeListGraph.build(vertices, edges)


def write_graph(
    path: Path,
    edges: Iterable[tuple[Vertex, Vertex]],
    *,
    vertices: Iterable[Vertex] = (),
) -> Path:
    """Write a graph file whose format follows *path*'s suffix."""
    edges = list(edges)
    vertices = list(vertices)
    if path.suffix == ".json":
        path.write_text(json.dumps({"vertices": vertices, "edges": [list(e) for e in edges]}))
    elif path.suffix in (".yaml", ".yml"):
        lines = [f"vertices: {json.dumps(vertices)}", "edges:"]
        lines += [f"  - [{json.dumps(u)}, {json.dumps(v)}]" for u, v in edges]
        path.write_text("\n".join(lines) + "\n")
    else:
        lines = [str(v) for v in vertices] + [f"{u} {v}" for u, v in edges]
        path.write_text("\n".join(lines) + "\n")
    return path


def write_packing(path: Path, triples: Iterable[tuple[Vertex, Vertex, Vertex]]) -> Path:
    """Write a packing file; JSON for ``.json``, one triple per line otherwise."""
    triples = [list(t) for t in triples]
    if path.suffix == ".json":
        path.write_text(json.dumps({"triangles": triples}))
    else:
        path.write_text("\n".join(" ".join(str(v) for v in t) for t in triples) + "\n")
    return path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _telemetry_off() -> Generator[None]:
    """Keep the telemetry ContextVar from leaking between tests."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty temp dir so no stray trifree.toml is discovered."""
    monkeypatch.delenv("TRIFREE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def two_triangles_engine() -> GraphEngine:
    return GraphEngine.from_edges(TWO_TRIANGLES)


@pytest.fixture
def k4_engine() -> GraphEngine:
    return GraphEngine.from_edges(K4)


@pytest.fixture
def graph_file(tmp_path: Path) -> Path:
    """Two disjoint triangles as an edge-list file."""
    return write_graph(tmp_path / "graph.txt", TWO_TRIANGLES)
