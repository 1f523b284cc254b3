"""GraphEngine — lazy-built NetworkX graph from a graph file.

Rebuilt per invocation, no cross-invocation cache. The graph is frozen
after loading so analyses can never mutate the caller's snapshot.
Commands that don't need graph operations never build it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

import networkx as nx

from trifree.domain.errors import GraphFormatError
from trifree.infrastructure.graph.io import read_graph_document

if TYPE_CHECKING:
    from trifree.domain.triangles import Vertex

type _Graph = nx.Graph


class NetworkXOracle:
    """Adjacency oracle over an undirected NetworkX graph."""

    def __init__(self, graph: _Graph) -> None:
        self._graph = graph

    def vertices(self) -> Iterable[Vertex]:
        return self._graph.nodes

    def adjacent(self, u: Vertex, v: Vertex) -> bool:
        return u != v and self._graph.has_edge(u, v)


def build_graph(
    vertices: Iterable[Vertex],
    edges: Iterable[tuple[Vertex, Vertex]],
) -> _Graph:
    """Build a frozen simple graph, rejecting self-loops."""
    g: _Graph = nx.Graph()
    g.add_nodes_from(vertices)
    for u, v in edges:
        if u == v:
            msg = f"Self-loop on vertex {u!r}; graphs must be simple"
            raise GraphFormatError(msg, vertex=u)
        g.add_edge(u, v)
    return nx.freeze(g)


class GraphEngine:
    """Lazy-loading graph engine backed by a graph file (or an in-memory graph)."""

    def __init__(self, path: Path | None = None, *, graph: _Graph | None = None) -> None:
        self._path = path
        self._graph: _Graph | None = nx.freeze(graph.copy()) if graph is not None else None

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[Vertex, Vertex]],
        *,
        vertices: Iterable[Vertex] = (),
    ) -> GraphEngine:
        return cls(graph=build_graph(vertices, edges))

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def graph(self) -> _Graph:
        """Return the graph, loading from file on first access."""
        if self._graph is None:
            self._graph = self._load()
        return self._graph

    @property
    def oracle(self) -> NetworkXOracle:
        return NetworkXOracle(self.graph)

    def invalidate(self) -> None:
        """Clear the cached graph, forcing a reload on next access."""
        if self._path is not None:
            self._graph = None

    def relabel(self, mapping: Mapping[Vertex, Vertex]) -> GraphEngine:
        """An isomorphic copy with vertices renamed through *mapping*.

        Vertices missing from *mapping* keep their name; the resulting image
        of the whole vertex set must still be injective.
        """
        targets = [mapping.get(v, v) for v in self.graph]
        if len(set(targets)) != len(targets):
            msg = "Relabelling must be injective on the vertex set"
            raise GraphFormatError(msg)
        return GraphEngine(graph=nx.relabel_nodes(self.graph, dict(mapping), copy=True))

    def _load(self) -> _Graph:
        if self._path is None:
            msg = "No graph file configured"
            raise GraphFormatError(msg)
        doc = read_graph_document(self._path)
        return build_graph(doc.vertices, doc.edges)
