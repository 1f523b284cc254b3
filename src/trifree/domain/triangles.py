"""Core value types: vertices, edges, triangles, and the adjacency oracle.

Edges and triangles are stored as canonical sorted tuples so identity is
by vertex set, never by traversal order. Vertices may mix ``int`` and
``str``; they are ordered by ``(type name, value)``.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from trifree.domain.errors import PreconditionViolation

type Vertex = int | str


def vertex_key(v: Vertex) -> tuple[str, Vertex]:
    """Sort key giving a total order over mixed int/str vertex sets."""
    return (type(v).__name__, v)


def sort_vertices(vertices: Iterable[Vertex]) -> list[Vertex]:
    """Return *vertices* in canonical order."""
    return sorted(vertices, key=vertex_key)


@runtime_checkable
class AdjacencyOracle(Protocol):
    """Read-only view of a finite simple graph.

    ``adjacent`` must be symmetric and irreflexive.
    """

    def vertices(self) -> Iterable[Vertex]: ...

    def adjacent(self, u: Vertex, v: Vertex) -> bool: ...


@dataclass(frozen=True)
class Edge:
    """An unordered pair of distinct vertices."""

    u: Vertex
    v: Vertex

    def __post_init__(self) -> None:
        if self.u == self.v:
            msg = f"Edge endpoints must differ, got loop on {self.u!r}"
            raise PreconditionViolation(msg, vertex=self.u)
        if vertex_key(self.v) < vertex_key(self.u):
            # Canonicalise in place; dataclass is frozen.
            u, v = self.v, self.u
            object.__setattr__(self, "u", u)
            object.__setattr__(self, "v", v)

    @property
    def vertices(self) -> tuple[Vertex, Vertex]:
        return (self.u, self.v)

    def sort_key(self) -> tuple[tuple[str, Vertex], ...]:
        return (vertex_key(self.u), vertex_key(self.v))

    def to_list(self) -> list[Vertex]:
        return [self.u, self.v]

    def __str__(self) -> str:
        return f"{{{self.u}, {self.v}}}"


@dataclass(frozen=True)
class Triangle:
    """A 3-element vertex set, held as a canonical sorted triple.

    Construction only checks that the vertices are distinct; whether they
    are pairwise adjacent is a property of a particular graph, see
    :func:`is_triangle_in`.
    """

    vertices: tuple[Vertex, Vertex, Vertex]

    def __post_init__(self) -> None:
        vertices = tuple(self.vertices)
        if len(vertices) != 3 or len(set(vertices)) != 3:
            msg = f"Triangle vertices must be three distinct vertices, got {vertices!r}"
            raise PreconditionViolation(msg, vertices=list(vertices))
        object.__setattr__(self, "vertices", tuple(sort_vertices(vertices)))

    @classmethod
    def of(cls, a: Vertex, b: Vertex, c: Vertex) -> Triangle:
        """Build a triangle from three vertices in any order."""
        return cls((a, b, c))

    def edges(self) -> tuple[Edge, Edge, Edge]:
        """The three edges of the triangle, in canonical order."""
        a, b, c = self.vertices
        return (Edge(a, b), Edge(a, c), Edge(b, c))

    def shared(self, other: Triangle) -> frozenset[Vertex]:
        """Vertices this triangle has in common with *other*."""
        return frozenset(self.vertices) & frozenset(other.vertices)

    def contains_edge(self, edge: Edge) -> bool:
        return edge.u in self.vertices and edge.v in self.vertices

    def sort_key(self) -> tuple[tuple[str, Vertex], ...]:
        return tuple(vertex_key(v) for v in self.vertices)

    def to_list(self) -> list[Vertex]:
        return list(self.vertices)

    def __str__(self) -> str:
        return "{" + ", ".join(str(v) for v in self.vertices) + "}"


type TriangleSet = frozenset[Triangle]
type EdgeSet = frozenset[Edge]


def is_triangle_in(oracle: AdjacencyOracle, triangle: Triangle) -> bool:
    """True if all three vertices belong to the graph and are pairwise adjacent."""
    present = set(oracle.vertices())
    if not all(v in present for v in triangle.vertices):
        return False
    return all(oracle.adjacent(e.u, e.v) for e in triangle.edges())


def edge_set(oracle: AdjacencyOracle) -> EdgeSet:
    """All unordered adjacent pairs of *oracle*."""
    ordered = sort_vertices(oracle.vertices())
    return frozenset(
        Edge(u, v) for u, v in itertools.combinations(ordered, 2) if oracle.adjacent(u, v)
    )


@dataclass(frozen=True)
class EdgeListGraph:
    """Minimal immutable :class:`AdjacencyOracle` over an explicit edge set.

    Used for subgraphs built during analysis; endpoints of every edge are
    added to the vertex set.
    """

    vertex_set: frozenset[Vertex]
    edges: EdgeSet

    @classmethod
    def build(
        cls,
        vertices: Iterable[Vertex] = (),
        edges: Iterable[tuple[Vertex, Vertex]] = (),
    ) -> EdgeListGraph:
        edge_objs = frozenset(Edge(u, v) for u, v in edges)
        verts = set(vertices)
        for e in edge_objs:
            verts.update(e.vertices)
        return cls(frozenset(verts), edge_objs)

    def vertices(self) -> Iterable[Vertex]:
        return self.vertex_set

    def adjacent(self, u: Vertex, v: Vertex) -> bool:
        if u == v:
            return False
        return Edge(u, v) in self.edges

    def without(self, removed: Iterable[Edge]) -> EdgeListGraph:
        """Same vertex set with *removed* edges deleted."""
        return EdgeListGraph(self.vertex_set, self.edges - frozenset(removed))
