"""Triangle-packing bound — a disjoint packing lower-bounds edge deletions.

For a graph G, a triangle-free subgraph H <= G and a set ``tris`` of
pairwise edge-disjoint triangles of G::

    |tris| <= |E(G)| - |E(H)|

Proof by charging: every triangle of ``tris`` must lose at least one edge
on the way from G to H, otherwise H would contain it. Charge each triangle
to its first lost edge (canonical order). Two edge-disjoint triangles have
no common edge, so no edge is charged twice and the charging map is an
injection into ``E(G) \\ E(H)``.

All preconditions are checked before the bound is reported; a violated
precondition raises :class:`PreconditionViolation`, never a number.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from fractions import Fraction

from trifree.domain.cliques import enumerate_triangles, sorted_triangles
from trifree.domain.errors import InvariantViolation, PreconditionViolation
from trifree.domain.triangles import (
    AdjacencyOracle,
    Edge,
    EdgeSet,
    Triangle,
    TriangleSet,
    Vertex,
    edge_set,
    is_triangle_in,
)


@dataclass(frozen=True)
class PackingCertificate:
    """A set of triangles claimed pairwise edge-disjoint, plus the size it must reach."""

    triangles: TriangleSet
    required: Fraction = Fraction(0)

    @classmethod
    def from_triples(
        cls,
        triples: Iterable[Iterable[Vertex]],
        *,
        required: Fraction | int = 0,
    ) -> PackingCertificate:
        tris: set[Triangle] = set()
        for triple in triples:
            items = list(triple)
            if len(items) != 3:
                msg = f"A packing entry needs exactly 3 vertices, got {items!r}"
                raise PreconditionViolation(msg, entry=items)
            tris.add(Triangle.of(*items))
        return cls(frozenset(tris), Fraction(required))

    @property
    def size(self) -> int:
        return len(self.triangles)

    @property
    def meets_requirement(self) -> bool:
        return self.size >= self.required

    def with_requirement(self, required: Fraction | int) -> PackingCertificate:
        return replace(self, required=Fraction(required))


@dataclass(frozen=True)
class PackingBound:
    """Outcome of :func:`packing_bound` — the inequality and its charging map."""

    packing_size: int
    graph_edges: int
    subgraph_edges: int
    witnesses: dict[Triangle, Edge] = field(default_factory=dict)

    @property
    def deleted_edges(self) -> int:
        return self.graph_edges - self.subgraph_edges

    @property
    def holds(self) -> bool:
        return self.packing_size <= self.deleted_edges


def validate_packing(graph: AdjacencyOracle, triangles: Iterable[Triangle]) -> TriangleSet:
    """Check every member is a triangle of *graph* and the members are edge-disjoint.

    Raises:
        PreconditionViolation: A member is not a triangle of the graph, or
            two members share two vertices.
    """
    tris = frozenset(triangles)
    for tri in sorted_triangles(tris):
        if not is_triangle_in(graph, tri):
            msg = f"{tri} is not a triangle of the graph"
            raise PreconditionViolation(msg, triangle=tri.to_list())
    for x, y in itertools.combinations(sorted_triangles(tris), 2):
        if len(x.shared(y)) > 1:
            msg = f"Packing is not edge-disjoint: {x} and {y} share {len(x.shared(y))} vertices"
            raise PreconditionViolation(msg, witness=[x.to_list(), y.to_list()])
    return tris


def validate_triangle_free_subgraph(
    graph: AdjacencyOracle, subgraph: AdjacencyOracle
) -> tuple[EdgeSet, EdgeSet]:
    """Check that *subgraph* is a triangle-free subgraph of *graph*.

    Returns ``(E(G), E(H))`` so callers do not recompute them.

    Raises:
        PreconditionViolation: H has a vertex or an edge G lacks, or H
            contains a triangle.
    """
    g_vertices = set(graph.vertices())
    extra = [v for v in subgraph.vertices() if v not in g_vertices]
    if extra:
        msg = f"Subgraph has vertices outside the graph: {extra!r}"
        raise PreconditionViolation(msg, vertices=extra)

    g_edges = edge_set(graph)
    h_edges = edge_set(subgraph)
    foreign = sorted(h_edges - g_edges, key=Edge.sort_key)
    if foreign:
        msg = f"Subgraph edge {foreign[0]} is not an edge of the graph"
        raise PreconditionViolation(msg, edges=[e.to_list() for e in foreign])

    h_triangles = enumerate_triangles(subgraph)
    if h_triangles:
        first = sorted_triangles(h_triangles)[0]
        msg = f"Subgraph is not triangle-free: it contains {first}"
        raise PreconditionViolation(msg, triangle=first.to_list())
    return g_edges, h_edges


def charge_witnesses(
    triangles: Iterable[Triangle],
    subgraph_edges: EdgeSet,
) -> dict[Triangle, Edge]:
    """Assign each triangle the first of its edges missing from the subgraph.

    Raises:
        PreconditionViolation: A triangle keeps all three edges, so the
            subgraph is not triangle-free.
        InvariantViolation: Two triangles were charged the same edge, which
            only happens when they are not edge-disjoint.
    """
    charged: dict[Triangle, Edge] = {}
    owner: dict[Edge, Triangle] = {}
    for tri in sorted_triangles(set(triangles)):
        witness = next((e for e in tri.edges() if e not in subgraph_edges), None)
        if witness is None:
            msg = f"{tri} survives in the subgraph, so it is not triangle-free"
            raise PreconditionViolation(msg, triangle=tri.to_list())
        if witness in owner:
            msg = f"Edge {witness} charged to both {owner[witness]} and {tri}"
            raise InvariantViolation(msg, edge=witness.to_list())
        owner[witness] = tri
        charged[tri] = witness
    return charged


def packing_bound(
    graph: AdjacencyOracle,
    subgraph: AdjacencyOracle,
    triangles: Iterable[Triangle],
) -> PackingBound:
    """Prove ``|tris| <= |E(G)| - |E(H)|`` by an explicit injective charging."""
    tris = validate_packing(graph, triangles)
    g_edges, h_edges = validate_triangle_free_subgraph(graph, subgraph)
    witnesses = charge_witnesses(tris, h_edges)

    bound = PackingBound(
        packing_size=len(tris),
        graph_edges=len(g_edges),
        subgraph_edges=len(h_edges),
        witnesses=witnesses,
    )
    if not bound.holds:
        msg = f"Packing of {bound.packing_size} exceeds {bound.deleted_edges} deleted edges"
        raise InvariantViolation(msg, packing_size=bound.packing_size, deleted=bound.deleted_edges)
    return bound


def greedy_packing(triangles: Iterable[Triangle]) -> TriangleSet:
    """A maximal edge-disjoint packing, taken greedily in canonical order.

    Every triangle left out shares an edge with some chosen one.
    """
    used: set[Edge] = set()
    chosen: set[Triangle] = set()
    for tri in sorted_triangles(set(triangles)):
        edges = tri.edges()
        if any(e in used for e in edges):
            continue
        used.update(edges)
        chosen.add(tri)
    return frozenset(chosen)
