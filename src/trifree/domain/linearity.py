"""Edge-disjointness and local linearity of a graph's triangles.

Edge-disjointness has two characterisations that must always agree:

1. *pairwise*: any two distinct triangles share at most one vertex;
2. *per-edge*: every vertex pair lies in at most one triangle.

:func:`edge_disjoint_triangles` evaluates both and raises
:class:`InvariantViolation` if they ever differ.

Local linearity adds coverage: every edge lies in some triangle. For a
locally linear graph the double count of edge/triangle incidences is
exact, ``|E| = 3·|T|``; for an edge-disjoint one it is ``3·|T| <= |E|``.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from dataclasses import dataclass, field

from trifree.domain.cliques import EnumerationStrategy, enumerate_triangles, sorted_triangles
from trifree.domain.errors import InvariantViolation, PreconditionViolation
from trifree.domain.triangles import AdjacencyOracle, Edge, Triangle, edge_set


def find_overlapping_pair(triangles: Iterable[Triangle]) -> tuple[Triangle, Triangle] | None:
    """Return the first pair of distinct triangles sharing two or more vertices.

    Pairs are scanned in canonical order, so the witness is deterministic.
    """
    for x, y in itertools.combinations(sorted_triangles(set(triangles)), 2):
        if len(x.shared(y)) > 1:
            return (x, y)
    return None


def triangles_by_edge(triangles: Iterable[Triangle]) -> dict[Edge, list[Triangle]]:
    """Map every edge to the triangles containing it (canonical order)."""
    index: dict[Edge, list[Triangle]] = {}
    for tri in sorted_triangles(set(triangles)):
        for edge in tri.edges():
            index.setdefault(edge, []).append(tri)
    return index


def per_edge_multiplicity_ok(triangles: Iterable[Triangle]) -> bool:
    """Per-edge formulation: no vertex pair lies in more than one triangle."""
    return all(len(tris) <= 1 for tris in triangles_by_edge(triangles).values())


def edge_disjoint_triangles(triangles: Iterable[Triangle]) -> bool:
    """Decide edge-disjointness, cross-checking both characterisations."""
    tris = frozenset(triangles)
    pairwise = find_overlapping_pair(tris) is None
    per_edge = per_edge_multiplicity_ok(tris)
    if pairwise != per_edge:
        msg = "Pairwise and per-edge edge-disjointness disagree"
        raise InvariantViolation(msg, pairwise=pairwise, per_edge=per_edge)
    return pairwise


def is_edge_disjoint_triangles(
    oracle: AdjacencyOracle,
    *,
    strategy: EnumerationStrategy | str = EnumerationStrategy.PRUNED,
) -> bool:
    """True if the triangles of the graph pairwise share at most one vertex."""
    return edge_disjoint_triangles(enumerate_triangles(oracle, strategy=strategy))


def uncovered_edges(oracle: AdjacencyOracle, triangles: Iterable[Triangle]) -> list[Edge]:
    """Edges of the graph that lie in no triangle, in canonical order."""
    covered = triangles_by_edge(triangles)
    return sorted((e for e in edge_set(oracle) if e not in covered), key=Edge.sort_key)


def is_locally_linear(
    oracle: AdjacencyOracle,
    *,
    strategy: EnumerationStrategy | str = EnumerationStrategy.PRUNED,
) -> bool:
    """True if every edge lies in exactly one triangle."""
    tris = enumerate_triangles(oracle, strategy=strategy)
    return edge_disjoint_triangles(tris) and not uncovered_edges(oracle, tris)


def edge_disjoint_edge_bound(
    oracle: AdjacencyOracle,
    *,
    strategy: EnumerationStrategy | str = EnumerationStrategy.PRUNED,
) -> tuple[int, int]:
    """Return ``(3·|T|, |E|)`` for an edge-disjoint graph, where ``3·|T| <= |E|``.

    Each triangle contributes three edges and no edge is counted twice, so
    the incidence count is at most the edge count.

    Raises:
        PreconditionViolation: The triangles are not edge-disjoint.
    """
    tris = enumerate_triangles(oracle, strategy=strategy)
    witness = find_overlapping_pair(tris)
    if witness is not None:
        msg = f"Triangles {witness[0]} and {witness[1]} share an edge"
        raise PreconditionViolation(msg, witness=[t.to_list() for t in witness])
    incidences = 3 * len(tris)
    edges = len(edge_set(oracle))
    if incidences > edges:
        msg = f"3·|T| = {incidences} exceeds |E| = {edges} for edge-disjoint triangles"
        raise InvariantViolation(msg, incidences=incidences, edges=edges)
    return incidences, edges


def locally_linear_edge_count(
    oracle: AdjacencyOracle,
    *,
    strategy: EnumerationStrategy | str = EnumerationStrategy.PRUNED,
) -> int:
    """Return ``|E|`` of a locally linear graph, which equals ``3·|T|`` exactly.

    Computed from the incidence count directly rather than from the
    inequality of :func:`edge_disjoint_edge_bound`.

    Raises:
        PreconditionViolation: The graph is not locally linear.
    """
    tris = enumerate_triangles(oracle, strategy=strategy)
    witness = find_overlapping_pair(tris)
    if witness is not None:
        msg = f"Not locally linear: triangles {witness[0]} and {witness[1]} share an edge"
        raise PreconditionViolation(msg, witness=[t.to_list() for t in witness])
    missing = uncovered_edges(oracle, tris)
    if missing:
        msg = f"Not locally linear: edge {missing[0]} lies in no triangle"
        raise PreconditionViolation(msg, uncovered=[e.to_list() for e in missing])

    incidences = 3 * len(tris)
    edges = len(edge_set(oracle))
    if incidences != edges:
        msg = f"|E| = {edges} differs from 3·|T| = {incidences} in a locally linear graph"
        raise InvariantViolation(msg, incidences=incidences, edges=edges)
    return incidences


@dataclass(frozen=True)
class LinearityReport:
    """Everything the structure checkers know about one graph."""

    vertex_count: int
    edge_count: int
    triangles: list[Triangle]
    edge_disjoint: bool
    characterizations_checked: bool
    locally_linear: bool
    overlapping_pair: tuple[Triangle, Triangle] | None = None
    uncovered: list[Edge] = field(default_factory=list)

    @property
    def triangle_free(self) -> bool:
        return not self.triangles

    @property
    def incidence_count(self) -> int:
        return 3 * len(self.triangles)


def analyze_linearity(
    oracle: AdjacencyOracle,
    *,
    strategy: EnumerationStrategy | str = EnumerationStrategy.PRUNED,
    verify_characterizations: bool = True,
) -> LinearityReport:
    """Run every structure check once and collect witnesses."""
    tris = enumerate_triangles(oracle, strategy=strategy)
    witness = find_overlapping_pair(tris)
    disjoint = witness is None
    per_edge = per_edge_multiplicity_ok(tris) if verify_characterizations else disjoint
    if per_edge != disjoint:
        msg = "Pairwise and per-edge edge-disjointness disagree"
        raise InvariantViolation(msg, pairwise=disjoint, per_edge=per_edge)

    missing = uncovered_edges(oracle, tris)
    return LinearityReport(
        vertex_count=len(set(oracle.vertices())),
        edge_count=len(edge_set(oracle)),
        triangles=sorted_triangles(tris),
        edge_disjoint=disjoint,
        characterizations_checked=verify_characterizations,
        locally_linear=disjoint and not missing,
        overlapping_pair=witness,
        uncovered=missing,
    )
