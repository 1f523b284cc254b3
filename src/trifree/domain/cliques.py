"""Clique enumeration — every triangle of a graph, exactly once.

Two strategies share one contract:

- ``naive``: test every unordered vertex triple, Θ(|V|³) adjacency queries.
- ``pruned``: build neighbourhoods once (Θ(|V|²) queries), then for each
  edge ``u < v`` intersect ``N(u) ∩ N(v)`` keeping only ``w > v``.

Both return the same frozenset; callers needing a stable order use
:func:`sorted_triangles`.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from enum import StrEnum

from trifree.domain.triangles import (
    AdjacencyOracle,
    Triangle,
    TriangleSet,
    Vertex,
    sort_vertices,
)


class EnumerationStrategy(StrEnum):
    """How :func:`enumerate_triangles` walks the vertex set."""

    NAIVE = "naive"
    PRUNED = "pruned"


def _naive(ordered: list[Vertex], oracle: AdjacencyOracle) -> TriangleSet:
    found: set[Triangle] = set()
    for a, b, c in itertools.combinations(ordered, 3):
        if oracle.adjacent(a, b) and oracle.adjacent(a, c) and oracle.adjacent(b, c):
            found.add(Triangle((a, b, c)))
    return frozenset(found)


def _pruned(ordered: list[Vertex], oracle: AdjacencyOracle) -> TriangleSet:
    # Forward neighbours only, so each triangle is reached once from its smallest vertex.
    forward: dict[Vertex, set[Vertex]] = {v: set() for v in ordered}
    for u, v in itertools.combinations(ordered, 2):
        if oracle.adjacent(u, v):
            forward[u].add(v)

    found: set[Triangle] = set()
    for u in ordered:
        for v in forward[u]:
            for w in forward[u] & forward[v]:
                found.add(Triangle((u, v, w)))
    return frozenset(found)


def enumerate_triangles(
    oracle: AdjacencyOracle,
    *,
    strategy: EnumerationStrategy | str = EnumerationStrategy.PRUNED,
) -> TriangleSet:
    """Return every 3-subset of the vertex set whose pairs are all adjacent.

    Deterministic and duplicate-free: triangles are canonical sorted triples.
    """
    ordered = sort_vertices(set(oracle.vertices()))
    if EnumerationStrategy(strategy) is EnumerationStrategy.NAIVE:
        return _naive(ordered, oracle)
    return _pruned(ordered, oracle)


def sorted_triangles(triangles: Iterable[Triangle]) -> list[Triangle]:
    """Canonical order used wherever a "first" triangle matters."""
    return sorted(triangles, key=Triangle.sort_key)


def is_triangle_free(
    oracle: AdjacencyOracle,
    *,
    strategy: EnumerationStrategy | str = EnumerationStrategy.PRUNED,
) -> bool:
    """True if the graph contains no 3-clique."""
    return not enumerate_triangles(oracle, strategy=strategy)
