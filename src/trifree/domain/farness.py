"""Far-from-triangle-free certification.

``FarFromTriangleFree(G, ε)`` holds when every triangle-free subgraph
H <= G satisfies ``|E(G)| - |E(H)| >= ε·|V|²``. Quantifying over all H is
not checked by search. Instead:

- a large enough edge-disjoint packing *proves* the property (via
  :func:`~trifree.domain.packing.packing_bound`);
- necessary conditions *refute* it: ``ε < 1/2`` on a non-empty vertex set,
  ``ε·|V|² <= |E|`` (take H empty), ``ε <= 0`` when G is triangle-free;
- an explicit triangle-free H with too few deletions also refutes it.

Anything left over is reported as undetermined rather than guessed.
Epsilon is handled as an exact :class:`~fractions.Fraction`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import StrEnum
from fractions import Fraction

from trifree.domain.cliques import EnumerationStrategy, enumerate_triangles, sorted_triangles
from trifree.domain.errors import InvariantViolation, PreconditionViolation, UndecidedFarness
from trifree.domain.packing import (
    PackingCertificate,
    greedy_packing,
    validate_packing,
    validate_triangle_free_subgraph,
)
from trifree.domain.triangles import (
    AdjacencyOracle,
    Edge,
    EdgeListGraph,
    Triangle,
    TriangleSet,
    edge_set,
)

HALF = Fraction(1, 2)


def as_epsilon(value: Fraction | int | float | str) -> Fraction:
    """Convert *value* to an exact fraction (``0.1`` and ``"1/10"`` agree)."""
    if isinstance(value, bool):
        msg = f"Epsilon must be a number, got {value!r}"
        raise PreconditionViolation(msg, epsilon=value)
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    try:
        return Fraction(str(value).strip())
    except (ValueError, ZeroDivisionError) as exc:
        msg = f"Epsilon must be a number or fraction, got {value!r}"
        raise PreconditionViolation(msg, epsilon=str(value)) from exc


def required_deletions(vertex_count: int, epsilon: Fraction | int | float | str) -> Fraction:
    """``ε·|V|²`` — the deletions a far graph must force."""
    return as_epsilon(epsilon) * vertex_count * vertex_count


class NecessaryCondition(StrEnum):
    """Consequences of far-from-triangle-free that a caller can check cheaply."""

    RANGE = "range"
    EDGE_BUDGET = "edge_budget"
    TRIANGLE_FREE = "triangle_free"


_CONDITION_MESSAGES: dict[NecessaryCondition, str] = {
    NecessaryCondition.RANGE: "epsilon must be below 1/2 on a non-empty vertex set",
    NecessaryCondition.EDGE_BUDGET: "epsilon·|V|² exceeds |E|; deleting all edges suffices",
    NecessaryCondition.TRIANGLE_FREE: "the graph is triangle-free, which forces epsilon <= 0",
}


def describe_condition(condition: NecessaryCondition) -> str:
    return _CONDITION_MESSAGES[condition]


def necessary_violations(
    graph: AdjacencyOracle,
    epsilon: Fraction | int | float | str,
    *,
    triangles: TriangleSet | None = None,
) -> list[NecessaryCondition]:
    """Necessary conditions for ``FarFromTriangleFree(G, ε)`` that fail.

    An empty list means none of them rules the property out. On an empty
    vertex set every condition holds vacuously.
    """
    eps = as_epsilon(epsilon)
    n = len(set(graph.vertices()))
    if n == 0:
        return []

    violated: list[NecessaryCondition] = []
    if eps >= HALF:
        violated.append(NecessaryCondition.RANGE)
    if eps * n * n > len(edge_set(graph)):
        violated.append(NecessaryCondition.EDGE_BUDGET)
    tris = enumerate_triangles(graph) if triangles is None else triangles
    if eps > 0 and not tris:
        violated.append(NecessaryCondition.TRIANGLE_FREE)
    return violated


@dataclass(frozen=True)
class FarnessCertificate:
    """A validated edge-disjoint packing measured against ``ε·|V|²``."""

    epsilon: Fraction
    vertex_count: int
    packing: PackingCertificate

    @property
    def required(self) -> Fraction:
        return self.packing.required

    @property
    def certified(self) -> bool:
        return self.packing.meets_requirement

    def weaken(self, delta: Fraction | int | float | str) -> FarnessCertificate:
        """The same certificate for a smaller ``δ <= ε``.

        Raises:
            PreconditionViolation: ``δ > ε``.
        """
        d = as_epsilon(delta)
        if d > self.epsilon:
            msg = f"Cannot weaken epsilon {self.epsilon} to larger {d}"
            raise PreconditionViolation(msg, epsilon=str(self.epsilon), delta=str(d))
        n = self.vertex_count
        return replace(self, epsilon=d, packing=self.packing.with_requirement(d * n * n))


def certify_far_from_triangle_free(
    graph: AdjacencyOracle,
    packing: PackingCertificate | Iterable[Triangle],
    epsilon: Fraction | int | float | str,
) -> FarnessCertificate:
    """Measure a caller-supplied packing against ``ε·|V|²``.

    The packing is validated first and its threshold set to ``ε·|V|²``;
    ``certified`` on the result tells whether it is large enough to prove
    the property.

    Raises:
        PreconditionViolation: The packing is not edge-disjoint or contains
            a non-triangle.
    """
    if isinstance(packing, PackingCertificate):
        packing = packing.triangles
    tris = validate_packing(graph, packing)
    eps = as_epsilon(epsilon)
    n = len(set(graph.vertices()))
    return FarnessCertificate(
        epsilon=eps,
        vertex_count=n,
        packing=PackingCertificate(tris, required=eps * n * n),
    )


def deletion_lower_bound(
    graph: AdjacencyOracle,
    subgraph: AdjacencyOracle,
    epsilon: Fraction | int | float | str,
) -> bool:
    """Check the defining inequality ``|E(G)| - |E(H)| >= ε·|V|²`` for one H."""
    g_edges, h_edges = validate_triangle_free_subgraph(graph, subgraph)
    n = len(set(graph.vertices()))
    return len(g_edges) - len(h_edges) >= required_deletions(n, epsilon)


def greedy_triangle_free_subgraph(
    graph: AdjacencyOracle,
    *,
    triangles: TriangleSet | None = None,
) -> EdgeListGraph:
    """Build a triangle-free H <= G by deleting few edges.

    Two candidate deletion sets are tried and the smaller one kept:
    one edge from every triangle not already broken, and all edges of a
    maximal edge-disjoint packing.
    """
    tris = enumerate_triangles(graph) if triangles is None else triangles
    base = EdgeListGraph(frozenset(graph.vertices()), edge_set(graph))

    per_triangle: set[Edge] = set()
    for tri in sorted_triangles(tris):
        edges = tri.edges()
        if not any(e in per_triangle for e in edges):
            per_triangle.add(edges[0])
    packing_edges = {e for tri in greedy_packing(tris) for e in tri.edges()}

    removed = per_triangle if len(per_triangle) <= len(packing_edges) else packing_edges
    subgraph = base.without(removed)
    if enumerate_triangles(subgraph):
        msg = "Greedy edge deletion left a triangle behind"
        raise InvariantViolation(msg, removed=len(removed))
    return subgraph


class Verdict(StrEnum):
    FAR = "far"
    NOT_FAR = "not_far"
    UNDETERMINED = "undetermined"


@dataclass(frozen=True)
class FarnessDecision:
    """Result of :func:`decide_far_from_triangle_free` with its evidence.

    ``lower`` is the size of the packing found, ``upper`` the number of
    deletions that made the graph triangle-free; the true minimum lies
    between them.
    """

    epsilon: Fraction
    vertex_count: int
    edge_count: int
    verdict: Verdict
    packing: list[Triangle] = field(default_factory=list)
    upper: int | None = None
    violations: list[NecessaryCondition] = field(default_factory=list)

    @property
    def required(self) -> Fraction:
        return self.epsilon * self.vertex_count * self.vertex_count

    @property
    def lower(self) -> int:
        return len(self.packing)


def decide_far_from_triangle_free(
    graph: AdjacencyOracle,
    epsilon: Fraction | int | float | str,
    *,
    strategy: EnumerationStrategy | str = EnumerationStrategy.PRUNED,
    refute: bool = True,
) -> FarnessDecision:
    """Settle ``FarFromTriangleFree(G, ε)`` by certificate or refutation.

    Args:
        graph: The graph under analysis.
        epsilon: Threshold fraction.
        strategy: Triangle enumeration strategy.
        refute: Also try a greedy triangle-free subgraph as a refutation
            witness when the necessary conditions all pass.
    """
    eps = as_epsilon(epsilon)
    tris = enumerate_triangles(graph, strategy=strategy)
    n = len(set(graph.vertices()))
    m = len(edge_set(graph))
    packing = sorted_triangles(greedy_packing(tris))

    decision = FarnessDecision(
        epsilon=eps,
        vertex_count=n,
        edge_count=m,
        verdict=Verdict.UNDETERMINED,
        packing=packing,
    )
    if len(packing) >= decision.required:
        return replace(decision, verdict=Verdict.FAR)

    violated = necessary_violations(graph, eps, triangles=tris)
    if violated:
        return replace(decision, verdict=Verdict.NOT_FAR, violations=violated)

    if refute:
        subgraph = greedy_triangle_free_subgraph(graph, triangles=tris)
        upper = m - len(subgraph.edges)
        verdict = Verdict.NOT_FAR if upper < decision.required else Verdict.UNDETERMINED
        return replace(decision, verdict=verdict, upper=upper)
    return decision


def is_far_from_triangle_free(
    graph: AdjacencyOracle,
    epsilon: Fraction | int | float | str,
    *,
    strategy: EnumerationStrategy | str = EnumerationStrategy.PRUNED,
) -> bool:
    """Boolean form of :func:`decide_far_from_triangle_free`.

    Raises:
        UndecidedFarness: Neither the packing nor a refuting subgraph
            settles the question.
    """
    decision = decide_far_from_triangle_free(graph, epsilon, strategy=strategy)
    if decision.verdict is Verdict.UNDETERMINED:
        msg = (
            f"Packing of {decision.lower} and {decision.upper} deletions "
            f"do not settle epsilon·|V|² = {decision.required}"
        )
        raise UndecidedFarness(
            msg,
            lower=decision.lower,
            upper=decision.upper,
            required=str(decision.required),
        )
    return decision.verdict is Verdict.FAR
