"""Tests for the triangle-packing lower bound and its charging map."""

from __future__ import annotations

import itertools
import random

import pytest

from tests.conftest import BOWTIE, K4, PARTIAL_EXTENSION, TWO_TRIANGLES, complete_edges, oracle
from trifree.domain.cliques import enumerate_triangles, is_triangle_free
from trifree.domain.errors import InvariantViolation, PreconditionViolation
from trifree.domain.packing import (
    PackingBound,
    PackingCertificate,
    charge_witnesses,
    greedy_packing,
    packing_bound,
    validate_packing,
    validate_triangle_free_subgraph,
)
from trifree.domain.triangles import Edge, Triangle, edge_set


class TestPackingCertificate:
    def test_from_triples_canonicalises(self) -> None:
        cert = PackingCertificate.from_triples([(3, 2, 1), [6, 4, 5]])
        assert cert.triangles == {Triangle.of(1, 2, 3), Triangle.of(4, 5, 6)}
        assert cert.size == 2

    def test_duplicates_collapse(self) -> None:
        cert = PackingCertificate.from_triples([(1, 2, 3), (2, 3, 1)])
        assert cert.size == 1

    def test_wrong_arity_rejected(self) -> None:
        with pytest.raises(PreconditionViolation) as exc_info:
            PackingCertificate.from_triples([(1, 2)])
        assert exc_info.value.detail["entry"] == [1, 2]

    def test_requirement(self) -> None:
        cert = PackingCertificate.from_triples([(1, 2, 3), (4, 5, 6)], required=2)
        assert cert.required == 2
        assert cert.meets_requirement
        assert not cert.with_requirement(3).meets_requirement

    def test_default_requirement_is_met(self) -> None:
        assert PackingCertificate.from_triples([]).meets_requirement


class TestValidatePacking:
    def test_accepts_disjoint_triangles(self) -> None:
        tris = {Triangle.of(1, 2, 3), Triangle.of(4, 5, 6)}
        assert validate_packing(oracle(TWO_TRIANGLES), tris) == tris

    def test_rejects_non_triangle(self) -> None:
        with pytest.raises(PreconditionViolation, match="not a triangle"):
            validate_packing(oracle(TWO_TRIANGLES), [Triangle.of(1, 2, 4)])

    def test_rejects_vertex_outside_graph(self) -> None:
        with pytest.raises(PreconditionViolation):
            validate_packing(oracle(TWO_TRIANGLES), [Triangle.of(1, 2, 99)])

    def test_rejects_shared_edge(self) -> None:
        with pytest.raises(PreconditionViolation, match="not edge-disjoint") as exc_info:
            validate_packing(oracle(K4), [Triangle.of(1, 2, 3), Triangle.of(1, 2, 4)])
        assert exc_info.value.detail["witness"] == [[1, 2, 3], [1, 2, 4]]

    def test_shared_vertex_is_fine(self) -> None:
        tris = {Triangle.of(1, 2, 3), Triangle.of(3, 4, 5)}
        assert validate_packing(oracle(BOWTIE), tris) == tris

    def test_unsorted_construction_matches_canonical(self) -> None:
        packed = validate_packing(oracle(TWO_TRIANGLES), [Triangle((2, 1, 3))])
        assert Triangle.of(1, 2, 3) in packed


class TestValidateSubgraph:
    def test_returns_edge_sets(self) -> None:
        g = oracle(TWO_TRIANGLES)
        h = oracle([(2, 3), (1, 3)], vertices=range(1, 7))
        g_edges, h_edges = validate_triangle_free_subgraph(g, h)
        assert len(g_edges) == 6
        assert h_edges == {Edge(2, 3), Edge(1, 3)}

    def test_rejects_foreign_vertex(self) -> None:
        with pytest.raises(PreconditionViolation, match="outside the graph"):
            validate_triangle_free_subgraph(oracle(TWO_TRIANGLES), oracle([], vertices=[7]))

    def test_rejects_foreign_edge(self) -> None:
        with pytest.raises(PreconditionViolation, match="not an edge") as exc_info:
            validate_triangle_free_subgraph(oracle(TWO_TRIANGLES), oracle([(1, 4)]))
        assert exc_info.value.detail["edges"] == [[1, 4]]

    def test_rejects_subgraph_with_triangle(self) -> None:
        g = oracle(TWO_TRIANGLES)
        with pytest.raises(PreconditionViolation, match="not triangle-free"):
            validate_triangle_free_subgraph(g, oracle([(1, 2), (2, 3), (1, 3)]))


class TestChargeWitnesses:
    def test_first_absent_edge_in_canonical_order(self) -> None:
        h_edges = frozenset({Edge(1, 2), Edge(1, 3), Edge(1, 4)})
        charged = charge_witnesses([Triangle.of(1, 2, 3)], h_edges)
        assert charged == {Triangle.of(1, 2, 3): Edge(2, 3)}

    def test_injective_for_disjoint_triangles(self) -> None:
        tris = [Triangle.of(1, 2, 3), Triangle.of(4, 5, 6)]
        charged = charge_witnesses(tris, frozenset())
        assert charged == {Triangle.of(1, 2, 3): Edge(1, 2), Triangle.of(4, 5, 6): Edge(4, 5)}
        assert len(set(charged.values())) == len(charged)

    def test_surviving_triangle_rejected(self) -> None:
        h_edges = frozenset(Triangle.of(1, 2, 3).edges())
        with pytest.raises(PreconditionViolation, match="survives"):
            charge_witnesses([Triangle.of(1, 2, 3)], h_edges)

    def test_collision_raises_invariant_violation(self) -> None:
        # 123 and 124 both lose only {1, 2}
        h_edges = frozenset({Edge(1, 3), Edge(2, 3), Edge(1, 4), Edge(2, 4)})
        with pytest.raises(InvariantViolation) as exc_info:
            charge_witnesses([Triangle.of(1, 2, 3), Triangle.of(1, 2, 4)], h_edges)
        assert exc_info.value.detail["edge"] == [1, 2]


class TestPackingBound:
    def test_two_triangles(self) -> None:
        g = oracle(TWO_TRIANGLES)
        h = oracle([(2, 3), (1, 3), (5, 6), (4, 6)], vertices=range(1, 7))
        bound = packing_bound(g, h, {Triangle.of(1, 2, 3), Triangle.of(4, 5, 6)})
        assert bound == PackingBound(
            packing_size=2,
            graph_edges=6,
            subgraph_edges=4,
            witnesses={Triangle.of(1, 2, 3): Edge(1, 2), Triangle.of(4, 5, 6): Edge(4, 5)},
        )
        assert bound.deleted_edges == 2
        assert bound.holds

    def test_k4_star_subgraph(self) -> None:
        g = oracle(K4)
        star = oracle([(1, 2), (1, 3), (1, 4)])
        bound = packing_bound(g, star, [Triangle.of(2, 3, 4)])
        assert bound.packing_size == 1
        assert bound.deleted_edges == 3
        assert bound.witnesses == {Triangle.of(2, 3, 4): Edge(2, 3)}

    def test_empty_packing(self) -> None:
        bound = packing_bound(oracle(K4), oracle([], vertices=[1, 2, 3, 4]), [])
        assert bound.packing_size == 0
        assert bound.holds

    def test_non_disjoint_packing_rejected(self) -> None:
        g = oracle(PARTIAL_EXTENSION)
        h = oracle([(1, 3), (2, 3), (1, 4), (2, 4)])
        with pytest.raises(PreconditionViolation):
            packing_bound(g, h, [Triangle.of(1, 2, 3), Triangle.of(1, 2, 4)])

    def test_subgraph_with_triangle_rejected(self) -> None:
        with pytest.raises(PreconditionViolation):
            packing_bound(oracle(TWO_TRIANGLES), oracle(TWO_TRIANGLES), [])

    def test_random_graphs(self) -> None:
        rng = random.Random(7)
        for _ in range(30):
            n = rng.randint(3, 8)
            edges = [e for e in itertools.combinations(range(n), 2) if rng.random() < 0.5]
            g = oracle(edges, vertices=range(n))
            packing = greedy_packing(enumerate_triangles(g))
            # Delete one edge from every triangle to reach a triangle-free H
            kept = set(edge_set(g))
            for tri in sorted(enumerate_triangles(g), key=Triangle.sort_key):
                if all(e in kept for e in tri.edges()):
                    kept.discard(tri.edges()[0])
            h = oracle([e.vertices for e in kept], vertices=range(n))
            assert is_triangle_free(h)
            bound = packing_bound(g, h, packing)
            assert bound.packing_size <= bound.deleted_edges
            assert set(bound.witnesses.values()) <= edge_set(g) - edge_set(h)


class TestGreedyPacking:
    def test_k4_takes_one(self) -> None:
        assert greedy_packing(enumerate_triangles(oracle(K4))) == {Triangle.of(1, 2, 3)}

    def test_disjoint_triangles_all_taken(self) -> None:
        tris = enumerate_triangles(oracle(TWO_TRIANGLES))
        assert greedy_packing(tris) == tris

    def test_maximal_and_disjoint(self) -> None:
        tris = enumerate_triangles(oracle(complete_edges(6)))
        packing = greedy_packing(tris)
        used = {e for t in packing for e in t.edges()}
        assert len(used) == 3 * len(packing)
        for tri in tris - packing:
            assert any(e in used for e in tri.edges())
