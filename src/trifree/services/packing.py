"""PackingService — the triangle-packing lower bound for one subgraph.

Given a triangle-free subgraph H of G and an edge-disjoint packing of
G's triangles (read from a file, or the greedy maximal packing when none
is supplied), proves ``|packing| <= |E(G)| - |E(H)|`` and reports the
injective triangle -> deleted-edge charging behind it.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from trifree.domain.cliques import enumerate_triangles, sorted_triangles
from trifree.domain.errors import TrifreeError
from trifree.domain.packing import PackingCertificate, greedy_packing, packing_bound
from trifree.infrastructure.graph.engine import GraphEngine
from trifree.infrastructure.graph.io import read_packing_triples
from trifree.services.base import BaseService
from trifree.services.result import ServiceResult
from trifree.services.telemetry import annotate, trace_span, traced

log = structlog.get_logger(__name__)


class PackingService(BaseService):
    """Handles packing-bound verification."""

    def _load_packing(self, packing_path: Path | None) -> tuple[PackingCertificate, str]:
        if packing_path is None:
            tris = enumerate_triangles(self._engine.oracle, strategy=self._analysis.enumeration)
            return PackingCertificate(greedy_packing(tris)), "greedy"
        triples = read_packing_triples(packing_path)
        return PackingCertificate.from_triples(triples), str(packing_path)

    @traced
    def bound(self, subgraph_path: Path, *, packing_path: Path | None = None) -> ServiceResult:
        """Verify the packing bound against the subgraph in *subgraph_path*.

        Args:
            subgraph_path: Graph file describing a triangle-free H <= G.
            packing_path: Packing file; the greedy maximal packing of G
                is used when omitted.
        """
        try:
            with trace_span("load_inputs"):
                packing, source = self._load_packing(packing_path)
                subgraph = GraphEngine(subgraph_path)
            with trace_span("charge", packing=packing.size):
                result = packing_bound(self._engine.oracle, subgraph.oracle, packing.triangles)
                annotate(deleted=result.deleted_edges)
        except TrifreeError as exc:
            return self._fail("packing_bound", exc)

        log.debug(
            "packing_bound.verified",
            packing_size=result.packing_size,
            deleted_edges=result.deleted_edges,
        )
        witnesses = [
            {"triangle": tri.to_list(), "edge": result.witnesses[tri].to_list()}
            for tri in sorted_triangles(result.witnesses)
        ]
        return ServiceResult(
            ok=True,
            op="packing_bound",
            data={
                "packing_source": source,
                "packing_size": result.packing_size,
                "graph_edges": result.graph_edges,
                "subgraph_edges": result.subgraph_edges,
                "deleted_edges": result.deleted_edges,
                "holds": result.holds,
                "witnesses": witnesses,
            },
        )
