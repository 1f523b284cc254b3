"""TriangleService — triangle enumeration and structural checks.

Read-only analyses over the lazily built graph:
``triangles`` lists every 3-clique, ``structure`` decides triangle-freeness,
edge-disjointness and local linearity and reports the matching
edge/triangle double-count identity.
"""

from __future__ import annotations

from typing import Any

from trifree.domain.cliques import enumerate_triangles, sorted_triangles
from trifree.domain.errors import TrifreeError
from trifree.domain.linearity import (
    analyze_linearity,
    edge_disjoint_edge_bound,
    locally_linear_edge_count,
)
from trifree.domain.triangles import edge_set
from trifree.services.base import BaseService
from trifree.services.result import ServiceResult
from trifree.services.telemetry import annotate, trace_span, traced


class TriangleService(BaseService):
    """Handles triangle enumeration and structure queries."""

    @traced
    def triangles(self) -> ServiceResult:
        """Enumerate all triangles of the graph in canonical order."""
        strategy = self._analysis.enumeration
        try:
            with trace_span("load_graph"):
                oracle = self._engine.oracle
                n = len(set(oracle.vertices()))
                m = len(edge_set(oracle))
                annotate(vertices=n, edges=m)
            with trace_span("enumerate", strategy=str(strategy)):
                tris = sorted_triangles(enumerate_triangles(oracle, strategy=strategy))
                annotate(triangles=len(tris))
        except TrifreeError as exc:
            return self._fail("triangles", exc)

        return ServiceResult(
            ok=True,
            op="triangles",
            data={
                "vertex_count": n,
                "edge_count": m,
                "count": len(tris),
                "triangle_free": not tris,
                "items": self._triangle_rows(tris),
            },
        )

    @traced
    def structure(self) -> ServiceResult:
        """Decide triangle-freeness, edge-disjointness and local linearity.

        When the triangles are edge-disjoint, reports ``3·|T| <= |E|``;
        when the graph is locally linear, reports the exact ``|E| = 3·|T|``.
        Witnesses (an overlapping pair, uncovered edges) explain failures.
        """
        strategy = self._analysis.enumeration
        try:
            with trace_span("analyze"):
                report = analyze_linearity(
                    self._engine.oracle,
                    strategy=strategy,
                    verify_characterizations=self._analysis.verify_characterizations,
                )
                annotate(
                    vertices=report.vertex_count,
                    edges=report.edge_count,
                    triangles=len(report.triangles),
                )
            identity: dict[str, Any] | None = None
            if report.locally_linear:
                edges = locally_linear_edge_count(self._engine.oracle, strategy=strategy)
                identity = {"relation": "equal", "incidences": edges, "edges": edges}
            elif report.edge_disjoint:
                incidences, edges = edge_disjoint_edge_bound(self._engine.oracle, strategy=strategy)
                identity = {"relation": "at_most", "incidences": incidences, "edges": edges}
        except TrifreeError as exc:
            return self._fail("structure", exc)

        overlap = report.overlapping_pair
        return ServiceResult(
            ok=True,
            op="structure",
            data={
                "vertex_count": report.vertex_count,
                "edge_count": report.edge_count,
                "triangle_count": len(report.triangles),
                "triangle_free": report.triangle_free,
                "edge_disjoint": report.edge_disjoint,
                "locally_linear": report.locally_linear,
                "characterizations_checked": report.characterizations_checked,
                "overlapping_pair": self._triangle_rows(list(overlap)) if overlap else None,
                "uncovered_edges": self._edge_rows(report.uncovered),
                "edge_identity": identity,
            },
        )
