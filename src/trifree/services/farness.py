"""FarnessService — far-from-triangle-free certification and decision.

``certify`` measures a caller-supplied packing against ``ε·|V|²``;
``decide`` settles the property with the greedy packing, the necessary
conditions, and (if configured) a greedy refuting subgraph.
"""

from __future__ import annotations

from fractions import Fraction
from pathlib import Path

import structlog

from trifree.domain.errors import TrifreeError
from trifree.domain.farness import (
    Verdict,
    as_epsilon,
    certify_far_from_triangle_free,
    decide_far_from_triangle_free,
    describe_condition,
)
from trifree.domain.packing import PackingCertificate
from trifree.infrastructure.graph.io import read_packing_triples
from trifree.services.base import BaseService
from trifree.services.result import ServiceResult
from trifree.services.telemetry import annotate, trace_span, traced

log = structlog.get_logger(__name__)


class FarnessService(BaseService):
    """Handles far-from-triangle-free queries."""

    def _epsilon(self, op: str, epsilon: str | float | None) -> Fraction | ServiceResult:
        raw = self._certify.default_epsilon if epsilon is None else epsilon
        try:
            return as_epsilon(raw)
        except TrifreeError as exc:
            return ServiceResult.failure(op, exc, code="INVALID_EPSILON")

    @traced
    def certify(self, packing_path: Path, *, epsilon: str | float | None = None) -> ServiceResult:
        """Check whether the packing in *packing_path* proves far-from-triangle-free.

        Args:
            packing_path: File listing pairwise edge-disjoint triangles of G.
            epsilon: Threshold fraction; the configured default when None.
        """
        eps = self._epsilon("certify", epsilon)
        if isinstance(eps, ServiceResult):
            return eps

        try:
            with trace_span("load_packing"):
                triples = read_packing_triples(packing_path)
                packing = PackingCertificate.from_triples(triples)
            with trace_span("validate", packing=packing.size):
                cert = certify_far_from_triangle_free(self._engine.oracle, packing, eps)
        except TrifreeError as exc:
            return self._fail("certify", exc)

        warnings: list[str] = []
        if not cert.certified:
            warnings.append(
                f"Packing of {cert.packing.size} is below epsilon·|V|² = {cert.required}; "
                "the property is neither proved nor refuted"
            )
        log.debug("certify.done", certified=cert.certified, packing=cert.packing.size)
        return ServiceResult(
            ok=True,
            op="certify",
            data={
                "epsilon": str(cert.epsilon),
                "vertex_count": cert.vertex_count,
                "required": str(cert.required),
                "packing_size": cert.packing.size,
                "certified": cert.certified,
            },
            warnings=warnings,
        )

    @traced
    def decide(self, *, epsilon: str | float | None = None) -> ServiceResult:
        """Decide far-from-triangle-free for *epsilon*, with evidence.

        The result is ``far``, ``not_far`` or ``undetermined``; an
        undetermined verdict is still an ok result carrying a warning.
        """
        eps = self._epsilon("decide", epsilon)
        if isinstance(eps, ServiceResult):
            return eps

        try:
            with trace_span("decide"):
                decision = decide_far_from_triangle_free(
                    self._engine.oracle,
                    eps,
                    strategy=self._analysis.enumeration,
                    refute=self._certify.refute,
                )
                annotate(lower=decision.lower, upper=decision.upper)
        except TrifreeError as exc:
            return self._fail("decide", exc)

        warnings: list[str] = []
        if decision.verdict is Verdict.UNDETERMINED:
            warnings.append(
                f"Greedy packing ({decision.lower}) and greedy deletions ({decision.upper}) "
                f"bracket epsilon·|V|² = {decision.required}; no verdict"
            )
        return ServiceResult(
            ok=True,
            op="decide",
            data={
                "epsilon": str(decision.epsilon),
                "vertex_count": decision.vertex_count,
                "edge_count": decision.edge_count,
                "required": str(decision.required),
                "verdict": str(decision.verdict),
                "lower": decision.lower,
                "upper": decision.upper,
                "violations": [
                    {"condition": str(c), "message": describe_condition(c)}
                    for c in decision.violations
                ],
                "packing": self._triangle_rows(decision.packing),
            },
            warnings=warnings,
        )
