"""BaseService — shared foundation for the analysis services.

Every service receives a :class:`GraphEngine` and the analysis settings
at construction time. The engine loads the graph lazily and hands out a
read-only adjacency oracle; services never mutate it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from trifree.config.models import AnalysisConfig, CertifyConfig
from trifree.domain.errors import TrifreeError
from trifree.services.result import ServiceResult

if TYPE_CHECKING:
    from trifree.domain.triangles import Edge, Triangle
    from trifree.infrastructure.graph.engine import GraphEngine

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Subclasses implement one family of analyses over ``self._engine``.
    Domain errors are converted with :meth:`_fail` so that no service
    method raises for bad input.

    Usage::

        class TriangleService(BaseService):
            def triangles(self) -> ServiceResult:
                try:
                    tris = enumerate_triangles(self._engine.oracle)
                except TrifreeError as exc:
                    return self._fail("triangles", exc)
                ...
    """

    def __init__(
        self,
        engine: GraphEngine,
        *,
        analysis: AnalysisConfig | None = None,
        certify: CertifyConfig | None = None,
    ) -> None:
        self._engine = engine
        self._analysis = analysis or AnalysisConfig()
        self._certify = certify or CertifyConfig()

    @staticmethod
    def _fail(op: str, exc: TrifreeError) -> ServiceResult:
        """Translate a domain error into a failed ServiceResult."""
        logger.debug("%s failed: %s", op, exc.message)
        return ServiceResult.failure(op, exc)

    @staticmethod
    def _triangle_rows(triangles: list[Triangle]) -> list[list[Any]]:
        return [t.to_list() for t in triangles]

    @staticmethod
    def _edge_rows(edges: list[Edge]) -> list[list[Any]]:
        return [e.to_list() for e in edges]
