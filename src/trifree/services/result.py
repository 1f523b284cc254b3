"""ServiceResult and ServiceError — what every analysis hands back.

INVARIANT: All service-layer methods return ServiceResult.
A :class:`~trifree.domain.errors.TrifreeError` raised by the graph
analysis becomes a failed result via :meth:`ServiceResult.failure`;
the CLI only ever inspects ``ok``, ``data``, ``warnings`` and ``error``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from trifree.domain.errors import TrifreeError


class ServiceError(BaseModel):
    """Error code, message and witness payload of a failed analysis."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: TrifreeError, *, code: str | None = None) -> ServiceError:
        """Carry over *exc*'s message and detail, optionally under another *code*."""
        return cls(code=code or exc.code, message=exc.message, detail=exc.detail)


class ServiceResult(BaseModel):
    """Outcome of one analysis over a graph.

    Attributes:
        ok: False only when the inputs were rejected (bad file, foreign
            edge, overlapping packing, invalid epsilon).
        op: ``triangles``, ``structure``, ``packing_bound``, ``certify``
            or ``decide``.
        data: Counts, flags and witnesses of a successful analysis.
        warnings: Inconclusive outcomes, e.g. an undetermined verdict.
        error: Set exactly when ``ok`` is False.
        meta: Span tree under ``"telemetry"`` when run with ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, exc: TrifreeError, *, code: str | None = None) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc, code=code))

    def with_meta(self, **entries: Any) -> ServiceResult:
        """A copy with *entries* merged into ``meta`` (the model is frozen)."""
        return self.model_copy(update={"meta": {**(self.meta or {}), **entries}})
