"""Timing spans for analyses run under ``--verbose``.

A service method decorated with :func:`traced` opens a root span; stages
inside it open child spans with :func:`trace_span` and attach graph sizes
(vertices, edges, triangles, packing size) with :func:`annotate`. The
finished tree lands in ``ServiceResult.meta["telemetry"]``.

With telemetry off every helper is a single ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from trifree.services.result import ServiceResult

log = structlog.get_logger("trifree.telemetry")

_enabled: ContextVar[bool] = ContextVar("_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("_active", default=None)


@dataclass
class Span:
    """One timed stage and the counts recorded while it ran."""

    name: str
    children: list[Span] = field(default_factory=list)
    counts: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def finish(self) -> None:
        self.finished = time.perf_counter()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.counts:
            out["annotations"] = dict(self.counts)
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def current_span() -> Span | None:
    """The innermost open span, or None when telemetry is off."""
    return _active.get() if _enabled.get() else None


def annotate(**counts: Any) -> None:
    """Record *counts* on the innermost open span; no-op when none is open."""
    span = current_span()
    if span is not None:
        span.counts.update(counts)


@contextmanager
def trace_span(name: str, **counts: Any) -> Iterator[Span | None]:
    """Open a child stage under the running analysis.

    Yields None when telemetry is off or no analysis span is open.
    """
    parent = current_span()
    if parent is None:
        yield None
        return

    child = Span(name=name, counts=dict(counts))
    parent.children.append(child)
    token = _active.set(child)
    try:
        yield child
    finally:
        child.finish()
        _active.reset(token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach its span tree to the returned result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        token = _active.set(root)
        try:
            result = func(*args, **kwargs)
        finally:
            root.finish()
            _active.reset(token)

        ok = result.ok if isinstance(result, ServiceResult) else True
        log.debug(
            "analysis.timed",
            analysis=root.name,
            duration_ms=round(root.duration_ms, 2),
            stages=len(root.children),
            ok=ok,
        )
        if isinstance(result, ServiceResult):
            return result.with_meta(telemetry=root.to_dict())  # type: ignore[return-value]
        return result

    return wrapper
