"""Tests for telemetry primitives: Span, trace_span, annotate, @traced."""

from __future__ import annotations

import time
from collections.abc import Generator

import pytest

from trifree.services.result import ServiceError, ServiceResult
from trifree.services.telemetry import (
    Span,
    _active,
    annotate,
    current_span,
    disable_telemetry,
    enable_telemetry,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()
    _active.set(None)


@pytest.fixture
def root_span() -> Generator[Span]:
    enable_telemetry()
    root = Span(name="root")
    token = _active.set(root)
    yield root
    _active.reset(token)


# ── Span ─────────────────────────────────────────────────────────────


class TestSpan:
    def test_duration_before_finish_is_zero(self) -> None:
        assert Span(name="s").duration_ms == 0.0

    def test_duration_after_finish(self) -> None:
        span = Span(name="s")
        time.sleep(0.005)
        span.finish()
        assert span.duration_ms > 0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.finish()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "children" not in d
        assert "annotations" not in d

    def test_to_dict_nested(self) -> None:
        root = Span(name="root")
        child = Span(name="enumerate", counts={"triangles": 4})
        root.children.append(child)
        child.finish()
        root.finish()
        d = root.to_dict()
        assert d["children"][0] == {
            "name": "enumerate",
            "duration_ms": d["children"][0]["duration_ms"],
            "annotations": {"triangles": 4},
        }


# ── trace_span / annotate ────────────────────────────────────────────


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("x") as span:
            assert span is None

    def test_no_root_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("x") as span:
            assert span is None

    def test_nested_spans(self, root_span: Span) -> None:
        with trace_span("a"):
            with trace_span("b") as inner:
                assert current_span() is inner
        assert root_span.children[0].name == "a"
        assert root_span.children[0].children[0].name == "b"
        assert root_span.children[0].finished is not None
        assert current_span() is root_span

    def test_initial_counts(self, root_span: Span) -> None:
        with trace_span("charge", packing=2):
            pass
        assert root_span.children[0].counts == {"packing": 2}


class TestAnnotate:
    def test_records_on_innermost_span(self, root_span: Span) -> None:
        with trace_span("load_graph"):
            annotate(vertices=6, edges=6)
        annotate(triangles=2)
        assert root_span.children[0].counts == {"vertices": 6, "edges": 6}
        assert root_span.counts == {"triangles": 2}

    def test_noop_when_disabled(self) -> None:
        _active.set(Span(name="root"))
        annotate(vertices=1)
        assert _active.get() is not None
        assert _active.get().counts == {}  # type: ignore[union-attr]

    def test_noop_without_span(self) -> None:
        enable_telemetry()
        annotate(vertices=1)
        assert current_span() is None


# ── @traced ──────────────────────────────────────────────────────────


class TestTraced:
    def test_noop_when_disabled(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="test")

        assert op().meta is None

    def test_injects_meta_when_enabled(self) -> None:
        @traced
        def op() -> ServiceResult:
            with trace_span("stage"):
                annotate(triangles=1)
            return ServiceResult(ok=True, op="test", meta={"existing": 1})

        enable_telemetry()
        result = op()
        assert result.meta is not None
        assert result.meta["existing"] == 1
        stage = result.meta["telemetry"]["children"][0]
        assert stage["name"] == "stage"
        assert stage["annotations"] == {"triangles": 1}

    def test_root_duration_is_recorded(self) -> None:
        @traced
        def op() -> ServiceResult:
            time.sleep(0.005)
            return ServiceResult(ok=True, op="test")

        enable_telemetry()
        result = op()
        assert result.meta is not None
        assert result.meta["telemetry"]["duration_ms"] > 0

    def test_error_result_gets_telemetry(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=False, op="test", error=ServiceError(code="E", message="x"))

        enable_telemetry()
        result = op()
        assert result.meta is not None
        assert "telemetry" in result.meta

    def test_non_service_result_passthrough(self) -> None:
        @traced
        def op() -> int:
            return 3

        enable_telemetry()
        assert op() == 3

    def test_exception_propagates_and_resets_span(self) -> None:
        @traced
        def op() -> ServiceResult:
            msg = "boom"
            raise ValueError(msg)

        enable_telemetry()
        with pytest.raises(ValueError, match="boom"):
            op()
        assert _active.get() is None


class TestCurrentSpan:
    def test_none_when_disabled(self) -> None:
        _active.set(Span(name="root"))
        assert current_span() is None

    def test_returns_active_span(self, root_span: Span) -> None:
        assert current_span() is root_span
