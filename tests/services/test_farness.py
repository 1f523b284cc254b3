"""Tests for FarnessService — certify and decide."""

from pathlib import Path

import pytest

from tests.conftest import write_packing
from trifree.config.models import CertifyConfig
from trifree.infrastructure.graph.engine import GraphEngine
from trifree.services.farness import FarnessService


@pytest.fixture
def packing_file(tmp_path: Path) -> Path:
    return write_packing(tmp_path / "packing.txt", [(1, 2, 3), (4, 5, 6)])


class TestCertify:
    def test_certified(self, two_triangles_engine: GraphEngine, packing_file: Path) -> None:
        result = FarnessService(two_triangles_engine).certify(packing_file, epsilon="1/18")
        assert result.ok
        assert result.op == "certify"
        assert result.data == {
            "epsilon": "1/18",
            "vertex_count": 6,
            "required": "2",
            "packing_size": 2,
            "certified": True,
        }
        assert result.warnings == []

    def test_not_certified_warns(
        self, two_triangles_engine: GraphEngine, packing_file: Path
    ) -> None:
        result = FarnessService(two_triangles_engine).certify(packing_file, epsilon=0.1)
        assert result.ok
        assert result.data["epsilon"] == "1/10"
        assert result.data["required"] == "18/5"
        assert result.data["certified"] is False
        assert len(result.warnings) == 1

    def test_default_epsilon(self, two_triangles_engine: GraphEngine, packing_file: Path) -> None:
        data = FarnessService(two_triangles_engine).certify(packing_file).data
        assert data["epsilon"] == "1/100"
        assert data["required"] == "9/25"
        assert data["certified"] is True

    def test_configured_default(
        self, two_triangles_engine: GraphEngine, packing_file: Path
    ) -> None:
        svc = FarnessService(two_triangles_engine, certify=CertifyConfig(default_epsilon=0.25))
        assert svc.certify(packing_file).data["required"] == "9"

    def test_invalid_epsilon(self, two_triangles_engine: GraphEngine, packing_file: Path) -> None:
        result = FarnessService(two_triangles_engine).certify(packing_file, epsilon="lots")
        assert not result.ok
        assert result.op == "certify"
        assert result.error is not None
        assert result.error.code == "INVALID_EPSILON"

    def test_invalid_packing(self, tmp_path: Path, k4_engine: GraphEngine) -> None:
        packing = write_packing(tmp_path / "p.txt", [(1, 2, 3), (1, 2, 4)])
        result = FarnessService(k4_engine).certify(packing, epsilon="1/16")
        assert result.error is not None
        assert result.error.code == "PRECONDITION_VIOLATION"

    def test_non_triangle_in_packing(
        self, tmp_path: Path, two_triangles_engine: GraphEngine
    ) -> None:
        packing = write_packing(tmp_path / "p.txt", [(1, 2, 4)])
        result = FarnessService(two_triangles_engine).certify(packing, epsilon="1/18")
        assert result.error is not None
        assert "not a triangle" in result.error.message

    def test_malformed_packing_file(
        self, tmp_path: Path, two_triangles_engine: GraphEngine
    ) -> None:
        packing = tmp_path / "p.txt"
        packing.write_text("1 2\n")
        result = FarnessService(two_triangles_engine).certify(packing, epsilon="1/18")
        assert result.error is not None
        assert result.error.code == "INVALID_GRAPH"


class TestDecide:
    def test_far(self, two_triangles_engine: GraphEngine) -> None:
        result = FarnessService(two_triangles_engine).decide(epsilon="1/18")
        assert result.ok
        assert result.op == "decide"
        assert result.data == {
            "epsilon": "1/18",
            "vertex_count": 6,
            "edge_count": 6,
            "required": "2",
            "verdict": "far",
            "lower": 2,
            "upper": None,
            "violations": [],
            "packing": [[1, 2, 3], [4, 5, 6]],
        }

    def test_not_far_by_subgraph(self, two_triangles_engine: GraphEngine) -> None:
        data = FarnessService(two_triangles_engine).decide(epsilon="1/12").data
        assert data["verdict"] == "not_far"
        assert data["upper"] == 2

    def test_refute_disabled(self, two_triangles_engine: GraphEngine) -> None:
        svc = FarnessService(two_triangles_engine, certify=CertifyConfig(refute=False))
        result = svc.decide(epsilon="1/12")
        assert result.data["verdict"] == "undetermined"
        assert result.warnings

    def test_undetermined_warns(self, k4_engine: GraphEngine) -> None:
        result = FarnessService(k4_engine).decide(epsilon="1/8")
        assert result.ok
        assert result.data["verdict"] == "undetermined"
        assert (result.data["lower"], result.data["upper"]) == (1, 3)
        assert len(result.warnings) == 1

    def test_empty_graph_not_far(self) -> None:
        engine = GraphEngine.from_edges([], vertices=[1, 2, 3])
        data = FarnessService(engine).decide(epsilon="1/100").data
        assert data["verdict"] == "not_far"
        assert [v["condition"] for v in data["violations"]] == ["edge_budget", "triangle_free"]
        assert all(v["message"] for v in data["violations"])

    def test_range_violation(self, k4_engine: GraphEngine) -> None:
        data = FarnessService(k4_engine).decide(epsilon="0.5").data
        assert data["verdict"] == "not_far"
        assert data["violations"][0]["condition"] == "range"

    def test_invalid_epsilon(self, k4_engine: GraphEngine) -> None:
        result = FarnessService(k4_engine).decide(epsilon="1/0")
        assert result.error is not None
        assert result.error.code == "INVALID_EPSILON"
        assert result.op == "decide"

    def test_missing_graph(self, tmp_path: Path) -> None:
        result = FarnessService(GraphEngine(tmp_path / "g.txt")).decide(epsilon="1/18")
        assert result.error is not None
        assert result.error.code == "INVALID_GRAPH"
