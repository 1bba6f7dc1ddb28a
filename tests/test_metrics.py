"""Tests for allocation metrics and their export."""

import csv
import json

import pytest

from filealloc.algorithms.allocator import allocate_files
from filealloc.core.models import FileItem, Node
from filealloc.monitoring.metrics import (
    AllocationMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)


@pytest.fixture
def metrics(two_files, two_nodes):
    result = allocate_files(two_files + [FileItem("P", 60)], two_nodes)
    return AllocationMetrics.from_result(result, run_id="run_1")


class TestAllocationMetrics:
    def test_counts(self, metrics):
        assert metrics.total_files == 3
        assert metrics.placed_files == 2
        assert metrics.unassigned_files == 1
        assert metrics.total_size == 70
        assert metrics.placed_size == 10
        assert metrics.total_capacity == 15
        assert metrics.placement_rate_pct == pytest.approx(200 / 3)

    def test_node_metrics(self, metrics):
        a, b = metrics.node_metrics
        assert (a.node_name, a.occupied, a.files_placed) == ("A", 6, 1)
        assert a.utilization_pct == pytest.approx(60.0)
        assert (b.node_name, b.occupied, b.files_placed) == ("B", 4, 1)
        assert b.utilization_pct == pytest.approx(80.0)

    def test_utilization_stats(self, metrics):
        assert metrics.avg_utilization_pct == pytest.approx(70.0)
        assert metrics.median_utilization_pct == pytest.approx(70.0)
        assert metrics.min_utilization_pct == pytest.approx(60.0)
        assert metrics.max_utilization_pct == pytest.approx(80.0)

    def test_marked_complete(self, metrics):
        assert metrics.completed_at is not None
        assert metrics.runtime_seconds >= 0.0

    def test_zero_capacity_node(self):
        result = allocate_files([FileItem("z", 0)], [Node("empty", 0)])
        metrics = AllocationMetrics.from_result(result)
        assert metrics.node_metrics[0].utilization_pct == 0.0
        assert metrics.placed_files == 1

    def test_no_nodes(self):
        metrics = AllocationMetrics.from_result(allocate_files([FileItem("a", 1)], []))
        assert metrics.node_metrics == []
        assert metrics.avg_utilization_pct == 0.0
        assert metrics.unassigned_files == 1

    def test_no_files(self):
        metrics = AllocationMetrics.from_result(allocate_files([], [Node("A", 1)]))
        assert metrics.placement_rate_pct == 0.0

    def test_summary_dict_has_no_nodes(self, metrics):
        d = metrics.to_summary_dict()
        assert "node_metrics" not in d
        assert d["run_id"] == "run_1"
        assert isinstance(d["started_at"], str)


class TestExport:
    def test_json(self, metrics, tmp_path):
        path = tmp_path / "out" / "metrics.json"
        export_to_json(metrics, path)
        data = json.loads(path.read_text())
        assert data["run_id"] == "run_1"
        assert [n["node_name"] for n in data["node_metrics"]] == ["A", "B"]

    def test_json_summary_only(self, metrics, tmp_path):
        path = tmp_path / "metrics.json"
        export_to_json(metrics, path, include_nodes=False)
        assert "node_metrics" not in json.loads(path.read_text())

    def test_csv(self, metrics, tmp_path):
        path = tmp_path / "nodes.csv"
        export_to_csv(metrics, path)
        with path.open() as f:
            rows = list(csv.DictReader(f))
        assert [r["node_name"] for r in rows] == ["A", "B"]
        assert rows[0]["occupied"] == "6"

    def test_csv_header_only(self, tmp_path):
        path = tmp_path / "nodes.csv"
        export_to_csv(AllocationMetrics(run_id="empty"), path)
        assert path.read_text().splitlines() == [
            "node_name,capacity,occupied,files_placed,utilization_pct"
        ]

    def test_print_summary(self, metrics):
        summary = print_summary(metrics)
        assert "Run: run_1" in summary
        assert "placed 2, unassigned 1" in summary
        assert "Average: 70.00%" in summary
