"""Metrics tracking and export for allocation runs.

Provides dataclasses summarizing an allocation pass and utilities for
exporting them to JSON and CSV.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from filealloc.algorithms.allocator import AllocationResult

NODE_CSV_FIELDS = [
    "node_name", "capacity", "occupied", "files_placed", "utilization_pct",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class NodeMetrics:
    """Metrics for a single node after allocation.

    Attributes:
        node_name: Node identifier.
        capacity: Total capacity.
        occupied: Load after allocation.
        files_placed: Number of files placed on the node.
        utilization_pct: occupied / capacity in percent (0 for empty nodes).
    """

    node_name: str
    capacity: int
    occupied: int
    files_placed: int
    utilization_pct: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class AllocationMetrics:
    """Aggregate metrics for one allocation pass.

    Attributes:
        run_id: Identifier for the run.
        total_files: Number of input files.
        placed_files: Files assigned to a node.
        unassigned_files: Files no node could accept.
        total_size: Sum of all file sizes.
        placed_size: Sum of placed file sizes.
        total_capacity: Sum of node capacities.
        avg_utilization_pct: Mean node utilization.
        median_utilization_pct: Median node utilization.
        min_utilization_pct: Lowest node utilization.
        max_utilization_pct: Highest node utilization.
        runtime_seconds: Wall time between started_at and completed_at.
        started_at: Metrics creation time.
        completed_at: Completion time (None if running).
        node_metrics: Per-node metrics in node input order.
    """

    run_id: str
    total_files: int = 0
    placed_files: int = 0
    unassigned_files: int = 0
    total_size: int = 0
    placed_size: int = 0
    total_capacity: int = 0
    avg_utilization_pct: float = 0.0
    median_utilization_pct: float = 0.0
    min_utilization_pct: float = 0.0
    max_utilization_pct: float = 0.0
    runtime_seconds: float = 0.0
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None
    node_metrics: list[NodeMetrics] = field(default_factory=list)

    @classmethod
    def from_result(
        cls,
        result: AllocationResult,
        run_id: str = "run",
        started_at: datetime | None = None,
    ) -> "AllocationMetrics":
        """Summarize an AllocationResult and mark the metrics complete."""
        metrics = cls(run_id=run_id, started_at=started_at or _utcnow())

        node_files = result.node_files()
        for i, node in enumerate(result.nodes):
            utilization = 100.0 * node.occupied / node.capacity if node.capacity else 0.0
            metrics.node_metrics.append(NodeMetrics(
                node_name=node.name,
                capacity=node.capacity,
                occupied=node.occupied,
                files_placed=len(node_files[i]),
                utilization_pct=utilization,
            ))

        metrics.total_files = len(result.files)
        metrics.placed_files = result.placed_count
        metrics.unassigned_files = metrics.total_files - metrics.placed_files
        metrics.total_size = sum(f.size for f in result.files)
        metrics.placed_size = sum(
            f.size for f, node in result.assignments() if node is not None
        )
        metrics.total_capacity = sum(n.capacity for n in result.nodes)
        metrics._recalculate_stats()
        metrics.mark_complete()
        return metrics

    @property
    def placement_rate_pct(self) -> float:
        """Share of files that were placed."""
        if not self.total_files:
            return 0.0
        return 100.0 * self.placed_files / self.total_files

    def mark_complete(self) -> None:
        """Record completion time and runtime."""
        self.completed_at = _utcnow()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    def _recalculate_stats(self) -> None:
        """Recalculate utilization statistics from node metrics."""
        if not self.node_metrics:
            return

        utilizations = np.array([n.utilization_pct for n in self.node_metrics])
        self.avg_utilization_pct = float(utilizations.mean())
        self.median_utilization_pct = float(np.median(utilizations))
        self.min_utilization_pct = float(utilizations.min())
        self.max_utilization_pct = float(utilizations.max())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamps."""
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["node_metrics"] = [n.to_dict() for n in self.node_metrics]
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to dictionary without per-node details."""
        d = self.to_dict()
        del d["node_metrics"]
        return d


def export_to_json(metrics: AllocationMetrics, output_path: Path | str, include_nodes: bool = True) -> None:
    """Export allocation metrics to a JSON file.

    Args:
        metrics: AllocationMetrics instance to export.
        output_path: Path to output JSON file.
        include_nodes: If True, include per-node metrics. If False, summary only.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_nodes else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: AllocationMetrics, output_path: Path | str) -> None:
    """Export per-node metrics to a CSV file (header only when there are no nodes)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=NODE_CSV_FIELDS)
        writer.writeheader()
        for node in metrics.node_metrics:
            writer.writerow(node.to_dict())


def print_summary(metrics: AllocationMetrics) -> str:
    """Generate a human-readable summary of allocation metrics.

    Returns:
        Formatted multi-line summary string.
    """
    lines = [
        "=" * 60,
        f"Run: {metrics.run_id}",
        "=" * 60,
        f"Files: {metrics.total_files} "
        f"(placed {metrics.placed_files}, unassigned {metrics.unassigned_files})",
        f"Placement rate: {metrics.placement_rate_pct:.2f}%",
        f"Placed size: {metrics.placed_size}/{metrics.total_size}",
        f"Nodes: {len(metrics.node_metrics)} (capacity {metrics.total_capacity})",
        "",
        "Utilization Statistics:",
        f"  Average: {metrics.avg_utilization_pct:.2f}%",
        f"  Median:  {metrics.median_utilization_pct:.2f}%",
        f"  Min:     {metrics.min_utilization_pct:.2f}%",
        f"  Max:     {metrics.max_utilization_pct:.2f}%",
        "",
        f"Runtime: {metrics.runtime_seconds:.3f} seconds",
        "=" * 60,
    ]
    return "\n".join(lines)
