"""Experiment runner for allocation benchmarks."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from filealloc.algorithms.allocator import FirstFitDecreasingAllocator
from filealloc.monitoring.metrics import AllocationMetrics
from filealloc.monitoring.telegram_notifier import (
    format_dataset_milestone,
    format_experiment_start,
    format_final_summary,
    send_telegram,
)
from filealloc.runner.dataset import generate_files, generate_nodes

logger = logging.getLogger(__name__)


@dataclass
class ExperimentMetrics:
    """Aggregate metrics across all datasets of an experiment."""

    experiment_id: str
    total_datasets: int = 0
    runs: list[AllocationMetrics] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None
    runtime_seconds: float = 0.0

    @property
    def total_files(self) -> int:
        return sum(r.total_files for r in self.runs)

    @property
    def placed_files(self) -> int:
        return sum(r.placed_files for r in self.runs)

    @property
    def avg_placement_rate_pct(self) -> float:
        if not self.runs:
            return 0.0
        return float(np.mean([r.placement_rate_pct for r in self.runs]))

    @property
    def avg_utilization_pct(self) -> float:
        if not self.runs:
            return 0.0
        return float(np.mean([r.avg_utilization_pct for r in self.runs]))

    def add_run(self, run: AllocationMetrics) -> None:
        self.runs.append(run)

    def mark_complete(self) -> None:
        self.completed_at = datetime.now(timezone.utc)
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        return {
            "experiment_id": self.experiment_id,
            "total_datasets": self.total_datasets,
            "total_files": self.total_files,
            "placed_files": self.placed_files,
            "avg_placement_rate_pct": self.avg_placement_rate_pct,
            "avg_utilization_pct": self.avg_utilization_pct,
            "runtime_seconds": self.runtime_seconds,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "runs": [r.to_summary_dict() for r in self.runs],
        }


class ExperimentRunner:
    """
    Runs the allocator over generated datasets and collects metrics.

    Each dataset is allocated once; results are saved as JSON after every
    dataset and progress is optionally sent to Telegram.
    """

    def __init__(
        self,
        results_dir: Path | str = "results",
        send_telegram_updates: bool = True,
        verify_order: bool = False,
    ):
        self.results_dir = Path(results_dir)
        self.results_dir.mkdir(parents=True, exist_ok=True)
        self.send_telegram_updates = send_telegram_updates
        self.allocator = FirstFitDecreasingAllocator(verify_order=verify_order)

    async def run_experiment(
        self,
        num_datasets: int = 10,
        files_per_dataset: int = 500,
        nodes_per_dataset: int = 20,
    ) -> ExperimentMetrics:
        """
        Run the allocator on ``num_datasets`` seeded datasets.

        Args:
            num_datasets: Number of datasets to generate
            files_per_dataset: Files per dataset
            nodes_per_dataset: Nodes per dataset

        Returns:
            ExperimentMetrics with one AllocationMetrics per dataset
        """
        experiment_id = f"exp_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
        metrics = ExperimentMetrics(experiment_id=experiment_id, total_datasets=num_datasets)

        if self.send_telegram_updates:
            await send_telegram(format_experiment_start(
                total_datasets=num_datasets,
                files_per_dataset=files_per_dataset,
                nodes_per_dataset=nodes_per_dataset,
            ))

        for dataset_idx in range(num_datasets):
            dataset_id = f"dataset_{dataset_idx:03d}"
            files = generate_files(count=files_per_dataset, seed=dataset_idx)
            nodes = generate_nodes(count=nodes_per_dataset, seed=dataset_idx)

            started_at = datetime.now(timezone.utc)
            result = self.allocator.allocate(files, nodes)
            run = AllocationMetrics.from_result(result, run_id=dataset_id, started_at=started_at)
            metrics.add_run(run)
            logger.info(
                "%s: placed %d/%d files", dataset_id, run.placed_files, run.total_files,
            )

            self._save_results(metrics, suffix=f"_interim_{dataset_idx + 1}")

            if self.send_telegram_updates and dataset_idx % 2 == 0:
                await send_telegram(format_dataset_milestone(
                    datasets_completed=dataset_idx + 1,
                    total_datasets=num_datasets,
                    avg_placement_rate=metrics.avg_placement_rate_pct,
                ))

        metrics.mark_complete()
        self._save_results(metrics, suffix="_final")

        if self.send_telegram_updates:
            await send_telegram(format_final_summary(
                total_datasets=num_datasets,
                total_files=metrics.total_files,
                placed_files=metrics.placed_files,
                avg_utilization=metrics.avg_utilization_pct,
                runtime_seconds=metrics.runtime_seconds,
            ))

        return metrics

    def _save_results(self, metrics: ExperimentMetrics, suffix: str = "") -> Path:
        """Write the experiment metrics to ``<experiment_id><suffix>.json``."""
        json_path = self.results_dir / f"{metrics.experiment_id}{suffix}.json"
        with json_path.open("w") as f:
            json.dump(metrics.to_dict(), f, indent=2)
        logger.debug("Saved results to %s", json_path)
        return json_path


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point for benchmark experiments."""
    import argparse
    import asyncio

    parser = argparse.ArgumentParser(description="Run file allocation experiments")
    parser.add_argument("--datasets", type=int, default=10, help="Number of datasets (default: 10)")
    parser.add_argument("--files", type=int, default=500, help="Files per dataset (default: 500)")
    parser.add_argument("--nodes", type=int, default=20, help="Nodes per dataset (default: 20)")
    parser.add_argument("--results-dir", default="results", help="Output directory (default: results)")
    parser.add_argument("--notify", action="store_true", help="Send Telegram progress updates")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    runner = ExperimentRunner(results_dir=args.results_dir, send_telegram_updates=args.notify)
    metrics = asyncio.run(runner.run_experiment(
        num_datasets=args.datasets,
        files_per_dataset=args.files,
        nodes_per_dataset=args.nodes,
    ))

    print(f"Experiment {metrics.experiment_id} complete")
    print(f"   Files placed: {metrics.placed_files}/{metrics.total_files}")
    print(f"   Avg placement rate: {metrics.avg_placement_rate_pct:.1f}%")
    print(f"   Avg utilization: {metrics.avg_utilization_pct:.1f}%")
    print(f"   Runtime: {metrics.runtime_seconds:.1f}s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
