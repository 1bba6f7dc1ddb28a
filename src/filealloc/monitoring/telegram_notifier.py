"""Lightweight Telegram notification for allocation runs.

Sends plain-text messages to a Telegram chat via the Bot API for:
- Allocation run summaries
- Experiment start/progress/end notifications
- Errors

No retry logic; notifications are non-critical.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from filealloc.monitoring.metrics import AllocationMetrics

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram(
    message: str,
    chat_id: str | None = None,
    token: str | None = None,
) -> bool:
    """Send a plain-text message to a Telegram chat.

    Args:
        message: Text to send.
        chat_id: Telegram chat ID. Defaults to TELEGRAM_CHAT_ID env var.
        token: Bot token. Defaults to TELEGRAM_BOT_TOKEN env var.

    Returns:
        True if the message was sent, False otherwise.
    """
    token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
    if not token:
        logger.debug("TELEGRAM_BOT_TOKEN not set; skipping notification")
        return False

    chat_id = chat_id or os.environ.get("TELEGRAM_CHAT_ID", "")
    if not chat_id:
        logger.debug("TELEGRAM_CHAT_ID not set; skipping notification")
        return False

    url = TELEGRAM_API.format(token=token)
    payload = {"chat_id": chat_id, "text": message}

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.post(url, json=payload)
            data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Telegram notification failed: %s", exc)
        return False
    return bool(data.get("ok", False))


def format_allocation_summary(metrics: AllocationMetrics) -> str:
    """Format the summary of a single allocation run.

    Example:
        >>> m = AllocationMetrics("run_1", total_files=10, placed_files=9, unassigned_files=1)
        >>> print(format_allocation_summary(m))
        Allocation Complete: run_1
        Files: 9/10 placed (1 unassigned)
        Avg Node Utilization: 0.0%
    """
    return (
        f"Allocation Complete: {metrics.run_id}\n"
        f"Files: {metrics.placed_files}/{metrics.total_files} placed "
        f"({metrics.unassigned_files} unassigned)\n"
        f"Avg Node Utilization: {metrics.avg_utilization_pct:.1f}%"
    )


def format_experiment_start(
    total_datasets: int,
    files_per_dataset: int,
    nodes_per_dataset: int,
) -> str:
    """Format experiment start notification message.

    Example:
        >>> print(format_experiment_start(10, 500, 20))
        Experiment Started
        Datasets: 10 (500 files, 20 nodes each)
    """
    return (
        f"Experiment Started\n"
        f"Datasets: {total_datasets} ({files_per_dataset} files, {nodes_per_dataset} nodes each)"
    )


def format_dataset_milestone(
    datasets_completed: int,
    total_datasets: int,
    avg_placement_rate: float,
) -> str:
    """Format dataset completion milestone notification.

    Example:
        >>> print(format_dataset_milestone(3, 10, 92.5))
        Progress Update
        Completed: 3/10 datasets (30%)
        Avg Placement Rate: 92.5%
    """
    progress_pct = (datasets_completed / total_datasets) * 100
    return (
        f"Progress Update\n"
        f"Completed: {datasets_completed}/{total_datasets} datasets ({progress_pct:.0f}%)\n"
        f"Avg Placement Rate: {avg_placement_rate:.1f}%"
    )


def format_error(error_type: str, error_message: str, context: dict[str, Any] | None = None) -> str:
    """Format error notification message.

    Example:
        >>> print(format_error("RecordError", "Size is negative", {"line": 4}))
        Error: RecordError
        Size is negative
        Context: line=4
    """
    lines = [
        f"Error: {error_type}",
        error_message,
    ]
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        lines.append(f"Context: {ctx_str}")
    return "\n".join(lines)


def format_final_summary(
    total_datasets: int,
    total_files: int,
    placed_files: int,
    avg_utilization: float,
    runtime_seconds: float,
) -> str:
    """Format final experiment results summary.

    Example:
        >>> print(format_final_summary(10, 5000, 4800, 87.4, 12.5))
        Experiment Complete
        Datasets: 10
        Files: 4800/5000 placed
        Avg Node Utilization: 87.4%
        Runtime: 12.5 seconds
    """
    return (
        f"Experiment Complete\n"
        f"Datasets: {total_datasets}\n"
        f"Files: {placed_files}/{total_files} placed\n"
        f"Avg Node Utilization: {avg_utilization:.1f}%\n"
        f"Runtime: {runtime_seconds:.1f} seconds"
    )
