"""Monitoring module for file allocation runs.

Provides metrics tracking/export and Telegram notifications.
"""

from .metrics import (
    AllocationMetrics,
    NodeMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from .telegram_notifier import (
    format_allocation_summary,
    format_dataset_milestone,
    format_error,
    format_experiment_start,
    format_final_summary,
    send_telegram,
)

__all__ = [
    # Metrics
    "AllocationMetrics",
    "NodeMetrics",
    "export_to_csv",
    "export_to_json",
    "print_summary",
    # Telegram
    "send_telegram",
    "format_allocation_summary",
    "format_experiment_start",
    "format_dataset_milestone",
    "format_error",
    "format_final_summary",
]
