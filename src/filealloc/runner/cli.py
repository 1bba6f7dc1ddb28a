"""Command-line driver: read files and nodes, allocate, write the plan."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from filealloc.algorithms.allocator import allocate_files
from filealloc.monitoring.metrics import (
    AllocationMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from filealloc.monitoring.telegram_notifier import format_allocation_summary, send_telegram
from filealloc.runner.config import ConfigError, RunConfig, load_config
from filealloc.runner.records import RecordError, read_records, write_plan

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filealloc",
        description="Assign files to storage nodes with first-fit-decreasing placement.",
    )
    parser.add_argument("-f", "--files", type=Path, help="Input file with the list of files")
    parser.add_argument("-n", "--nodes", type=Path, help="Input file with the list of nodes")
    parser.add_argument("-o", "--output", type=Path, help="Output file (default: standard output)")
    parser.add_argument("-c", "--config", type=Path, help="YAML configuration file")
    parser.add_argument("--summary", action="store_true", default=None,
                        help="Print an allocation summary to standard error")
    parser.add_argument("--metrics-json", type=Path, help="Export allocation metrics to JSON")
    parser.add_argument("--metrics-csv", type=Path, help="Export per-node metrics to CSV")
    parser.add_argument("--notify", action="store_true", default=None,
                        help="Send the summary to Telegram (TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID)")
    parser.add_argument("--verify-order", action="store_true", default=None,
                        help="Check node ordering after every placement")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase log verbosity (-v info, -vv debug)")
    return parser


def resolve_config(args: argparse.Namespace) -> RunConfig:
    """Merge the optional config file with command-line overrides."""
    config = load_config(args.config) if args.config else RunConfig()
    overrides = {
        "files_path": args.files,
        "nodes_path": args.nodes,
        "output_path": args.output,
        "summary": args.summary,
        "metrics_json": args.metrics_json,
        "metrics_csv": args.metrics_csv,
        "notify": args.notify,
        "verify_order": args.verify_order,
    }
    if args.verbose:
        overrides["log_level"] = "DEBUG" if args.verbose > 1 else "INFO"
    return config.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def run(config: RunConfig) -> int:
    """Execute one allocation run. Returns the process exit status."""
    if config.files_path is None:
        print("ERROR: Input missing: file with file names not specified", file=sys.stderr)
        return 1
    if config.nodes_path is None:
        print("ERROR: Input missing: file with nodes not specified", file=sys.stderr)
        return 1

    try:
        nodes = read_records(config.nodes_path, "node")
        files = read_records(config.files_path, "file")
    except RecordError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if config.output_path is not None:
        try:
            output = config.output_path.open("w")
        except OSError as exc:
            print(f"ERROR: Cannot open output file: {config.output_path} ({exc.strerror})", file=sys.stderr)
            return 1
    else:
        output = sys.stdout

    try:
        result = allocate_files(files, nodes, verify_order=config.verify_order)
        write_plan(result, output)
    finally:
        if output is not sys.stdout:
            output.close()

    metrics = AllocationMetrics.from_result(result, run_id=config.files_path.stem)
    if config.summary:
        print(print_summary(metrics), file=sys.stderr)
    if config.metrics_json is not None:
        export_to_json(metrics, config.metrics_json)
    if config.metrics_csv is not None:
        export_to_csv(metrics, config.metrics_csv)
    if config.notify and not asyncio.run(send_telegram(format_allocation_summary(metrics))):
        logger.warning("Allocation summary was not sent to Telegram")

    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger.info("Running allocation")
    return run(config)


if __name__ == "__main__":
    raise SystemExit(main())
