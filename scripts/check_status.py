#!/usr/bin/env python3
"""Command-line entrypoint for checking the status of a list of URLs."""

import argparse
import logging
import sys
from typing import List, Optional

from status_checker.config import load_config
from status_checker.jobs import ConfigurationError, RunConfig, run_checks
from status_checker.logging_utils import configure_logging, perf_span
from status_checker.persistence import save_results
from status_checker.reporting import progress_printer
from status_checker.url_list import collect_urls

USAGE_HINT = "Usage: check_status.py [--file sites.txt] [URL ...] [--workers N] [--timeout S] [--retries N]"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check reachability of a list of URLs.")
    parser.add_argument("urls", nargs="*", help="URLs to check.")
    parser.add_argument(
        "--file",
        dest="files",
        action="append",
        default=[],
        help="Text file with one URL per line; '#' comments and blank lines are skipped. Repeatable.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of concurrent workers (default: CHECK_WORKERS or CPU count).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: CHECK_TIMEOUT_SECONDS or 5).",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=None,
        help="Extra attempts after a failed probe (default: CHECK_RETRIES or 0).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Path of the JSON status file (default: STATUS_OUTPUT or status.json).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Also echo log records to stderr.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = load_config()
    except ValueError as exc:
        print(f"error: failed to load configuration: {exc}", file=sys.stderr)
        return 1

    configure_logging(config, include_console=args.verbose)
    logger = logging.getLogger(__name__)

    try:
        urls = collect_urls(args.files, args.urls)
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if not urls:
        print(USAGE_HINT, file=sys.stderr)
        return 2

    try:
        run_config = RunConfig(
            worker_count=args.workers if args.workers is not None else config.worker_count,
            timeout_seconds=args.timeout if args.timeout is not None else config.timeout_seconds,
            max_retries=args.retries if args.retries is not None else config.max_retries,
        )
    except ConfigurationError as exc:
        logger.error("Invalid run configuration: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    with perf_span("check.total", tags={"urls": len(urls), "app": config.app_name}, logger=logger) as span:
        collector = run_checks(urls, run_config, on_result=progress_printer())
        output = save_results(collector, args.output or config.output_path)
        span.tag(failed=collector.summary()["failed"], output=str(output))

    return 0


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    raise SystemExit(main())
