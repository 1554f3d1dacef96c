from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from agriprice.app import (
    get_sync_status,
    list_sync_runs,
    process_price_path,
    prune_sync_runs,
    sync_price_feed,
)
from agriprice.config import configure_logging
from agriprice.domain.sync_runs import DEFAULT_PAGE_SIZE

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from agriprice.domain.data_integration import IngestSummary

log = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected an integer, got {value!r}") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"Expected a value of at least 1, got {parsed}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ingest commodity price feeds")
    subparsers = parser.add_subparsers(dest="command", required=True)

    process = subparsers.add_parser("process", help="Ingest a CSV or spreadsheet file")
    process.add_argument("path", type=Path, help="Feed file to ingest")

    sync = subparsers.add_parser("sync", help="Ingest the latest feed as a recorded sync run")
    sync.add_argument(
        "--feed",
        type=Path,
        help="Feed file to ingest (defaults to the configured drop location)",
    )

    subparsers.add_parser("status", help="Show the most recent sync run")

    runs = subparsers.add_parser("runs", help="List sync runs, newest first")
    runs.add_argument("--page", type=_positive_int, default=1, help="Page number (1-based)")
    runs.add_argument(
        "--limit",
        type=_positive_int,
        default=DEFAULT_PAGE_SIZE,
        help="Runs per page (default: %(default)s)",
    )

    prune = subparsers.add_parser("prune", help="Delete old sync runs")
    prune.add_argument(
        "--keep",
        type=_positive_int,
        help="Number of latest runs to keep (defaults to config)",
    )

    return parser.parse_args(list(argv))


def _log_summary(label: str, summary: IngestSummary) -> None:
    log.info(
        "%s: inserted=%s, skipped=%s, errors=%s, total_rows=%s",
        label,
        summary.inserted,
        summary.skipped,
        summary.errors,
        summary.total_rows,
    )


def _run(args: argparse.Namespace) -> None:
    if args.command == "process":
        if not args.path.is_file():
            raise FileNotFoundError(f"No such feed file: {args.path}")
        _log_summary(f"Processed {args.path.name}", process_price_path(args.path))
    elif args.command == "sync":
        outcome = sync_price_feed(feed_path=args.feed)
        _log_summary(f"Sync run {outcome.run_id}", outcome.summary)
    elif args.command == "status":
        report = get_sync_status()
        log.info(
            "Last sync: %s, records synced: %s, running: %s",
            report.last_sync_timestamp.isoformat() if report.last_sync_timestamp else "never",
            report.records_synced,
            report.is_running,
        )
    elif args.command == "runs":
        page = list_sync_runs(page=args.page, limit=args.limit)
        log.info("Sync runs page %s of %s (%s total)", page.page, page.pages, page.total)
        for run in page.runs:
            log.info(
                "%s %s started=%s processed=%s inserted=%s%s",
                run.id,
                run.status,
                run.started_at.isoformat(),
                run.records_processed,
                run.records_inserted,
                f" error={run.error_message}" if run.error_message else "",
            )
    elif args.command == "prune":
        removed = prune_sync_runs(keep=args.keep)
        log.info("Removed %s sync runs", removed)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run(parsed_args)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
