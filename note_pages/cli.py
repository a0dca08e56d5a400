"""
cli.py — note_pages command line
================================

    python -m note_pages sweep            # one pass over unprocessed notes
    python -m note_pages run              # every interval until Ctrl+C
    python -m note_pages read BOOK PAGE   # print one page as JSON
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from note_pages.config import Settings, load_settings
from note_pages.db import open_store
from note_pages.errors import NotePagesError
from note_pages.note_processor import SweepReport, process_unprocessed_notes
from note_pages.page_reader import error_status, read_page
from note_pages.scheduler import PeriodicTask

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def run_sweep(settings: Settings) -> SweepReport:
    """Scheduled entry point: one full resolution sweep."""
    store = open_store(settings.db_path)
    try:
        return process_unprocessed_notes(
            store,
            settings.storage_root,
            max_workers=settings.max_workers,
            extraction_timeout=settings.extraction_timeout,
            max_pages=settings.max_pages,
        )
    finally:
        store.close()


def build_task(settings: Settings) -> PeriodicTask:
    return PeriodicTask(
        "process_notes", lambda: run_sweep(settings),
        interval=settings.interval_seconds,
    )


def _cmd_sweep(settings: Settings, args) -> int:
    report = run_sweep(settings)
    print(f"Processed {report.processed} notes "
          f"({report.matched} matched, {report.unresolved} unresolved), "
          f"{report.skipped_books} books skipped, {report.failed_saves} failed saves")
    return 0


def _cmd_run(settings: Settings, args) -> int:
    task = build_task(settings)
    if args.now:
        task.run_once()
    task.start()
    try:
        task.wait()
    except KeyboardInterrupt:
        logger.info("Stopping...")
    finally:
        task.stop(timeout=5)
    return 0


def _cmd_read(settings: Settings, args) -> int:
    store = open_store(settings.db_path)
    try:
        content = read_page(store, settings.storage_root, args.book_id, args.page,
                            timeout=settings.extraction_timeout)
    except NotePagesError as exc:
        status, message = error_status(exc)
        print(json.dumps({"status": status, "message": message, "detail": str(exc)}),
              file=sys.stderr)
        return 1 if status < 500 else 2
    finally:
        store.close()
    print(json.dumps(content.to_dict(), ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="note_pages",
        description="Resolve highlight notes to PDF pages and read pages as paragraphs.",
    )
    parser.add_argument("--config", type=Path, default=None,
                        help="Path to config.json (default: env vars and .env only)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("sweep", help="Process all unprocessed notes once")

    run = sub.add_parser("run", help="Process notes periodically until interrupted")
    run.add_argument("--now", action="store_true", help="Run one sweep immediately")

    read = sub.add_parser("read", help="Print one page of a book as JSON")
    read.add_argument("book_id")
    read.add_argument("page", type=int)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args.config)
    setup_logging(settings.log_level)
    handlers = {"sweep": _cmd_sweep, "run": _cmd_run, "read": _cmd_read}
    return handlers[args.command](settings, args)


if __name__ == "__main__":
    sys.exit(main())
