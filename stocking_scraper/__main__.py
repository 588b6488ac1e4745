"""
CLI entry point for stocking-scraper.

Usage:
    python -m stocking_scraper
    python -m stocking_scraper --start 2024-03-01 --end 2024-06-30
    python -m stocking_scraper --backfill --output output/events.json
    python -m stocking_scraper --sync stocking.db
    python -m stocking_scraper --query --start 2024-04-01 --end 2024-05-31
"""

import argparse
import asyncio
import logging
import sys
from datetime import date

import structlog

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: str = "INFO", json_output: bool = False):
    """Configure structured logging."""
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)

    if json_output:
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )
    else:
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
                structlog.dev.ConsoleRenderer(colors=True),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )


def iso_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from None


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Trout stocking schedule scraper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scrape the default window (last 60 days through next year)
  python -m stocking_scraper

  # Scrape an explicit range
  python -m stocking_scraper --start 2024-03-01 --end 2024-06-30

  # Full history, saved as JSONL
  python -m stocking_scraper --backfill --output out/events.jsonl --output-format jsonl

  # Store new events in SQLite
  python -m stocking_scraper --sync stocking.db

  # Cached API response, filtered to a range
  python -m stocking_scraper --query --start 2024-04-01 --end 2024-05-31

  # Use the regex table backend
  python -m stocking_scraper --backend regex
        """,
    )

    parser.add_argument(
        "--start",
        type=iso_date,
        help="Range start (YYYY-MM-DD); requires --end",
    )

    parser.add_argument(
        "--end",
        type=iso_date,
        help="Range end (YYYY-MM-DD); requires --start",
    )

    parser.add_argument(
        "--backfill",
        action="store_true",
        help="Scan from the configured backfill start date",
    )

    parser.add_argument(
        "--backend",
        choices=["soup", "regex"],
        help="Table parsing backend (default: from settings)",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to settings.yml config file",
    )

    parser.add_argument(
        "--output",
        type=str,
        help="Write events to this file instead of stdout",
    )

    parser.add_argument(
        "--output-format",
        choices=["json", "jsonl"],
        default="json",
        help="Output format (default: json)",
    )

    parser.add_argument(
        "--group",
        action="store_true",
        help="Print event counts per water body",
    )

    parser.add_argument(
        "--sync",
        nargs="?",
        const="",
        metavar="DATABASE",
        help="Store events in SQLite (default path from settings)",
    )

    parser.add_argument(
        "--query",
        action="store_true",
        help="Print the cached API response; --start/--end filter it",
    )

    parser.add_argument(
        "--refresh",
        action="store_true",
        help="With --query, bypass the cache",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON (for production)",
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    args = parser.parse_args(argv)

    if (args.start is None) != (args.end is None):
        parser.error("--start and --end must be given together")
    if args.start and args.backfill:
        parser.error("--backfill cannot be combined with --start/--end")
    if args.query and (args.backfill or args.sync is not None):
        parser.error("--query cannot be combined with --backfill or --sync")
    if args.refresh and not args.query:
        parser.error("--refresh requires --query")
    if args.start and args.start > args.end:
        parser.error("--start must not be after --end")

    return args


async def main_async(args) -> int:
    """Async main function. Returns the process exit code."""
    import json

    from .config import load_settings
    from .core.events import group_by_water_body
    from .core.models import DateRange
    from .orchestrator import ScrapeError, StockingScraper, save_events
    from .service import build_service
    from .sync import StockingStore, SyncJob

    logger = structlog.get_logger(__name__)

    settings = load_settings(args.config)
    if args.backend:
        settings.scraper.backend = args.backend

    async with StockingScraper(settings.scraper) as scraper:
        if args.start:
            date_range = DateRange(start=args.start, end=args.end)
        elif args.backfill:
            date_range = scraper.backfill_range()
        else:
            date_range = scraper.default_range()

        logger.info("starting_stocking_scraper", backend=settings.scraper.backend, **date_range.to_dict())

        try:
            if args.sync is not None:
                with StockingStore(args.sync or settings.storage.database) as store:
                    result = await SyncJob(scraper, store).run(date_range)
                print(json.dumps(result.to_dict(), indent=2))
                return 0

            if args.query:
                service = build_service(settings, scraper)
                response = await service.query(
                    start=args.start.isoformat() if args.start else None,
                    # inclusive of every timestamp on the end day
                    end=f"{args.end.isoformat()}T23:59:59.999Z" if args.end else None,
                    refresh=args.refresh,
                )
                print(json.dumps(response.to_dict(), ensure_ascii=False, indent=2))
                return 0

            events = await scraper.scrape(date_range)
        except ScrapeError as e:
            logger.error("scrape_failed", error=str(e), retryable=True)
            return 1

    if not events:
        logger.warning("no_events_found")

    if args.group:
        for water_body, group in group_by_water_body(events).items():
            print(f"{len(group):5d}  {water_body}")
    elif args.output:
        save_events(events, args.output, args.output_format)
    elif args.output_format == "jsonl":
        for event in events:
            print(json.dumps(event.to_dict(), ensure_ascii=False))
    else:
        print(json.dumps([e.to_dict() for e in events], ensure_ascii=False, indent=2))

    logger.info("scraping_complete", total_events=len(events))
    return 0


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    if args.version:
        from . import __version__
        print(f"stocking-scraper {__version__}")
        sys.exit(0)

    setup_logging(args.log_level, args.json_logs)

    try:
        sys.exit(asyncio.run(main_async(args)))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        logger = structlog.get_logger(__name__)
        logger.exception("fatal_error", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
