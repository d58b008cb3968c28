"""
CLI entry point for cropdocs-scraper.

Usage:
    python -m cropdocs_scraper
    python -m cropdocs_scraper --output /data/pdfs
    python -m cropdocs_scraper --dry-run --log-level DEBUG
"""

import argparse
import asyncio
import logging
import sys

import structlog

from .config.loader import ConfigError, load_config

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
            logger_factory=structlog.PrintLoggerFactory(),
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
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=True,
        )


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Download PDF documents listed in the Crop Science document index",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Download everything into PDFs/
  python -m cropdocs_scraper

  # List PDF URLs without downloading
  python -m cropdocs_scraper --dry-run

  # Use custom config file and output directory
  python -m cropdocs_scraper --config /path/to/scraper.yml --output /data/pdfs
        """,
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to scraper.yml config file",
    )

    parser.add_argument(
        "--endpoint",
        type=str,
        help="Document index URL (overrides config)",
    )

    parser.add_argument(
        "--origin",
        type=str,
        help="Origin prefixed to relative document URLs (overrides config)",
    )

    parser.add_argument(
        "--output",
        type=str,
        help="Output directory (overrides config, default: PDFs/)",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        help="Per-download timeout in seconds (overrides config, default: 30)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List PDF URLs only - don't download",
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

    return parser.parse_args(argv)


async def main_async(args):
    """Async main function."""
    from .orchestrator import DocumentScraper

    config = load_config(args.config).with_overrides(
        endpoint=args.endpoint,
        origin=args.origin,
        output_dir=args.output,
        download_timeout=args.timeout,
    )

    scraper = DocumentScraper(config=config)
    return await scraper.run(dry_run=args.dry_run)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    # Version check
    if args.version:
        from . import __version__
        print(f"cropdocs-scraper {__version__}")
        sys.exit(0)

    setup_logging(args.log_level, args.json_logs)
    logger = structlog.get_logger(__name__)

    # Per-URL failures are logged, not reflected in the exit code
    try:
        asyncio.run(main_async(args))
        sys.exit(0)
    except (ConfigError, FileNotFoundError) as e:
        logger.error("config_error", error=str(e))
        sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("fatal_error", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
