#!/usr/bin/env python3
"""
PDF Harvester

Command-line entry point: fetch a page, extract its PDF links and download
every PDF that is not already in the output directory.
"""

import sys
import logging
import argparse
from typing import Optional, Dict, List, Any
from pathlib import Path
from colorama import Fore, Style
from dotenv import load_dotenv
from .utils import logger, setup_logger
from .config import HarvestConfig
from .client import PDFFetcher
from .batch import harvest, load_links
from .models import RunSummary

STATUS_COLORS = {
    "downloaded": Fore.GREEN,
    "skipped": Fore.CYAN,
}


def print_table(items: List[Dict[str, Any]], keys: List[str], title: str = "") -> None:
    """Pretty print a list of dictionaries as a table."""
    if not items:
        print("No items to display")
        return

    if title:
        print(f"\n{title}")
        print("=" * len(title))

    # Calculate column widths
    widths = {}
    for key in keys:
        widths[key] = len(key)
        for item in items:
            value = str(item.get(key, ""))
            widths[key] = max(widths[key], len(value))

    header = " | ".join(key.ljust(widths[key]) for key in keys)
    print(f"\n{header}")
    print("-" * len(header))

    for item in items:
        cells = []
        for key in keys:
            cell = str(item.get(key, "")).ljust(widths[key])
            if key == "status":
                color = STATUS_COLORS.get(item["status"], Fore.RED)
                cell = f"{color}{cell}{Style.RESET_ALL}"
            cells.append(cell)
        print(" | ".join(cells))

    print()


def print_summary(summary: RunSummary) -> None:
    rows = [
        {
            "#": idx,
            "status": result.status.value,
            "file": result.path.name if result.path else "-",
            "detail": result.detail or f"{result.bytes_written:,} bytes",
        }
        for idx, result in enumerate(summary.results, 1)
    ]
    print_table(rows, ["#", "status", "file", "detail"], title="Harvest results")

    mark = f"{Fore.GREEN}✓" if summary.ok else f"{Fore.RED}✗"
    print(
        f"{mark}{Style.RESET_ALL} {len(summary.links)} link(s): "
        f"{summary.downloaded} downloaded, {summary.skipped} skipped, "
        f"{summary.failed} failed ({summary.total_bytes:,} bytes)"
    )


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive number")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="PDF Harvester - Download every PDF linked from a web page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Harvest the default page into ./PDFs
  pdf-harvester

  # Harvest another page into a custom directory
  pdf-harvester --url https://example.com/datasheets --cache example.html -o sheets

  # Only show which PDFs would be fetched
  pdf-harvester --list-links

  # Download four files at a time
  pdf-harvester --max-workers 4
        """,
    )
    parser.add_argument(
        "--url",
        type=str,
        help="Page to scan for PDF links (overrides HARVESTER_SOURCE_URL)",
    )
    parser.add_argument(
        "--cache",
        type=Path,
        help="Where the fetched page is cached (overrides HARVESTER_CACHE_PATH)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output directory for PDFs (overrides HARVESTER_OUTPUT_DIR, default: PDFs)",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        help="Timeout in seconds for each PDF download (default: 30)",
    )
    parser.add_argument(
        "--page-timeout",
        type=_positive_float,
        help="Timeout in seconds for the source page fetch (default: 30)",
    )
    parser.add_argument(
        "--max-workers",
        type=_positive_int,
        help="Number of parallel downloads (overrides HARVESTER_MAX_WORKERS, default: 1)",
    )
    parser.add_argument(
        "--list-links",
        action="store_true",
        help="Print the extracted PDF links without downloading them",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )
    parser.add_argument(
        "--allow-failures",
        action="store_true",
        help="Exit with status 0 even if some downloads failed",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Append error records to this file",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG)",
    )
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> HarvestConfig:
    """Environment-derived config with command-line overrides applied."""
    config = HarvestConfig.from_env()
    if args.url:
        config.source_url = args.url
    if args.cache:
        config.cache_path = args.cache
    if args.output:
        config.output_dir = args.output
    if args.timeout:
        config.timeout = args.timeout
    if args.page_timeout:
        config.page_timeout = args.page_timeout
    if args.max_workers:
        config.max_workers = args.max_workers
    if args.no_progress:
        config.show_progress = False
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    # Reconfigure the shared logger in place so every module keeps its reference
    try:
        setup_logger(log_file=args.log_file, level=level)
    except OSError as e:
        parser.error(f"cannot open log file {args.log_file}: {e}")
    logger.debug("Verbose logging enabled")

    load_dotenv()
    config = config_from_args(args)
    logger.debug(f"Configuration: {config}")

    if args.list_links:
        with PDFFetcher(timeout=config.timeout, page_timeout=config.page_timeout) as fetcher:
            links = load_links(config, fetcher)
        if links is None:
            return 1
        for link in links:
            print(link)
        return 0

    print(f"{Fore.GREEN}{Style.BRIGHT}pdf-harvester{Style.RESET_ALL} {config.source_url}")

    summary = harvest(config)
    print_summary(summary)

    if summary.ok or args.allow_failures:
        return 0
    return 1


if __name__ == "__main__":
    sys.exit(main())
