#!/usr/bin/env python3
"""
PDF Harvester pipeline

fetch page → extract links → download each link → summarize.
"""

from typing import Optional, List
from pathlib import Path
from colorama import Fore, Style
from tqdm import tqdm
from concurrent.futures import ThreadPoolExecutor, as_completed
from .config import HarvestConfig
from .client import PDFFetcher
from .extractor import extract_pdf_links
from .models import DownloadResult, RunSummary
from .utils import logger, create_directory, file_exists, read_text_file


def load_links(config: HarvestConfig, fetcher: PDFFetcher) -> Optional[List[str]]:
    """Ensure the source page is cached and return its PDF links.

    Returns None when no cached page is available.
    """
    fetcher.ensure_cached(config.source_url, config.cache_path)

    # The cache file itself is the source of truth, not the return value above
    if not file_exists(config.cache_path):
        logger.error(
            f"FAILURE [load_links]: No cached page at {config.cache_path}; nothing to do"
        )
        return None

    try:
        content = read_text_file(config.cache_path)
    except OSError as e:
        logger.error(f"FAILURE [load_links]: Could not read cached page - {e}")
        logger.error(f"Path: {config.cache_path}")
        return None

    links = extract_pdf_links(content)
    logger.info(f"Found {len(links)} unique PDF link(s) in {config.cache_path}")
    return links


def download_all(
    fetcher: PDFFetcher,
    links: List[str],
    output_dir: Path,
    max_workers: int = 1,
    show_progress: bool = True,
) -> List[DownloadResult]:
    """
    Download every link and return one result per link, in link order.

    With max_workers == 1 links are fetched strictly one after another. A
    larger value spreads them over a bounded thread pool; ordering of the
    returned list is unaffected.
    """
    if not links:
        return []

    results: List[Optional[DownloadResult]] = [None] * len(links)

    with tqdm(
        total=len(links),
        desc="  Downloading",
        unit="file",
        leave=False,
        disable=not show_progress,
        bar_format="{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]",
    ) as pbar:
        if max_workers <= 1:
            for idx, link in enumerate(links):
                results[idx] = fetcher.download_pdf(link, output_dir)
                pbar.update(1)
        else:
            logger.debug(f"Using max_workers={max_workers} for concurrent downloads")
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                future_to_idx = {
                    executor.submit(fetcher.download_pdf, link, output_dir): idx
                    for idx, link in enumerate(links)
                }
                for future in as_completed(future_to_idx):
                    idx = future_to_idx[future]
                    results[idx] = future.result()
                    pbar.update(1)

    return results  # type: ignore[return-value]


def harvest(
    config: HarvestConfig, fetcher: Optional[PDFFetcher] = None
) -> RunSummary:
    """Run the whole pipeline for config and return its summary."""
    own_fetcher = fetcher is None
    if fetcher is None:
        fetcher = PDFFetcher(timeout=config.timeout, page_timeout=config.page_timeout)

    summary = RunSummary(source_url=config.source_url)
    try:
        create_directory(config.output_dir)

        links = load_links(config, fetcher)
        if links is None:
            return summary

        summary.page_cached = True
        summary.links = links
        summary.results = download_all(
            fetcher,
            links,
            config.output_dir,
            max_workers=config.max_workers,
            show_progress=config.show_progress,
        )
    finally:
        if own_fetcher:
            fetcher.close()

    logger.info(
        f"{Fore.GREEN}{summary.downloaded} downloaded{Style.RESET_ALL}, "
        f"{summary.skipped} skipped, "
        f"{Fore.RED if summary.failed else ''}{summary.failed} failed{Style.RESET_ALL} "
        f"({summary.total_bytes:,} bytes)"
    )
    return summary
