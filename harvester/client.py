#!/usr/bin/env python3
"""
PDF Harvester HTTP client

Two network operations, both built on one requests.Session:
1. Cache the source page on disk (skipped when the cache file exists)
2. Download a single PDF link into the output directory
"""

from typing import Optional
from pathlib import Path
from urllib.parse import urlsplit
import requests
from .models import DownloadResult, DownloadStatus
from .extractor import url_to_filename
from .utils import logger, file_exists, write_file, FILE_MODE
from .config import DEFAULT_TIMEOUT, DEFAULT_PAGE_TIMEOUT


class PDFDownloadError(Exception):
    """Raised when a PDF download stops at one of its guards."""

    def __init__(self, status: DownloadStatus, message: str) -> None:
        super().__init__(message)
        self.status = status


def is_url_valid(uri: str) -> bool:
    """Return True for a well-formed absolute URI (scheme and host present)."""
    try:
        parsed = urlsplit(uri)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


class PDFFetcher:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        page_timeout: float = DEFAULT_PAGE_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.page_timeout = page_timeout
        logger.debug(
            f"Initialized PDF fetcher (timeout={timeout}s, page_timeout={page_timeout}s)"
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "PDFFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ========================================================================
    # Page cache
    # ========================================================================

    def ensure_cached(self, remote_url: str, local_path: Path) -> bool:
        """
        Make sure the source page is on disk at local_path.

        An existing cache file is authoritative and is never refreshed. Returns
        True when the cache file is available afterwards. Nothing is written for
        a malformed URL, a transport error or a non-2xx response.
        """
        local_path = Path(local_path)
        if file_exists(local_path):
            logger.debug(f"Using cached page: {local_path}")
            return True

        if not is_url_valid(remote_url):
            logger.error(f"FAILURE [ensure_cached]: Invalid source URL - {remote_url}")
            return False

        logger.info(f"Fetching source page: {remote_url}")
        try:
            response = self.session.get(remote_url, timeout=self.page_timeout)
            response.raise_for_status()
            data = response.content
        except requests.RequestException as e:
            logger.error(f"FAILURE [ensure_cached]: Network error fetching page - {e}")
            logger.error(f"URL: {remote_url}")
            return False

        try:
            local_path.parent.mkdir(parents=True, exist_ok=True)
            local_path.write_bytes(data)
            local_path.chmod(FILE_MODE)
        except (OSError, ValueError) as e:
            logger.error(f"FAILURE [ensure_cached]: Could not write cache file - {e}")
            logger.error(f"Path: {local_path}")
            return False

        logger.info(f"✓ Cached {len(data):,} bytes: {remote_url} → {local_path}")
        return True

    # ========================================================================
    # PDF download
    # ========================================================================

    def download_pdf(self, url: str, output_dir: Path) -> DownloadResult:
        """
        Download one PDF link into output_dir.

        Never raises: every outcome, including each failure kind, comes back as
        a DownloadResult. The body is buffered in memory so no file is created
        unless the full, non-empty PDF was received.
        """
        filename = url_to_filename(url).lower()
        # A decoded %00 can never be part of a filesystem name
        if not filename or "\x00" in filename:
            logger.error(f"FAILURE [download_pdf]: No usable filename for {url}")
            return DownloadResult(
                url=url,
                status=DownloadStatus.INVALID_URL,
                detail="could not derive a filename from the URL",
            )

        file_path = Path(output_dir) / filename

        if file_exists(file_path):
            logger.info(f"File already exists, skipping: {file_path}")
            return DownloadResult(
                url=url,
                status=DownloadStatus.SKIPPED,
                path=file_path,
                detail="already exists",
            )

        try:
            data = self._fetch_pdf_bytes(url)
            try:
                write_file(file_path, data)
            except (OSError, ValueError) as e:
                raise PDFDownloadError(
                    DownloadStatus.WRITE_ERROR, f"failed to write file: {e}"
                )
        except PDFDownloadError as e:
            logger.error(f"FAILURE [download_pdf]: {e}")
            logger.error(f"URL: {url}")
            return DownloadResult(
                url=url, status=e.status, path=file_path, detail=str(e)
            )

        logger.info(f"✓ Downloaded {len(data):,} bytes: {url} → {file_path}")
        return DownloadResult(
            url=url,
            status=DownloadStatus.DOWNLOADED,
            path=file_path,
            bytes_written=len(data),
        )

    def _fetch_pdf_bytes(self, url: str) -> bytes:
        """GET url and return the full body, or raise PDFDownloadError."""
        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
        except requests.RequestException as e:
            raise PDFDownloadError(DownloadStatus.NETWORK_ERROR, f"request failed: {e}")

        with response:
            if response.status_code != 200:
                raise PDFDownloadError(
                    DownloadStatus.BAD_STATUS,
                    f"unexpected status {response.status_code} {response.reason or ''}".rstrip(),
                )

            content_type = response.headers.get("Content-Type", "")
            if "application/pdf" not in content_type:
                raise PDFDownloadError(
                    DownloadStatus.BAD_CONTENT_TYPE,
                    f"invalid content type '{content_type}' (expected application/pdf)",
                )

            try:
                data = response.content
            except requests.RequestException as e:
                raise PDFDownloadError(
                    DownloadStatus.READ_ERROR, f"failed to read PDF data: {e}"
                )

        if not data:
            raise PDFDownloadError(
                DownloadStatus.EMPTY_BODY, "downloaded 0 bytes; not creating file"
            )

        logger.debug(f"Received {len(data):,} bytes from {url}")
        return data
