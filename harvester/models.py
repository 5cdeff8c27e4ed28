"""Result types reported by the downloader and the pipeline driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class DownloadStatus(str, Enum):
    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    INVALID_URL = "invalid_url"
    NETWORK_ERROR = "network_error"
    BAD_STATUS = "bad_status"
    BAD_CONTENT_TYPE = "bad_content_type"
    READ_ERROR = "read_error"
    EMPTY_BODY = "empty_body"
    WRITE_ERROR = "write_error"


@dataclass
class DownloadResult:
    """Outcome of a single PDF link."""

    url: str
    status: DownloadStatus
    path: Optional[Path] = None
    bytes_written: int = 0
    detail: str = ""

    @property
    def ok(self) -> bool:
        """``True`` for a fresh download or a skip of an existing file."""
        return self.status in (DownloadStatus.DOWNLOADED, DownloadStatus.SKIPPED)

    @property
    def failed(self) -> bool:
        return not self.ok


@dataclass
class RunSummary:
    """Everything one harvest run did, in link order."""

    source_url: str
    page_cached: bool = False
    links: List[str] = field(default_factory=list)
    results: List[DownloadResult] = field(default_factory=list)

    def _count(self, status: DownloadStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def downloaded(self) -> int:
        return self._count(DownloadStatus.DOWNLOADED)

    @property
    def skipped(self) -> int:
        return self._count(DownloadStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.failed)

    @property
    def total_bytes(self) -> int:
        return sum(r.bytes_written for r in self.results)

    @property
    def ok(self) -> bool:
        """``True`` when the page was available and no link failed."""
        return self.page_cached and self.failed == 0
