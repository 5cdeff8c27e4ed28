"""Runtime settings for a harvest run.

Every value can come from a ``HARVESTER_*`` environment variable (the CLI loads
a ``.env`` file first) and is overridden by the matching command-line flag.
Defaults reproduce the original single-site behaviour.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, TypeVar

from .utils import logger, _truthy_env

DEFAULT_SOURCE_URL = "https://ipcol.com/safety-data-sheets"
DEFAULT_CACHE_PATH = "ipcol.html"
DEFAULT_OUTPUT_DIR = "PDFs"
DEFAULT_TIMEOUT = 30.0
DEFAULT_PAGE_TIMEOUT = 30.0
DEFAULT_MAX_WORKERS = 1

T = TypeVar("T", int, float)


def _positive_env(name: str, default: T, cast: Callable[[str], T]) -> T:
    """Read a positive number from the environment, warning on bad values."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
        if value <= 0:
            raise ValueError("must be > 0")
    except ValueError:
        logger.warning(f"Invalid {name}='{raw}', falling back to {default}")
        return default
    return value


@dataclass
class HarvestConfig:
    source_url: str = DEFAULT_SOURCE_URL
    cache_path: Path = field(default_factory=lambda: Path(DEFAULT_CACHE_PATH))
    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))
    timeout: float = DEFAULT_TIMEOUT
    page_timeout: float = DEFAULT_PAGE_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    show_progress: bool = True

    def __post_init__(self) -> None:
        self.cache_path = Path(self.cache_path)
        self.output_dir = Path(self.output_dir)

    @classmethod
    def from_env(cls) -> "HarvestConfig":
        """Build a config from ``HARVESTER_*`` variables, defaults elsewhere."""
        return cls(
            source_url=os.getenv("HARVESTER_SOURCE_URL") or DEFAULT_SOURCE_URL,
            cache_path=Path(os.getenv("HARVESTER_CACHE_PATH") or DEFAULT_CACHE_PATH),
            output_dir=Path(os.getenv("HARVESTER_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR),
            timeout=_positive_env("HARVESTER_TIMEOUT", DEFAULT_TIMEOUT, float),
            page_timeout=_positive_env(
                "HARVESTER_PAGE_TIMEOUT", DEFAULT_PAGE_TIMEOUT, float
            ),
            max_workers=_positive_env(
                "HARVESTER_MAX_WORKERS", DEFAULT_MAX_WORKERS, int
            ),
            show_progress=not _truthy_env("HARVESTER_NO_PROGRESS"),
        )
