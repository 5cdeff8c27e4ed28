#!/usr/bin/env python3
"""
PDF Harvester

Fetches one web page, pulls every absolute .pdf link out of it and downloads
each unique PDF into a local directory:
1. Cache the source page on disk (fetched once, reused afterwards)
2. Scan the cached HTML line by line for PDF links
3. Map every link to a safe local filename
4. Download each PDF that is not already present
"""

import os
import logging
from typing import Optional
from pathlib import Path
from colorama import Fore, Style, init as colorama_init


# Initialize colorama for cross-platform colored output
colorama_init(autoreset=True)

DIR_MODE = 0o755
FILE_MODE = 0o644


def setup_logger(
    name: str = "pdf_harvester",
    log_file: Optional[Path] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Set up a logger with console and file output."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    # Console handler with colors
    console_handler = logging.StreamHandler()

    class ColoredFormatter(logging.Formatter):
        COLORS = {
            "DEBUG": Fore.CYAN,
            "INFO": Fore.GREEN,
            "WARNING": Fore.YELLOW,
            "ERROR": Fore.RED,
            "CRITICAL": Fore.RED + Style.BRIGHT,
        }

        def format(self, record):
            # Copy so the file handler still sees the plain level name
            log_record = logging.makeLogRecord(record.__dict__)
            levelname = log_record.levelname
            if levelname in self.COLORS:
                log_record.levelname = (
                    f"{self.COLORS[levelname]}{levelname}{Style.RESET_ALL}"
                )
            return super().format(log_record)

    console_handler.setFormatter(ColoredFormatter("%(levelname)s - %(message)s"))
    logger.addHandler(console_handler)

    # File handler for failures (without colors) - only if log_file is explicitly provided
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


logger = setup_logger()  # Default logger for initialization


def _truthy_env(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "y", "on"}


def file_exists(path: Path) -> bool:
    """Return True if path exists and is a regular file (not a directory).

    Any error while checking (name too long, embedded NUL, ...) counts as "does
    not exist"; the later write reports the real problem for that one file.
    """
    try:
        return Path(path).is_file()
    except (OSError, ValueError):
        return False


def create_directory(path: Path, mode: int = DIR_MODE) -> bool:
    """Create path (and missing parents). Failures are logged, never raised."""
    try:
        Path(path).mkdir(mode=mode, parents=True, exist_ok=True)
        logger.debug(f"Output directory ready: {path}")
        return True
    except OSError as e:
        logger.error(f"FAILURE [create_directory]: Could not create directory - {e}")
        logger.error(f"Path: {path}")
        return False


def write_file(path: Path, data: bytes, mode: int = FILE_MODE) -> None:
    """Write data to a new file at path, failing if it already exists.

    The file is opened with O_EXCL so two writers can never share a target. If
    the write itself fails the half-written file is removed before the error
    is re-raised.
    """
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
    except OSError:
        try:
            os.unlink(path)
        except OSError as e:
            logger.warning(f"Could not remove partial file {path}: {e}")
        raise


def read_text_file(path: Path) -> str:
    """Read a cached page as text; undecodable bytes are replaced."""
    return Path(path).read_text(encoding="utf-8", errors="replace")
