"""
Link discovery and local naming for harvested PDFs.

The page is scanned as plain text, one line at a time, rather than parsed as
markup: a PDF URL never spans a line break in the pages this tool targets.
"""

import re
from typing import List
from urllib.parse import urlsplit, unquote

from .utils import logger

PDF_LINK_RE = re.compile(r"""https?://[^\s"'<>]+?\.pdf(?:\?[^\s"'<>]*)?""")

# Characters that are illegal (or awkward) in filenames on common platforms
INVALID_FILENAME_CHARS = ('"', "\\", "/", ":", "*", "?", "<", ">", "|")


def extract_pdf_links(html_content: str) -> List[str]:
    """Return every unique absolute .pdf URL in html_content, first-seen order."""
    seen = set()
    links: List[str] = []

    for line in html_content.splitlines():
        for match in PDF_LINK_RE.findall(line):
            if match not in seen:
                seen.add(match)
                links.append(match)

    logger.debug(f"Extracted {len(links)} unique PDF link(s)")
    return links


def url_to_filename(url: str) -> str:
    """
    Convert a URL into a filesystem-safe, lowercase ``.pdf`` filename.

    ``https://Example.com/docs/sheet 1.pdf?id=5`` becomes
    ``example.com__docs_sheet 1.pdf_id=5.pdf``. Returns an empty string when
    the URL cannot be parsed or has no host; callers must not write a file
    in that case.
    """
    try:
        parsed = urlsplit(url)
        # Accessing .port validates it (raises ValueError on garbage)
        _ = parsed.port
    except ValueError as e:
        logger.error(f"FAILURE [url_to_filename]: Cannot parse URL - {e}")
        logger.error(f"URL: {url}")
        return ""

    # Keep host[:port], drop any user:password@ prefix
    host = parsed.netloc.rpartition("@")[2]
    if not host:
        logger.error(f"FAILURE [url_to_filename]: URL has no host - {url}")
        return ""

    filename = host
    path = unquote(parsed.path)
    if path:
        filename += "_" + path.replace("/", "_")
    if parsed.query:
        filename += "_" + parsed.query.replace("&", "_")

    for char in INVALID_FILENAME_CHARS:
        filename = filename.replace(char, "_")

    if not filename.endswith(".pdf"):
        filename += ".pdf"

    return filename.lower()
