"""Shared fixtures: an in-memory stand-in for ``requests.Session``.

No test touches the network. ``FakeSession`` maps URLs to canned
``FakeResponse`` objects (or exceptions) and records every GET it receives.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from harvester.client import PDFFetcher
from harvester.config import HarvestConfig

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        body: bytes = b"",
        content_type: Optional[str] = "application/pdf",
        reason: str = "OK",
        read_error: Optional[Exception] = None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.headers = CaseInsensitiveDict()
        if content_type is not None:
            self.headers["Content-Type"] = content_type
        self._body = body
        self._read_error = read_error
        self.closed = False

    @property
    def content(self) -> bytes:
        if self._read_error is not None:
            raise self._read_error
        return self._body

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} {self.reason}", response=self)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class FakeSession:
    def __init__(self) -> None:
        self.routes: Dict[str, Union[FakeResponse, Exception]] = {}
        self.calls: List[str] = []
        self.closed = False

    def add(self, url: str, response: Union[FakeResponse, Exception]) -> None:
        self.routes[url] = response

    def add_pdf(self, url: str, body: bytes = PDF_BYTES) -> None:
        self.add(url, FakeResponse(body=body))

    def get(self, url: str, **kwargs) -> FakeResponse:
        self.calls.append(url)
        outcome = self.routes.get(url)
        if outcome is None:
            return FakeResponse(status_code=404, reason="Not Found", content_type="text/html")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fetcher(session: FakeSession) -> PDFFetcher:
    return PDFFetcher(session=session)  # type: ignore[arg-type]


@pytest.fixture
def config(tmp_path: Path) -> HarvestConfig:
    return HarvestConfig(
        source_url="https://example.com/library",
        cache_path=tmp_path / "page.html",
        output_dir=tmp_path / "PDFs",
        show_progress=False,
    )
