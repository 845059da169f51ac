"""HTTP client used by the Streamlit frontend to drive the report API."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import requests


class ReportClientError(RuntimeError):
    """Raised when the API rejects a request or a report fails."""


@dataclass(frozen=True)
class ProgressUpdate:
    message: str | None = None
    error: str | None = None


def parse_sse_lines(lines: Iterable[str]) -> Iterator[ProgressUpdate]:
    """Turn ``data: {...}`` event-stream lines into progress updates."""
    for line in lines:
        if not line or not line.startswith("data:"):
            continue
        payload = json.loads(line[len("data:"):].strip())
        yield ProgressUpdate(message=payload.get("message"), error=payload.get("error"))


class ReportClient:
    def __init__(self, base_url: str, session: requests.Session | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()

    def start(self, competitors: list[str], sections: list[str], report_format: str) -> dict:
        response = self._session.post(
            f"{self._base_url}/api/reports",
            json={
                "competitors": competitors,
                "reportSections": sections,
                "reportFormat": report_format,
            },
            timeout=30,
        )
        if response.status_code != 202:
            raise ReportClientError(f"Report request rejected ({response.status_code}): {response.text}")
        return response.json()

    def progress(self, events_url: str) -> Iterator[ProgressUpdate]:
        with self._session.get(f"{self._base_url}{events_url}", stream=True, timeout=None) as response:
            response.raise_for_status()
            yield from parse_sse_lines(response.iter_lines(decode_unicode=True))

    def document(self, document_url: str) -> bytes:
        response = self._session.get(f"{self._base_url}{document_url}", timeout=60)
        if response.status_code != 200:
            raise ReportClientError(f"Report download failed ({response.status_code}): {response.text}")
        return response.content
