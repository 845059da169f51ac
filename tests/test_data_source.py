"""
tests/test_data_source.py

WebsiteDataSource URL resolution, retry behavior and record extraction.
"""

from __future__ import annotations

import asyncio

import pytest
import requests

from app.config import CompetitorScrapingSettings
from app.scraping import FetchError, WebsiteDataSource
from app.scraping import data_source as data_source_module


class _FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status={self.status_code}", response=self)


class _FakeSession:
    def __init__(self, outcomes: list) -> None:
        self.outcomes = list(outcomes)
        self.urls: list[str] = []
        self.headers: list[dict] = []

    def get(self, url, headers=None, timeout=None, allow_redirects=True):
        self.urls.append(url)
        self.headers.append(headers or {})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    sleeps: list[float] = []
    monkeypatch.setattr(data_source_module.time, "sleep", sleeps.append)
    return sleeps


def _source(session: _FakeSession, **overrides) -> WebsiteDataSource:
    settings = CompetitorScrapingSettings(**overrides)
    return WebsiteDataSource(settings=settings, session=session)


class TestUrlFor:
    def test_identifier_is_expanded_with_template(self) -> None:
        assert _source(_FakeSession([])).url_for("acme") == "https://www.acme.com"

    def test_custom_template(self) -> None:
        source = _source(_FakeSession([]), url_template="https://{competitor}.example.org/about")

        assert source.url_for("acme") == "https://acme.example.org/about"

    def test_full_url_is_used_verbatim(self) -> None:
        assert _source(_FakeSession([])).url_for("https://globex.io/") == "https://globex.io/"


class TestFetch:
    def test_fetch_parses_page(self) -> None:
        html = '<header><h1>Acme</h1></header><span class="price">$10</span>'
        session = _FakeSession([_FakeResponse(200, html)])

        record = asyncio.run(_source(session).fetch("acme"))

        assert record.name == "Acme"
        assert record.pricing == ["$10"]
        assert session.urls == ["https://www.acme.com"]
        assert session.headers[0]["User-Agent"] == "RivalReportBot/1.0"

    def test_single_attempt_by_default(self) -> None:
        session = _FakeSession([_FakeResponse(503)])

        with pytest.raises(FetchError):
            asyncio.run(_source(session).fetch("acme"))

        assert len(session.urls) == 1

    def test_retryable_status_is_retried_with_backoff(self, no_sleep) -> None:
        session = _FakeSession(
            [
                _FakeResponse(503),
                requests.ConnectionError("reset"),
                _FakeResponse(200, "<header><h1>Acme</h1></header>"),
            ]
        )
        source = _source(session, max_retries=2, backoff_initial_seconds=0.5, backoff_multiplier=2.0)

        record = source.scrape("acme")

        assert record.name == "Acme"
        assert len(session.urls) == 3
        assert no_sleep == [0.5, 1.0]

    def test_client_error_is_not_retried(self) -> None:
        session = _FakeSession([_FakeResponse(404), _FakeResponse(200)])
        source = _source(session, max_retries=3)

        with pytest.raises(FetchError):
            source.scrape("acme")

        assert len(session.urls) == 1

    def test_retries_exhausted_raise_fetch_error(self) -> None:
        session = _FakeSession([requests.Timeout("slow"), requests.Timeout("slow")])
        source = _source(session, max_retries=1)

        with pytest.raises(FetchError, match="slow"):
            source.scrape("acme")
