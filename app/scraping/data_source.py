"""
Competitor website data source.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Protocol

import requests

from app.config import CompetitorScrapingSettings
from app.domain.competitor import CompetitorRecord
from app.logging_utils import log_event
from app.scraping.parsing import HTMLParsingLayer

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class FetchError(RuntimeError):
    """
    Raised when a competitor page cannot be fetched.
    """


class CompetitorDataSource(Protocol):
    async def fetch(self, identifier: str) -> CompetitorRecord:
        ...


class WebsiteDataSource:
    """
    Fetches a competitor landing page and extracts a CompetitorRecord from it.

    HTTP calls are blocking and run in a worker thread so several competitors
    can be resolved concurrently from the event loop.
    """

    def __init__(
        self,
        *,
        settings: CompetitorScrapingSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self.request_headers = {"User-Agent": settings.user_agent}

    def url_for(self, identifier: str) -> str:
        if identifier.startswith(("http://", "https://")):
            return identifier
        return self.settings.url_template.format(competitor=identifier)

    async def fetch(self, identifier: str) -> CompetitorRecord:
        return await asyncio.to_thread(self.scrape, identifier)

    def scrape(self, identifier: str) -> CompetitorRecord:
        url = self.url_for(identifier)
        response = self._request_with_retry(url)
        record = HTMLParsingLayer.parse_competitor(html=response.text, fallback_name=identifier)
        log_event(
            logger,
            logging.INFO,
            "competitor_scraped",
            competitor=identifier,
            url=url,
            products=len(record.product_names),
            pricing=len(record.pricing),
            headlines=len(record.headlines),
        )
        return record

    def _request_with_retry(self, url: str) -> requests.Response:
        last_error: Exception | None = None

        for attempt in range(self.settings.max_retries + 1):
            try:
                response = self.session.get(
                    url,
                    headers=self.request_headers,
                    timeout=self.settings.timeout_seconds,
                    allow_redirects=True,
                )
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable status={response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except (requests.Timeout, requests.ConnectionError, requests.HTTPError) as exc:
                last_error = exc
                if isinstance(exc, requests.HTTPError):
                    status_code = exc.response.status_code if exc.response is not None else None
                    if status_code not in RETRYABLE_STATUS_CODES:
                        raise FetchError(f"Failed to fetch {url}: {exc}") from exc

            if attempt >= self.settings.max_retries:
                break

            backoff_seconds = self.settings.backoff_initial_seconds * (
                self.settings.backoff_multiplier**attempt
            )
            log_event(
                logger,
                logging.WARNING,
                "competitor_fetch_retry",
                url=url,
                attempt=attempt + 1,
                backoff_seconds=backoff_seconds,
                error=str(last_error),
            )
            time.sleep(backoff_seconds)

        raise FetchError(f"Failed to fetch {url}: {last_error}")
