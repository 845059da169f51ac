"""Shared fakes and fixtures for report pipeline tests.

Every collaborator of the orchestrator is replaced by an in-memory fake that
records its calls, so tests can assert on invocation counts and ordering
without network, Redis or an LLM.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import pytest

from app.domain.competitor import CompetitorRecord
from app.scraping import FetchError
from app.services.report_orchestrator import ReportOrchestrator


class FakeDataSource:
    """Returns a small deterministic record per identifier."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.failures: set[str] = set()
        self.delays: dict[str, float] = {}

    async def fetch(self, identifier: str) -> CompetitorRecord:
        self.calls.append(identifier)
        delay = self.delays.get(identifier)
        if delay:
            await asyncio.sleep(delay)
        if identifier in self.failures:
            raise FetchError(f"Failed to fetch https://www.{identifier}.com: unreachable")
        return CompetitorRecord(
            name=identifier.title(),
            product_names=[f"{identifier} Cloud", f"{identifier} Edge"],
            product_descriptions=[f"Hosted {identifier} platform"],
            pricing=["$49/mo"],
            headlines=[f"{identifier.title()} raises Series B"],
        )


class DictCache:
    """Cache gateway over a plain dict that records reads and writes."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.gets: list[str] = []
        self.sets: list[tuple[str, str, int]] = []

    async def get(self, key: str) -> str | None:
        self.gets.append(key)
        return self.store.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.sets.append((key, value, ttl_seconds))
        self.store[key] = value

    async def close(self) -> None:
        return None


class FakeNarrative:
    """Narrative service returning one header line per requested section."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[CompetitorRecord], list[str], str]] = []
        self.error: Exception | None = None

    async def generate(
        self,
        records: Sequence[CompetitorRecord],
        sections: Sequence[str],
        report_format: str,
    ) -> str:
        self.calls.append((list(records), list(sections), report_format))
        if self.error is not None:
            raise self.error
        lines: list[str] = []
        for section in sections:
            lines.append(section)
            lines.extend(f"{record.name} note for {section}." for record in records)
        return "\n".join(lines)


class RecordingLayout:
    """Layout engine stand-in returning fixed bytes."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str], str]] = []

    def render(self, text: str, sections: Sequence[str], report_format: str) -> bytes:
        self.calls.append((text, list(sections), report_format))
        return b"%PDF-1.4 fake report"


class RecordingSink:
    """Progress sink that keeps emitted messages and the closing state."""

    def __init__(self) -> None:
        self.messages: list[str] = []
        self.closed = False
        self.error: str | None = None

    async def emit(self, message: str) -> None:
        assert not self.closed, "emit after close"
        self.messages.append(message)

    async def close(self, error: str | None = None) -> None:
        self.closed = True
        self.error = error


@pytest.fixture()
def data_source() -> FakeDataSource:
    return FakeDataSource()


@pytest.fixture()
def cache() -> DictCache:
    return DictCache()


@pytest.fixture()
def narrative() -> FakeNarrative:
    return FakeNarrative()


@pytest.fixture()
def layout() -> RecordingLayout:
    return RecordingLayout()


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def orchestrator(
    data_source: FakeDataSource,
    cache: DictCache,
    narrative: FakeNarrative,
    layout: RecordingLayout,
) -> ReportOrchestrator:
    return ReportOrchestrator(
        data_source=data_source,
        cache=cache,
        narrative=narrative,
        layout=layout,
    )
