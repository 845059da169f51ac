"""
app/services/report_orchestrator.py

Report generation pipeline: competitor resolution through the cache, narrative
generation, and document layout, with ordered progress events.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from app.cache import CacheGateway, competitor_cache_key
from app.domain.competitor import CompetitorRecord
from app.domain.report import REPORT_FILENAME, ReportRequest
from app.logging_utils import log_event
from app.scraping import CompetitorDataSource
from app.services.progress import ProgressSink
from llm_synthesis.generator import NarrativeService

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while generating the report"
COMPETITOR_CACHE_TTL_SECONDS = 86400


class DocumentLayout(Protocol):
    def render(self, text: str, sections: Sequence[str], report_format: str) -> bytes:
        ...


class ReportPipelineError(RuntimeError):
    """
    Raised when any pipeline stage fails; the whole report is abandoned.
    """

    def __init__(self, *, stage: str, message: str, competitor: str | None = None) -> None:
        self.stage = stage
        self.competitor = competitor
        super().__init__(message)


@dataclass(frozen=True)
class ReportDocument:
    content: bytes
    filename: str = REPORT_FILENAME
    media_type: str = "application/pdf"

    @property
    def content_length(self) -> int:
        return len(self.content)


class ReportOrchestrator:
    """
    Runs one report request end to end.

    Progress events are emitted in stage order: one "Analyzing competitor"
    event per requested competitor (in list order, each emitted before that
    competitor's work is dispatched), then the analysis, document and
    completion events. The sink is closed on both success and failure.
    """

    def __init__(
        self,
        *,
        data_source: CompetitorDataSource,
        cache: CacheGateway,
        narrative: NarrativeService,
        layout: DocumentLayout,
        cache_ttl_seconds: int = COMPETITOR_CACHE_TTL_SECONDS,
    ) -> None:
        self._data_source = data_source
        self._cache = cache
        self._narrative = narrative
        self._layout = layout
        self._cache_ttl_seconds = cache_ttl_seconds

    async def generate(self, request: ReportRequest, sink: ProgressSink) -> ReportDocument:
        stage = "competitors"
        try:
            records = await self._resolve_competitors(request.competitors, sink)

            stage = "narrative"
            await sink.emit("Generating AI analysis...")
            narrative = await self._narrative.generate(records, request.sections, request.format)

            stage = "layout"
            await sink.emit("Creating PDF report...")
            content = await asyncio.to_thread(
                self._layout.render,
                narrative,
                request.sections,
                request.format,
            )

            await sink.emit("Report generation complete!")
        except Exception as exc:
            logger.exception("Report pipeline failed at stage=%s", stage)
            await sink.close(error=GENERIC_ERROR_MESSAGE)
            if isinstance(exc, ReportPipelineError):
                raise
            raise ReportPipelineError(stage=stage, message=str(exc)) from exc

        await sink.close()
        log_event(
            logger,
            logging.INFO,
            "report_generated",
            competitors=len(request.competitors),
            sections=len(request.sections),
            report_format=request.format,
            bytes=len(content),
        )
        return ReportDocument(content=content)

    async def _resolve_competitors(
        self,
        competitors: Sequence[str],
        sink: ProgressSink,
    ) -> list[CompetitorRecord]:
        total = len(competitors)
        in_flight: dict[str, asyncio.Task[CompetitorRecord]] = {}
        tasks: list[asyncio.Task[CompetitorRecord]] = []

        try:
            for index, identifier in enumerate(competitors):
                await sink.emit(f"Analyzing competitor {index + 1} of {total}...")
                task = in_flight.get(identifier)
                if task is None:
                    task = asyncio.create_task(self._resolve_competitor(identifier))
                    in_flight[identifier] = task
                tasks.append(task)
        except BaseException:
            # Lookups already dispatched must not outlive a failed fan-out.
            for task in in_flight.values():
                task.cancel()
            await asyncio.gather(*in_flight.values(), return_exceptions=True)
            raise

        results = await asyncio.gather(*tasks, return_exceptions=True)

        records: list[CompetitorRecord] = []
        for identifier, result in zip(competitors, results):
            if isinstance(result, Exception):
                raise ReportPipelineError(
                    stage="competitors",
                    competitor=identifier,
                    message=f"Failed to resolve competitor {identifier!r}: {result}",
                ) from result
            if isinstance(result, BaseException):
                raise result
            records.append(result)
        return records

    async def _resolve_competitor(self, identifier: str) -> CompetitorRecord:
        key = competitor_cache_key(identifier)
        cached = await self._cache.get(key)
        if cached is not None:
            try:
                record = CompetitorRecord.from_cache_value(cached)
            except ValidationError as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "competitor_cache_corrupt",
                    competitor=identifier,
                    error=str(exc),
                )
            else:
                log_event(logger, logging.INFO, "competitor_cache_hit", competitor=identifier)
                return record

        record = await self._data_source.fetch(identifier)
        await self._cache.set(key, record.to_cache_value(), self._cache_ttl_seconds)
        log_event(
            logger,
            logging.INFO,
            "competitor_cached",
            competitor=identifier,
            ttl_seconds=self._cache_ttl_seconds,
        )
        return record


def build_report_orchestrator(cache: CacheGateway) -> ReportOrchestrator:
    """
    Wire the orchestrator with the configured collaborators and a shared cache.
    """

    from app.config import get_cache_settings, get_competitor_scraping_settings
    from app.layout import DocumentLayoutEngine
    from app.scraping import WebsiteDataSource
    from llm_synthesis.generator import get_narrative_generator

    return ReportOrchestrator(
        data_source=WebsiteDataSource(settings=get_competitor_scraping_settings()),
        cache=cache,
        narrative=get_narrative_generator(),
        layout=DocumentLayoutEngine(),
        cache_ttl_seconds=get_cache_settings().competitor_ttl_seconds,
    )
