"""
app/services/report_jobs.py

In-memory bookkeeping for report generation jobs.

A job couples one validated request with its progress channel and, once the
pipeline finishes, the rendered document or the failure message. The registry
is owned by the hosting process and shared across requests.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from app.domain.report import ReportRequest
from app.logging_utils import log_event
from app.services.progress import ProgressChannel
from app.services.report_orchestrator import (
    GENERIC_ERROR_MESSAGE,
    ReportDocument,
    ReportOrchestrator,
    ReportPipelineError,
)

logger = logging.getLogger(__name__)

JOB_PENDING = "pending"
JOB_RUNNING = "running"
JOB_COMPLETED = "completed"
JOB_FAILED = "failed"


@dataclass
class ReportJob:
    id: str
    request: ReportRequest
    channel: ProgressChannel = field(default_factory=ProgressChannel)
    status: str = JOB_PENDING
    document: ReportDocument | None = None
    error: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None
    finished_monotonic: float | None = field(default=None, repr=False)
    task: asyncio.Task[None] | None = field(default=None, repr=False)

    @property
    def finished(self) -> bool:
        return self.status in {JOB_COMPLETED, JOB_FAILED}


class ReportJobRegistry:
    """
    Creates, runs and looks up report jobs.
    """

    def __init__(self, *, orchestrator: ReportOrchestrator, retention_seconds: int = 3600) -> None:
        self._orchestrator = orchestrator
        self._retention_seconds = retention_seconds
        self._jobs: dict[str, ReportJob] = {}
        self._sweeper: asyncio.Task[None] | None = None

    def create(self, request: ReportRequest) -> ReportJob:
        self._purge_expired()
        job = ReportJob(id=str(uuid.uuid4()), request=request)
        self._jobs[job.id] = job
        return job

    def start(self, job: ReportJob) -> asyncio.Task[None]:
        job.task = asyncio.create_task(self.run(job))
        return job.task

    def get(self, job_id: str) -> ReportJob | None:
        self._purge_expired()
        return self._jobs.get(job_id)

    async def run(self, job: ReportJob) -> None:
        job.status = JOB_RUNNING
        log_event(
            logger,
            logging.INFO,
            "report_job_started",
            job_id=job.id,
            competitors=len(job.request.competitors),
            report_format=job.request.format,
        )
        try:
            job.document = await self._orchestrator.generate(job.request, job.channel)
            job.status = JOB_COMPLETED
        except ReportPipelineError as exc:
            job.status = JOB_FAILED
            job.error = GENERIC_ERROR_MESSAGE
            log_event(
                logger,
                logging.ERROR,
                "report_job_failed",
                job_id=job.id,
                stage=exc.stage,
                competitor=exc.competitor,
                error=str(exc),
            )
        finally:
            if not job.finished:
                job.status = JOB_FAILED
                job.error = GENERIC_ERROR_MESSAGE
            if not job.channel.closed:
                await job.channel.close(error=GENERIC_ERROR_MESSAGE)
            job.finished_at = datetime.now(timezone.utc)
            job.finished_monotonic = time.monotonic()

    async def shutdown(self) -> None:
        pending = [job.task for job in self._jobs.values() if job.task and not job.task.done()]
        if self._sweeper is not None and not self._sweeper.done():
            pending.append(self._sweeper)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def start_sweeper(self, interval_seconds: float = 60.0) -> asyncio.Task[None]:
        """
        Purge expired jobs periodically so idle processes release documents.
        """

        self._sweeper = asyncio.create_task(self._sweep(interval_seconds))
        return self._sweeper

    async def _sweep(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            self._purge_expired()

    def _purge_expired(self) -> None:
        now = time.monotonic()
        expired = [
            job_id
            for job_id, job in self._jobs.items()
            if job.finished_monotonic is not None
            and now - job.finished_monotonic > self._retention_seconds
        ]
        for job_id in expired:
            del self._jobs[job_id]
        if expired:
            log_event(logger, logging.INFO, "report_jobs_purged", count=len(expired))
