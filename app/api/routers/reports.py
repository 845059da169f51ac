"""
app/api/routers/reports.py

Competitive intelligence report endpoints.

POST /api/reports                      start a report job (202)
GET  /api/reports/{job_id}             job status and progress so far
GET  /api/reports/{job_id}/events      progress as server-sent events
GET  /api/reports/{job_id}/document    finished PDF download
POST /api/generateReport               run to completion, PDF in one response

Progress and the finished artifact are separate resources; the single-shot
endpoint returns the buffered progress messages in the X-Report-Progress
header next to the PDF body.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse

from app.api.dependencies import get_report_job, get_report_job_registry, get_report_orchestrator
from app.domain.report import ReportRequest
from app.schemas.reports import ErrorResponse, ReportJobAcceptedResponse, ReportJobStatusResponse
from app.services.progress import ProgressChannel, error_frame
from app.services.report_jobs import JOB_FAILED, ReportJob, ReportJobRegistry
from app.services.report_orchestrator import (
    GENERIC_ERROR_MESSAGE,
    ReportDocument,
    ReportOrchestrator,
    ReportPipelineError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reports"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def _document_response(document: ReportDocument, extra_headers: dict[str, str] | None = None) -> Response:
    headers = {
        "Content-Disposition": f"attachment; filename={document.filename}",
        "Content-Length": str(document.content_length),
        **(extra_headers or {}),
    }
    return Response(content=document.content, media_type=document.media_type, headers=headers)


def _error_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": GENERIC_ERROR_MESSAGE},
    )


@router.post(
    "/reports",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ReportJobAcceptedResponse,
)
async def create_report(
    payload: ReportRequest,
    request: Request,
    registry: ReportJobRegistry = Depends(get_report_job_registry),
) -> ReportJobAcceptedResponse:
    """
    Accept a report request and start the pipeline in the background.
    """

    job = registry.create(payload)
    registry.start(job)
    logger.info(
        "Report job accepted job_id=%s competitors=%d format=%s",
        job.id,
        len(payload.competitors),
        payload.format,
    )
    return ReportJobAcceptedResponse(
        job_id=job.id,
        status=job.status,
        events_url=str(request.url_for("stream_report_events", job_id=job.id).path),
        document_url=str(request.url_for("download_report", job_id=job.id).path),
    )


@router.get("/reports/{job_id}", response_model=ReportJobStatusResponse)
async def get_report_status(job: ReportJob = Depends(get_report_job)) -> ReportJobStatusResponse:
    return ReportJobStatusResponse(
        job_id=job.id,
        status=job.status,
        competitors=job.request.competitors,
        sections=job.request.sections,
        report_format=job.request.format,
        progress=job.channel.messages,
        error=job.error,
        created_at=job.created_at,
        finished_at=job.finished_at,
    )


@router.get("/reports/{job_id}/events", name="stream_report_events")
async def stream_report_events(job: ReportJob = Depends(get_report_job)) -> StreamingResponse:
    """
    Stream every progress event of the job, then close the stream.
    """

    async def _frames() -> AsyncIterator[str]:
        async for event in job.channel.subscribe():
            yield event.to_sse()
        if job.channel.error:
            yield error_frame(job.channel.error)

    return StreamingResponse(
        content=_frames(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get(
    "/reports/{job_id}/document",
    name="download_report",
    responses={500: {"model": ErrorResponse}},
)
async def download_report(job: ReportJob = Depends(get_report_job)) -> Response:
    if job.status == JOB_FAILED:
        return _error_response()
    if job.document is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Report job {job.id!r} is {job.status}; the document is not ready.",
        )
    return _document_response(job.document)


@router.post("/generateReport", responses={500: {"model": ErrorResponse}})
async def generate_report(
    payload: ReportRequest,
    orchestrator: ReportOrchestrator = Depends(get_report_orchestrator),
) -> Response:
    """
    Run the whole pipeline within this request and return the PDF.
    """

    channel = ProgressChannel()
    try:
        document = await orchestrator.generate(payload, channel)
    except ReportPipelineError:
        return _error_response()

    return _document_response(
        document,
        extra_headers={"X-Report-Progress": json.dumps(channel.messages)},
    )
