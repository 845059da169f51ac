"""
app/api/dependencies.py

Shared FastAPI dependencies resolving process-owned report services.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from app.services.report_jobs import ReportJob, ReportJobRegistry
from app.services.report_orchestrator import ReportOrchestrator


def get_report_orchestrator(request: Request) -> ReportOrchestrator:
    return request.app.state.report_orchestrator


def get_report_job_registry(request: Request) -> ReportJobRegistry:
    return request.app.state.report_jobs


def get_report_job(
    job_id: str,
    registry: ReportJobRegistry = Depends(get_report_job_registry),
) -> ReportJob:
    """
    Resolve a report job from the path or fail with 404.
    """

    job = registry.get(job_id)
    if job is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Report job {job_id!r} not found.",
        )
    return job
