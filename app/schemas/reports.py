"""
app/schemas/reports.py

Response schemas for report generation endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ReportJobAcceptedResponse(BaseModel):
    """
    API response returned when a report job is accepted.
    """

    job_id: str
    status: str
    events_url: str
    document_url: str


class ReportJobStatusResponse(BaseModel):
    """
    API response model describing one report job.
    """

    job_id: str
    status: str
    competitors: list[str]
    sections: list[str]
    report_format: str
    progress: list[str] = Field(default_factory=list)
    error: str | None = None
    created_at: datetime
    finished_at: datetime | None = None


class ErrorResponse(BaseModel):
    error: str
