"""
app/services package marker.
"""

from app.services.progress import ProgressChannel, ProgressEvent, ProgressSink
from app.services.report_jobs import ReportJob, ReportJobRegistry
from app.services.report_orchestrator import (
    GENERIC_ERROR_MESSAGE,
    ReportDocument,
    ReportOrchestrator,
    ReportPipelineError,
    build_report_orchestrator,
)

__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "ProgressChannel",
    "ProgressEvent",
    "ProgressSink",
    "ReportDocument",
    "ReportJob",
    "ReportJobRegistry",
    "ReportOrchestrator",
    "ReportPipelineError",
    "build_report_orchestrator",
]
