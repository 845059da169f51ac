"""
app/domain package marker.
"""

from app.domain.competitor import CompetitorRecord, ImageAnalysis
from app.domain.report import (
    REPORT_FILENAME,
    REPORT_FORMATS,
    STANDARD_SECTIONS,
    ReportFormat,
    ReportRequest,
)

__all__ = [
    "CompetitorRecord",
    "ImageAnalysis",
    "REPORT_FILENAME",
    "REPORT_FORMATS",
    "STANDARD_SECTIONS",
    "ReportFormat",
    "ReportRequest",
]
