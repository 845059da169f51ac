"""
app/schemas package marker.
"""

from app.schemas.reports import ErrorResponse, ReportJobAcceptedResponse, ReportJobStatusResponse

__all__ = [
    "ErrorResponse",
    "ReportJobAcceptedResponse",
    "ReportJobStatusResponse",
]
