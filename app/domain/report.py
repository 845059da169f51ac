"""
app/domain/report.py

Report request contract shared by the API, the CLI and the orchestrator.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ReportFormat = Literal["detailed", "summary", "presentation"]

REPORT_FORMATS: frozenset[str] = frozenset({"detailed", "summary", "presentation"})

REPORT_FILENAME = "competitive_intelligence_report.pdf"

STANDARD_SECTIONS: tuple[str, ...] = (
    "Executive Summary",
    "Market Overview",
    "Competitor Analysis",
    "SWOT Analysis",
    "Emerging Trends",
    "Strategic Recommendations",
)


class ReportRequest(BaseModel):
    """
    One report generation request.

    Accepts both the wire names (``reportSections``, ``reportFormat``) and
    the Python field names.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    competitors: list[str] = Field(min_length=1)
    sections: list[str] = Field(default_factory=list, alias="reportSections")
    format: ReportFormat = Field(alias="reportFormat")

    @field_validator("competitors")
    @classmethod
    def _competitors_not_blank(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value]
        if any(not item for item in cleaned):
            raise ValueError("competitor identifiers must be non-empty strings")
        return cleaned

    @field_validator("sections")
    @classmethod
    def _sections_not_blank(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value]
        if any(not item for item in cleaned):
            raise ValueError("report sections must be non-empty strings")
        return cleaned
