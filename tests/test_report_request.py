"""
tests/test_report_request.py

ReportRequest validation against the wire payload.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.domain.report import REPORT_FORMATS, STANDARD_SECTIONS, ReportRequest


def _payload(**overrides) -> dict:
    payload = {
        "competitors": ["acme"],
        "reportSections": ["Market Overview"],
        "reportFormat": "summary",
    }
    payload.update(overrides)
    return payload


def test_wire_names_are_accepted() -> None:
    request = ReportRequest.model_validate(_payload())

    assert request.competitors == ["acme"]
    assert request.sections == ["Market Overview"]
    assert request.format == "summary"


def test_python_names_are_accepted() -> None:
    request = ReportRequest(competitors=["acme"], sections=["SWOT Analysis"], format="detailed")

    assert request.sections == ["SWOT Analysis"]


@pytest.mark.parametrize("report_format", sorted(REPORT_FORMATS))
def test_every_supported_format_validates(report_format) -> None:
    assert ReportRequest.model_validate(_payload(reportFormat=report_format)).format == report_format


@pytest.mark.parametrize("report_format", ["xml", "Detailed", "", "pdf"])
def test_unknown_format_is_rejected(report_format) -> None:
    with pytest.raises(ValidationError):
        ReportRequest.model_validate(_payload(reportFormat=report_format))


def test_empty_competitor_list_is_rejected() -> None:
    with pytest.raises(ValidationError):
        ReportRequest.model_validate(_payload(competitors=[]))


def test_blank_competitor_is_rejected() -> None:
    with pytest.raises(ValidationError):
        ReportRequest.model_validate(_payload(competitors=["acme", "   "]))


def test_blank_section_is_rejected() -> None:
    with pytest.raises(ValidationError):
        ReportRequest.model_validate(_payload(reportSections=[""]))


def test_sections_may_be_empty() -> None:
    assert ReportRequest.model_validate(_payload(reportSections=[])).sections == []


def test_missing_format_is_rejected() -> None:
    payload = _payload()
    del payload["reportFormat"]

    with pytest.raises(ValidationError):
        ReportRequest.model_validate(payload)


def test_request_is_immutable() -> None:
    request = ReportRequest.model_validate(_payload())

    with pytest.raises(ValidationError):
        request.format = "detailed"  # type: ignore[misc]


def test_standard_sections_are_unique() -> None:
    assert len(set(STANDARD_SECTIONS)) == len(STANDARD_SECTIONS) == 6
