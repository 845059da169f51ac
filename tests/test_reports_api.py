"""
tests/test_reports_api.py

HTTP contract of the report endpoints, served through FastAPI's TestClient
with an orchestrator wired to in-memory fakes.
"""

from __future__ import annotations

import json
import time

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.services.report_orchestrator import GENERIC_ERROR_MESSAGE

PAYLOAD = {
    "competitors": ["acme"],
    "reportSections": ["Market Overview"],
    "reportFormat": "summary",
}


@pytest.fixture()
def client(orchestrator):
    with TestClient(create_app(orchestrator=orchestrator)) as test_client:
        yield test_client


def _sse_payloads(body: str) -> list[dict]:
    return [
        json.loads(line[len("data: "):])
        for line in body.splitlines()
        if line.startswith("data: ")
    ]


def _wait_until_finished(client: TestClient, job_id: str) -> dict:
    for _ in range(200):
        body = client.get(f"/api/reports/{job_id}").json()
        if body["status"] in {"completed", "failed"}:
            return body
        time.sleep(0.01)
    raise AssertionError(f"job {job_id} did not finish")


class TestGenerateReport:
    def test_returns_pdf_attachment(self, client, data_source, cache, narrative, layout) -> None:
        response = client.post("/api/generateReport", json=PAYLOAD)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == (
            "attachment; filename=competitive_intelligence_report.pdf"
        )
        assert int(response.headers["content-length"]) == len(response.content)
        assert response.content == b"%PDF-1.4 fake report"
        assert json.loads(response.headers["x-report-progress"]) == [
            "Analyzing competitor 1 of 1...",
            "Generating AI analysis...",
            "Creating PDF report...",
            "Report generation complete!",
        ]
        assert len(data_source.calls) == 1
        assert len(cache.sets) == 1
        assert len(narrative.calls) == 1
        assert len(layout.calls) == 1

    def test_unknown_format_is_rejected_before_any_work(self, client, data_source, narrative) -> None:
        response = client.post("/api/generateReport", json={**PAYLOAD, "reportFormat": "xml"})

        assert response.status_code == 422
        assert data_source.calls == []
        assert narrative.calls == []

    def test_missing_competitors_is_rejected(self, client) -> None:
        response = client.post("/api/generateReport", json={**PAYLOAD, "competitors": []})

        assert response.status_code == 422

    def test_pipeline_failure_returns_generic_error(self, client, data_source) -> None:
        data_source.failures.add("acme")

        response = client.post("/api/generateReport", json=PAYLOAD)

        assert response.status_code == 500
        assert response.json() == {"error": GENERIC_ERROR_MESSAGE}

    @pytest.mark.parametrize("path", ["/api/generateReport", "/api/reports"])
    def test_get_is_not_allowed(self, client, path) -> None:
        response = client.get(path)

        assert response.status_code == 405
        assert response.headers["allow"] == "POST"


class TestReportJobs:
    def test_job_flow_streams_progress_then_serves_document(self, client) -> None:
        accepted = client.post("/api/reports", json=PAYLOAD)

        assert accepted.status_code == 202
        body = accepted.json()
        assert body["status"] in {"pending", "running", "completed"}
        assert body["events_url"] == f"/api/reports/{body['job_id']}/events"
        assert body["document_url"] == f"/api/reports/{body['job_id']}/document"

        events = client.get(body["events_url"])
        assert events.status_code == 200
        assert events.headers["content-type"].startswith("text/event-stream")
        assert [payload["message"] for payload in _sse_payloads(events.text)] == [
            "Analyzing competitor 1 of 1...",
            "Generating AI analysis...",
            "Creating PDF report...",
            "Report generation complete!",
        ]

        status_body = _wait_until_finished(client, body["job_id"])
        assert status_body["status"] == "completed"
        assert status_body["competitors"] == ["acme"]
        assert status_body["report_format"] == "summary"
        assert len(status_body["progress"]) == 4

        document = client.get(body["document_url"])
        assert document.status_code == 200
        assert document.content == b"%PDF-1.4 fake report"
        assert document.headers["content-disposition"] == (
            "attachment; filename=competitive_intelligence_report.pdf"
        )

    def test_failed_job_streams_error_and_document_is_500(self, client, data_source) -> None:
        data_source.failures.add("acme")

        body = client.post("/api/reports", json=PAYLOAD).json()
        payloads = _sse_payloads(client.get(body["events_url"]).text)

        assert payloads[0] == {"message": "Analyzing competitor 1 of 1..."}
        assert payloads[-1] == {"error": GENERIC_ERROR_MESSAGE}

        status_body = _wait_until_finished(client, body["job_id"])
        assert status_body["status"] == "failed"
        assert status_body["error"] == GENERIC_ERROR_MESSAGE

        document = client.get(body["document_url"])
        assert document.status_code == 500
        assert document.json() == {"error": GENERIC_ERROR_MESSAGE}

    def test_unknown_job_is_404(self, client) -> None:
        assert client.get("/api/reports/does-not-exist").status_code == 404
        assert client.get("/api/reports/does-not-exist/events").status_code == 404
        assert client.get("/api/reports/does-not-exist/document").status_code == 404

    def test_invalid_job_request_is_422(self, client, data_source) -> None:
        response = client.post("/api/reports", json={**PAYLOAD, "reportFormat": "xml"})

        assert response.status_code == 422
        assert data_source.calls == []


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}
