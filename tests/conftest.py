"""
Shared fixtures: an in-memory report service behind a mocked requests.Session.
"""

import json
import math
import sys
from pathlib import Path
from unittest.mock import MagicMock
from urllib.parse import urlsplit

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from reportai_console.core.api_client import ReportApi

BASE_URL = "http://reports.test/api/v1"


def make_response(status_code=200, body=None, text=None):
    """A stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = "OK" if response.ok else "Bad Request"
    if body is None:
        response.json.side_effect = ValueError("No JSON body")
    else:
        response.json.return_value = body
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response.text = text
    return response


class StubReportService:
    """Minimal report service: list, filter, create, update, turn on/off, generate, health."""

    def __init__(self, reports=None, generated_html="<html>OK</html>"):
        self.reports = [dict(report) for report in (reports or [])]
        self.next_id = max([r["id"] for r in self.reports], default=0) + 1
        self.generated_html = generated_html
        self.calls = []
        self.failures = []

    def fail_next(self, status_code, message):
        """Answer the next request with {"error": message}."""
        self.failures.append((status_code, message))

    def _page(self, rows, params):
        page = int(params.get("page", 1))
        page_size = int(params.get("page_size", 10))
        start = (page - 1) * page_size
        return make_response(200, {
            # Go encodes an empty slice as null
            "reports": rows[start:start + page_size] or None,
            "total_count": len(rows),
            "page": page,
            "page_size": page_size,
            "total_pages": math.ceil(len(rows) / page_size),
        })

    def _find(self, report_id):
        for report in self.reports:
            if report["id"] == report_id:
                return report
        return None

    def request(self, method, url, params=None, json=None, data=None, files=None, timeout=None):
        path = urlsplit(url).path.replace("/api/v1", "", 1)
        self.calls.append({"method": method, "path": path, "params": params, "json": json, "data": data, "files": files})

        if self.failures:
            status_code, message = self.failures.pop(0)
            return make_response(status_code, {"error": message})

        params = params or {}
        if method == "GET" and path == "/health":
            return make_response(200, {"status": "ok"})
        if method == "GET" and path == "/reports":
            return self._page(self.reports, params)
        if method == "GET" and path == "/reports/filter":
            rows = [r for r in self.reports if r["id"] == params["id"]]
            if params.get("user_mail"):
                rows = [r for r in rows if r["user_mail"] == params["user_mail"]]
            return self._page(rows, params)
        if method == "POST" and path == "/reports":
            report = {
                "id": self.next_id,
                "template": json["template"],
                "user_mail": json["user_mail"],
                "active": True,
                "create_at": "2024-05-01T10:00:00Z",
                "update_at": "2024-05-01T10:00:00Z",
            }
            self.next_id += 1
            self.reports.append(report)
            return make_response(200, report)
        if method == "PUT" and path == "/reports":
            report = self._find(json["id"])
            if report is None:
                return make_response(400, {"error": "report not found"})
            report["template"] = json["template"]
            report["update_at"] = "2024-05-02T10:00:00Z"
            return make_response(200, dict(report))
        if method == "POST" and path == "/reports/turnonoff":
            report = self._find(json["id"])
            if report is None:
                return make_response(400, {"error": "report not found"})
            report["active"] = json["active"]
            return make_response(204)
        if method == "POST" and path == "/reports/generate":
            return make_response(200, None, text=self.generated_html)
        return make_response(404, {"error": f"no route for {method} {path}"})


def sample_report(report_id, user_mail="owner@example.com", active=True, template="<p>Hello</p>"):
    return {
        "id": report_id,
        "template": template,
        "user_mail": user_mail,
        "active": active,
        "create_at": "2024-04-01T09:00:00Z",
        "update_at": "2024-04-01T09:00:00Z",
    }


@pytest.fixture
def stub_service():
    return StubReportService(reports=[sample_report(1), sample_report(2, user_mail="other@example.com", active=False)])


@pytest.fixture
def session(stub_service):
    mock_session = MagicMock()
    mock_session.request.side_effect = stub_service.request
    return mock_session


@pytest.fixture
def api_client(session):
    return ReportApi(base_url=BASE_URL, session=session)
