"""
Report service client tests.
"""

from unittest.mock import MagicMock

import pytest
import requests

from conftest import BASE_URL, StubReportService, make_response, sample_report
from reportai_console.core.api_client import ReportApi
from reportai_console.core.errors import HttpError, TransportError, ValidationError
from reportai_console.core.models import UploadedFile


def _client_with(response=None, side_effect=None):
    session = MagicMock()
    if side_effect is not None:
        session.request.side_effect = side_effect
    else:
        session.request.return_value = response
    return ReportApi(base_url=BASE_URL, session=session), session


class TestListAndFilter:

    def test_list_reports_sends_paging_params(self, api_client, stub_service):
        result = api_client.list_reports(page=1, page_size=5)
        call = stub_service.calls[-1]
        assert call["method"] == "GET"
        assert call["path"] == "/reports"
        assert call["params"] == {"page": 1, "page_size": 5}
        assert [r.id for r in result.reports] == [1, 2]
        assert result.total_count == 2
        assert result.total_pages == 1

    def test_list_reports_without_params_sends_none(self, api_client, stub_service):
        api_client.list_reports()
        assert stub_service.calls[-1]["params"] == {}

    def test_page_beyond_end_reads_null_as_empty(self, api_client):
        result = api_client.list_reports(page=4, page_size=10)
        assert result.reports == []
        assert result.total_count == 2

    def test_pagination_invariant_holds_on_every_page(self, session):
        service = StubReportService(reports=[sample_report(i) for i in range(1, 24)])
        session.request.side_effect = service.request
        client = ReportApi(base_url=BASE_URL, session=session)
        for page in (1, 2, 3):
            result = client.list_reports(page=page, page_size=10)
            assert len(result.reports) <= result.page_size
            assert result.total_pages == 3
        assert len(client.list_reports(page=3, page_size=10).reports) == 3

    def test_filter_requires_positive_id(self, api_client, session):
        with pytest.raises(ValidationError):
            api_client.filter_reports(0)
        with pytest.raises(ValidationError):
            api_client.filter_reports("")
        session.request.assert_not_called()

    def test_filter_omits_blank_email(self, api_client, stub_service):
        api_client.filter_reports(1, user_mail="  ", page=1, page_size=10)
        assert stub_service.calls[-1]["params"] == {"id": 1, "page": 1, "page_size": 10}

    def test_filter_with_email(self, api_client, stub_service):
        result = api_client.filter_reports(2, user_mail="other@example.com")
        assert stub_service.calls[-1]["params"]["user_mail"] == "other@example.com"
        assert [r.id for r in result.reports] == [2]


class TestMutations:

    def test_create_minifies_template(self, api_client, stub_service):
        report = api_client.create_report("<div>\n\t<p>Hi   there</p>\n</div>\n", "new@example.com")
        sent = stub_service.calls[-1]["json"]
        assert sent == {"template": "<div><p>Hi there</p></div>", "user_mail": "new@example.com"}
        assert report.id == 3
        assert report.template == "<div><p>Hi there</p></div>"

    def test_create_rejects_bad_email_locally(self, api_client, session):
        with pytest.raises(ValidationError):
            api_client.create_report("<p>x</p>", "not-an-email")
        session.request.assert_not_called()

    def test_create_rejects_blank_template(self, api_client, session):
        with pytest.raises(ValidationError):
            api_client.create_report("   \n", "a@example.com")
        session.request.assert_not_called()

    def test_update_uses_put(self, api_client, stub_service):
        report = api_client.update_report(1, "<h1>  New </h1>")
        call = stub_service.calls[-1]
        assert call["method"] == "PUT"
        assert call["json"] == {"id": 1, "template": "<h1> New </h1>"}
        assert report.template == "<h1> New </h1>"

    def test_set_report_active_accepts_empty_204(self, api_client, stub_service):
        assert api_client.set_report_active(2, True) is None
        assert stub_service.calls[-1]["json"] == {"id": 2, "active": True}
        assert stub_service.reports[1]["active"] is True


class TestGenerate:

    def test_generate_posts_multipart_and_returns_html(self, api_client, stub_service):
        upload = UploadedFile(name="sample.csv", content=b"a,b\n1,2\n", mime_type="text/csv")
        html = api_client.generate_report(42, upload, prompt="Summarize", provider="openai")
        call = stub_service.calls[-1]
        assert html == "<html>OK</html>"
        assert call["path"] == "/reports/generate"
        assert call["data"] == {"idReport": "42", "prompt": "Summarize", "llm": "openai"}
        assert call["files"]["file"] == ("sample.csv", b"a,b\n1,2\n", "text/csv")

    def test_generate_rejects_unsupported_file(self, api_client, session):
        upload = UploadedFile(name="image.png", content=b"\x89PNG", mime_type="image/png")
        with pytest.raises(ValidationError):
            api_client.generate_report(42, upload)
        session.request.assert_not_called()

    def test_generate_falls_back_to_octet_stream(self, api_client, stub_service):
        upload = UploadedFile(name="book.xlsx", content=b"PK\x03\x04", mime_type="")
        api_client.generate_report(5, upload)
        assert stub_service.calls[-1]["files"]["file"][2] == "application/octet-stream"


class TestErrors:

    def test_backend_error_message_is_used(self, api_client, stub_service):
        stub_service.fail_next(422, "the report that you select was inactive")
        with pytest.raises(HttpError) as excinfo:
            api_client.filter_reports(1)
        assert str(excinfo.value) == "the report that you select was inactive"
        assert excinfo.value.status_code == 422
        assert api_client.last_error == "the report that you select was inactive"

    def test_plain_text_error_body(self):
        client, _ = _client_with(make_response(502, None, text="Bad Gateway from proxy"))
        with pytest.raises(HttpError) as excinfo:
            client.list_reports()
        assert str(excinfo.value) == "Bad Gateway from proxy"

    def test_empty_error_body_uses_status(self):
        client, _ = _client_with(make_response(500, None, text=""))
        with pytest.raises(HttpError) as excinfo:
            client.list_reports()
        assert "500" in str(excinfo.value)

    def test_connection_failure_is_transport_error(self):
        client, _ = _client_with(side_effect=requests.ConnectionError("connection refused"))
        with pytest.raises(TransportError) as excinfo:
            client.list_reports()
        assert "connection refused" in str(excinfo.value)

    def test_timeout_is_transport_error(self):
        client, _ = _client_with(side_effect=requests.Timeout("read timed out"))
        with pytest.raises(TransportError):
            client.set_report_active(1, False)

    def test_malformed_success_body_is_http_error(self):
        client, _ = _client_with(make_response(200, {"reports": "nope"}))
        with pytest.raises(HttpError):
            client.list_reports()


class TestHealth:

    def test_health_check_hits_service_root(self, api_client, stub_service):
        assert api_client.service_root == "http://reports.test"
        assert api_client.health_check() is True
        assert stub_service.calls[-1]["path"] == "/health"

    def test_health_check_false_when_unreachable(self):
        client, _ = _client_with(side_effect=requests.ConnectionError("down"))
        assert client.health_check() is False
        assert "down" in client.last_error
