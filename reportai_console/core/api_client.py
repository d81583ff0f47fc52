"""
REST client for the report service: report CRUD, activation and AI generation.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

import pydantic
import requests

from reportai_console.backend.uploads import UploadValidator
from reportai_console.config import CONFIG
from reportai_console.core.errors import HttpError, ReportConsoleError, TransportError
from reportai_console.core.models import (
    CreateReportRequest,
    GenerateReportRequest,
    PaginatedReports,
    Report,
    TurnOnOffRequest,
    UpdateReportRequest,
    UploadedFile,
)
from reportai_console.utils.templates import minify_template
from reportai_console.utils.validation import require_email, require_positive_id, require_text

logger = logging.getLogger(__name__)


class ReportApi:
    """One-shot calls against the report service. No retries."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        generate_timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = CONFIG.api
        self.base_url = (base_url or self.config.base_url).rstrip("/")
        self.timeout = timeout or self.config.timeout
        self.generate_timeout = generate_timeout or self.config.generate_timeout
        self.session = session or requests.Session()
        self.validator = UploadValidator()
        self.last_error = ""

    @property
    def service_root(self) -> str:
        """Base URL without its path, where /health lives."""
        parts = urlsplit(self.base_url)
        return urlunsplit((parts.scheme, parts.netloc, "", "", "")).rstrip("/")

    def _request(self, method: str, url: str, timeout: Optional[int] = None, **kwargs) -> requests.Response:
        """Send one request and map failures onto the error taxonomy."""
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, timeout=timeout or self.timeout, **kwargs)
        except requests.RequestException as e:
            self.last_error = f"Could not reach report service ({method} {url}): {str(e)}"
            logger.warning(self.last_error)
            raise TransportError(self.last_error) from e

        if not response.ok:
            self.last_error = self._error_message(response)
            logger.warning(f"{method} {url} failed with {response.status_code}: {self.last_error}")
            raise HttpError(self.last_error, status_code=response.status_code)
        return response

    def _error_message(self, response: requests.Response) -> str:
        """Prefer the service's {"error": "..."} body, then the raw text."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])

        text = (response.text or "").strip()
        if text:
            return text
        return f"HTTP {response.status_code} {response.reason or ''}".strip()

    def _parse(self, response: requests.Response, model: Any) -> Any:
        try:
            return model.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as e:
            self.last_error = f"Unexpected response from report service: {str(e)}"
            raise HttpError(self.last_error, status_code=response.status_code) from e

    @staticmethod
    def _paging_params(page: Optional[int], page_size: Optional[int]) -> Dict[str, int]:
        params: Dict[str, int] = {}
        if page is not None:
            params["page"] = page
        if page_size is not None:
            params["page_size"] = page_size
        return params

    def list_reports(self, page: Optional[int] = None, page_size: Optional[int] = None) -> PaginatedReports:
        """GET /reports."""
        response = self._request(
            "GET",
            f"{self.base_url}/reports",
            params=self._paging_params(page, page_size),
        )
        return self._parse(response, PaginatedReports)

    def filter_reports(
        self,
        report_id: int,
        user_mail: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> PaginatedReports:
        """GET /reports/filter. The id is mandatory; the email narrows further."""
        report_id = require_positive_id(report_id)
        params: Dict[str, Any] = {"id": report_id}
        if user_mail and user_mail.strip():
            params["user_mail"] = user_mail.strip()
        params.update(self._paging_params(page, page_size))

        response = self._request("GET", f"{self.base_url}/reports/filter", params=params)
        return self._parse(response, PaginatedReports)

    def create_report(self, template: str, user_mail: str) -> Report:
        """POST /reports with the minified template."""
        payload = CreateReportRequest(
            template=minify_template(require_text(template, "template")),
            user_mail=require_email(user_mail),
        )
        response = self._request("POST", f"{self.base_url}/reports", json=payload.model_dump())
        return self._parse(response, Report)

    def update_report(self, report_id: int, template: str) -> Report:
        """PUT /reports with the minified template."""
        payload = UpdateReportRequest(
            id=require_positive_id(report_id),
            template=minify_template(require_text(template, "template")),
        )
        response = self._request("PUT", f"{self.base_url}/reports", json=payload.model_dump())
        return self._parse(response, Report)

    def set_report_active(self, report_id: int, active: bool) -> None:
        """POST /reports/turnonoff. The service answers 204 with no body."""
        payload = TurnOnOffRequest(id=require_positive_id(report_id), active=bool(active))
        self._request("POST", f"{self.base_url}/reports/turnonoff", json=payload.model_dump())

    def generate_report(
        self,
        report_id: int,
        file: UploadedFile,
        prompt: Optional[str] = None,
        model: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> str:
        """POST /reports/generate as multipart; the answer is raw HTML."""
        request = GenerateReportRequest(
            report_id=require_positive_id(report_id, "idReport"),
            file=self.validator.validate(file),
            prompt=prompt,
            model=model,
            provider=provider,
        )
        files = {
            "file": (
                request.file.name,
                request.file.content,
                request.file.mime_type or "application/octet-stream",
            )
        }
        logger.info(
            f"Generating report {request.report_id} from {request.file.name} ({request.file.size} bytes)"
        )
        response = self._request(
            "POST",
            f"{self.base_url}/reports/generate",
            timeout=self.generate_timeout,
            data=request.form_fields(),
            files=files,
        )
        return response.text

    def health_check(self) -> bool:
        """Check if the report service is reachable."""
        try:
            self._request("GET", f"{self.service_root}/health", timeout=min(self.timeout, 10))
            return True
        except ReportConsoleError:
            return False

    def close(self) -> None:
        self.session.close()


# Global API client instance
api = ReportApi()
