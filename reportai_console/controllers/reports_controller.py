"""
Reports controller: the current page of reports, pagination and CRUD calls.
"""

import copy
from typing import Any, Callable, Dict, List, Optional

from reportai_console.config import CONFIG
from reportai_console.controllers.base_controller import BaseController
from reportai_console.core.api_client import ReportApi, api
from reportai_console.core.errors import ReportConsoleError
from reportai_console.core.models import PaginatedReports, Report
from reportai_console.core.state import PaginationState, ReportsState
from reportai_console.utils.validation import require_positive_id

class ReportsController(BaseController):
    """Owns the listing state for one manager view.

    List loads (fetch and filter) carry a request token and only the newest
    one is applied, so an older response that resolves late cannot overwrite
    a newer page. Mutations patch local state only after the service confirms.
    """

    def __init__(self, client: Optional[ReportApi] = None, autoload: bool = True):
        super().__init__("ReportsController")
        self.client = client or api
        self._state = ReportsState()
        self._latest_token = 0
        self._active_filter: Optional[Dict[str, Any]] = None
        if autoload:
            self.fetch_reports(page=1, page_size=CONFIG.pagination.default_page_size)

    @property
    def reports(self) -> List[Report]:
        with self._lock:
            return list(self._state.reports)

    @property
    def pagination(self) -> PaginationState:
        with self._lock:
            return copy.copy(self._state.pagination)

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def active_filter(self) -> Optional[Dict[str, Any]]:
        """Criteria behind the current listing, None for the plain listing."""
        with self._lock:
            return dict(self._active_filter) if self._active_filter else None

    @property
    def state(self) -> ReportsState:
        """Snapshot of the whole state."""
        with self._lock:
            return copy.deepcopy(self._state)

    def _set_loading(self, loading: bool):
        self._state.loading = loading

    def _set_error(self, message: Optional[str]):
        with self._lock:
            if not self._closed:
                self._state.error = message

    def _load(
        self,
        action: str,
        call: Callable[[], PaginatedReports],
        active_filter: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Run one list load and apply it if it is still the newest."""
        with self._lock:
            self._latest_token += 1
            token = self._latest_token

        with self._tracking():
            self._set_error(None)
            try:
                data = call()
            except ReportConsoleError as e:
                self.log_error(f"{action} failed: {e}")
                with self._lock:
                    if token == self._latest_token:
                        self._set_error(str(e) or f"Failed to {action}")
                return False

            with self._lock:
                if self._closed or token != self._latest_token:
                    self.log_step(f"Discarding stale {action} response (request {token})")
                    return False
                self._state.reports = list(data.reports)
                self._state.pagination = PaginationState.from_response(data)
                self._active_filter = active_filter

        self.log_step(
            f"{action}: {len(data.reports)} of {data.total_count} reports "
            f"(page {data.page}/{data.total_pages})"
        )
        return True

    def fetch_reports(self, page: Optional[int] = None, page_size: Optional[int] = None) -> bool:
        """Replace the listing with a page from the service.

        On failure the error is recorded and the previous reports stay.
        """
        return self._load(
            "fetch reports",
            lambda: self.client.list_reports(page=page, page_size=page_size),
        )

    def filter_reports(
        self,
        report_id: int,
        user_mail: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> bool:
        """Same contract as fetch_reports against the filter endpoint.

        Paging afterwards goes back to the plain listing and drops the filter.
        """
        criteria = {"id": report_id}
        if user_mail and user_mail.strip():
            criteria["user_mail"] = user_mail.strip()
        return self._load(
            "filter reports",
            lambda: self.client.filter_reports(report_id, user_mail=user_mail, page=page, page_size=page_size),
            active_filter=criteria,
        )

    def search(self, report_id=None, user_mail: Optional[str] = None) -> bool:
        """Filter when an id is given, otherwise go back to the full listing on page 1."""
        page_size = self.pagination.page_size
        if report_id is None or not str(report_id).strip():
            return self.fetch_reports(page=1, page_size=page_size)
        return self.filter_reports(report_id, user_mail=user_mail, page=1, page_size=page_size)

    def create_report(self, template: str, user_mail: str) -> Report:
        """Create, then reload the current page so the counters follow the service."""
        with self._tracking():
            self._set_error(None)
            try:
                new_report = self.client.create_report(template, user_mail)
            except ReportConsoleError as e:
                self.log_error(f"create report failed: {e}")
                self._set_error(str(e) or "Failed to create report")
                raise

            self.log_step(f"Created report {new_report.id} for {new_report.user_mail}")
            pagination = self.pagination
            self.fetch_reports(page=pagination.page, page_size=pagination.page_size)
        return new_report

    def update_report(self, report_id: int, template: str) -> Report:
        """Update, then swap in the service's copy of that one entry."""
        with self._tracking():
            self._set_error(None)
            try:
                report_id = require_positive_id(report_id)
                updated = self.client.update_report(report_id, template)
            except ReportConsoleError as e:
                self.log_error(f"update report failed: {e}")
                self._set_error(str(e) or "Failed to update report")
                raise

            with self._lock:
                if not self._closed:
                    self._state.reports = [
                        updated.model_copy(update={"id": report.id}) if report.id == report_id else report
                        for report in self._state.reports
                    ]
        self.log_step(f"Updated report {report_id}")
        return updated

    def toggle_report_status(self, report_id: int, active: bool) -> None:
        """Set the active flag; the local entry changes only once the service confirms."""
        with self._tracking():
            self._set_error(None)
            try:
                report_id = require_positive_id(report_id)
                self.client.set_report_active(report_id, active)
            except ReportConsoleError as e:
                self.log_error(f"toggle report {report_id} failed: {e}")
                self._set_error(str(e) or "Failed to toggle report status")
                raise

            with self._lock:
                if not self._closed:
                    self._state.reports = [
                        report.model_copy(update={"active": bool(active)}) if report.id == report_id else report
                        for report in self._state.reports
                    ]
        self.log_step(f"Report {report_id} {'activated' if active else 'deactivated'}")

    def change_page(self, page: int) -> bool:
        return self.fetch_reports(page=max(int(page), 1), page_size=self.pagination.page_size)

    def change_page_size(self, page_size: int) -> bool:
        """New page size, back to page 1."""
        page_size = min(max(int(page_size), 1), CONFIG.pagination.max_page_size)
        return self.fetch_reports(page=1, page_size=page_size)
