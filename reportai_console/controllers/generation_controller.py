"""
Generation controller: one upload-triggered report generation and its HTML result.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from reportai_console.config import CONFIG
from reportai_console.controllers.base_controller import BaseController
from reportai_console.core.api_client import ReportApi, api
from reportai_console.core.errors import GenerationError, ReportConsoleError
from reportai_console.core.models import GenerateReportRequest
from reportai_console.core.state import GenerationState

@dataclass
class ReportDownload:
    """A generated report packaged as a file."""
    file_name: str
    data: bytes
    mime: str = "text/html"

    def save(self, directory: str = None) -> Path:
        """Write the file and return its path."""
        target_dir = Path(directory or CONFIG.output_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        destination = target_dir / self.file_name
        with open(destination, "wb") as handle:
            handle.write(self.data)
        return destination

class GenerationController(BaseController):
    """Drives generation for one generate view."""

    def __init__(self, client: Optional[ReportApi] = None):
        super().__init__("GenerationController")
        self.client = client or api
        self._state = GenerationState()

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def generated_report(self) -> Optional[str]:
        return self._state.generated_report

    @property
    def state(self) -> GenerationState:
        with self._lock:
            return GenerationState(**self._state.to_dict())

    def _set_loading(self, loading: bool):
        self._state.loading = loading

    def generate_report(self, request: GenerateReportRequest) -> str:
        """Send the file and keep the returned HTML.

        Raises GenerationError with the failure message so the form can react.
        """
        with self._tracking():
            with self._lock:
                self._state.error = None
            self.log_step(f"Starting generation for report {request.report_id} from {request.file.name}")

            try:
                html = self.client.generate_report(
                    request.report_id,
                    request.file,
                    prompt=request.prompt,
                    model=request.model,
                    provider=request.provider,
                )
            except ReportConsoleError as e:
                message = str(e) or "Failed to generate report"
                with self._lock:
                    if not self._closed:
                        self._state.error = message
                self.log_error(f"Generation failed: {message}")
                raise GenerationError(message) from e

            with self._lock:
                if not self._closed:
                    self._state.generated_report = html
        self.log_step(f"Generated report {request.report_id} ({len(html)} characters)")
        return html

    def reset_report(self):
        """Clear the result and error so a new generation can start."""
        with self._lock:
            self._state.generated_report = None
            self._state.error = None

    def download_report(self, filename: str = "report.html") -> Optional[ReportDownload]:
        """Package the result as an HTML file; None when nothing was generated."""
        with self._lock:
            html = self._state.generated_report
        if not html:
            return None
        return ReportDownload(file_name=filename, data=html.encode("utf-8"), mime="text/html")
