"""
Wire models for the report service plus the upload payloads sent to it.
"""

import math
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

def total_pages_for(total_count: int, page_size: int) -> int:
    """Number of pages needed to show total_count rows page_size at a time."""
    if page_size <= 0:
        return 0
    return math.ceil(total_count / page_size)

class Report(BaseModel):
    """A stored report template."""
    model_config = ConfigDict(extra="ignore")

    id: int
    template: str = ""
    user_mail: str = ""
    active: bool = False
    create_at: str = ""
    update_at: str = ""

class PaginatedReports(BaseModel):
    """One page of reports with the counters the service computed."""
    model_config = ConfigDict(extra="ignore")

    reports: List[Report] = []
    total_count: int = 0
    page: int = 1
    page_size: int = 10
    total_pages: Optional[int] = None

    @field_validator("reports", mode="before")
    @classmethod
    def _null_reports(cls, value: Any) -> Any:
        # The service encodes an empty page as null
        return [] if value is None else value

    @model_validator(mode="after")
    def _fill_total_pages(self) -> "PaginatedReports":
        if self.total_pages is None:
            self.total_pages = total_pages_for(self.total_count, self.page_size)
        return self

class CreateReportRequest(BaseModel):
    template: str
    user_mail: str

class UpdateReportRequest(BaseModel):
    id: int
    template: str

class TurnOnOffRequest(BaseModel):
    id: int
    active: bool

@dataclass
class UploadedFile:
    """A file picked for generation, held in memory."""
    name: str
    content: bytes
    mime_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower()

    @classmethod
    def from_path(cls, path: str) -> "UploadedFile":
        file_path = Path(path)
        mime_type, _ = mimetypes.guess_type(file_path.name)
        return cls(name=file_path.name, content=file_path.read_bytes(), mime_type=mime_type or "")

    @classmethod
    def from_streamlit(cls, uploaded_file: Any) -> "UploadedFile":
        return cls(
            name=uploaded_file.name,
            content=bytes(uploaded_file.getvalue()),
            mime_type=getattr(uploaded_file, "type", "") or "",
        )

@dataclass
class GenerateReportRequest:
    """One generation: template id, source file and optional AI settings."""
    report_id: int
    file: UploadedFile
    prompt: Optional[str] = None
    model: Optional[str] = None
    provider: Optional[str] = None

    def form_fields(self) -> Dict[str, str]:
        """Multipart text fields, blanks left out."""
        fields = {"idReport": str(self.report_id)}
        optional = {"prompt": self.prompt, "model": self.model, "llm": self.provider}
        for key, value in optional.items():
            if value and str(value).strip():
                fields[key] = str(value).strip()
        return fields
