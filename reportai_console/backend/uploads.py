"""
Upload checks and local previews for files sent to report generation: PDF, CSV, XLS, XLSX.
"""

import io
import logging
from typing import Any, Dict, List

import pandas as pd

from reportai_console.config import CONFIG
from reportai_console.core.errors import ValidationError
from reportai_console.core.models import UploadedFile

logger = logging.getLogger(__name__)

class UploadValidator:
    """Advisory file checks. The report service stays authoritative."""

    def __init__(self):
        self.accepted_mime_types = list(CONFIG.upload.accepted_mime_types)
        self.accepted_extensions = list(CONFIG.upload.accepted_extensions)
        self.max_file_size_bytes = CONFIG.upload.max_file_size_bytes

    @property
    def uploader_types(self) -> List[str]:
        """Extensions without the dot, as st.file_uploader expects them."""
        return [ext.lstrip(".") for ext in self.accepted_extensions]

    def is_accepted(self, file_name: str, mime_type: str = "") -> bool:
        """Accept on MIME type, falling back to the file extension."""
        if (mime_type or "").lower() in self.accepted_mime_types:
            return True
        name = (file_name or "").lower()
        return any(name.endswith(ext) for ext in self.accepted_extensions)

    def validate(self, upload: UploadedFile) -> UploadedFile:
        """Raise ValidationError when the file should not be sent."""
        if upload is None:
            raise ValidationError("file is required")
        if not self.is_accepted(upload.name, upload.mime_type):
            raise ValidationError(
                f"Unsupported file type: {upload.name}. Select a PDF, CSV, or Excel (.xls, .xlsx) file"
            )
        if upload.size == 0:
            raise ValidationError(f"File is empty: {upload.name}")
        if upload.size > self.max_file_size_bytes:
            raise ValidationError(
                f"File is too large: {upload.size} > {self.max_file_size_bytes} bytes"
            )
        return upload

class UploadPreviewer:
    """Read an upload locally so the operator can check it before generating."""

    def preview(self, upload: UploadedFile, max_rows: int = 20) -> Dict[str, Any]:
        """Summarize the upload; problems are reported, never raised."""
        ext = upload.extension
        try:
            if ext == ".csv":
                return self._preview_csv(upload, max_rows)
            if ext in (".xls", ".xlsx"):
                return self._preview_excel(upload, max_rows)
            if ext == ".pdf":
                return self._preview_pdf(upload)
        except (RuntimeError, ImportError) as e:
            logger.warning(f"Preview unavailable for {upload.name}: {e}")
            return {"format": ext.lstrip("."), "file_name": upload.name, "status": "unavailable", "error": str(e)}

        return {
            "format": ext.lstrip("."),
            "file_name": upload.name,
            "status": "unavailable",
            "error": f"No preview for {ext or 'files without extension'}",
        }

    def _preview_csv(self, upload: UploadedFile, max_rows: int) -> Dict[str, Any]:
        """Preview CSV file."""
        try:
            df = pd.read_csv(io.BytesIO(upload.content))
        except Exception as e:
            raise RuntimeError(f"CSV preview failed: {str(e)}")
        return {
            "format": "csv",
            "file_name": upload.name,
            "status": "ok",
            "rows": len(df),
            "columns": [str(col) for col in df.columns],
            "head": df.head(max_rows),
        }

    def _preview_excel(self, upload: UploadedFile, max_rows: int) -> Dict[str, Any]:
        """Preview every sheet of a workbook."""
        try:
            workbook = pd.read_excel(io.BytesIO(upload.content), sheet_name=None)
        except ImportError:
            raise
        except Exception as e:
            raise RuntimeError(f"Excel preview failed: {str(e)}")

        sheets: Dict[str, Dict[str, Any]] = {}
        for sheet_name, df in workbook.items():
            sheets[str(sheet_name)] = {
                "rows": len(df),
                "columns": [str(col) for col in df.columns],
                "head": df.head(max_rows),
            }
        return {
            "format": upload.extension.lstrip("."),
            "file_name": upload.name,
            "status": "ok",
            "sheet_names": list(sheets),
            "sheets": sheets,
        }

    def _preview_pdf(self, upload: UploadedFile, max_chars: int = 1500) -> Dict[str, Any]:
        """Page count and the start of the embedded text."""
        try:
            import pypdf
        except ImportError:
            raise ImportError("pypdf required: pip install pypdf")

        try:
            pdf = pypdf.PdfReader(io.BytesIO(upload.content))
            page_count = len(pdf.pages)
            first_page_text = ""
            if page_count:
                first_page_text = (pdf.pages[0].extract_text() or "").strip()
        except Exception as e:
            raise RuntimeError(f"PDF preview failed: {str(e)}")

        return {
            "format": "pdf",
            "file_name": upload.name,
            "status": "ok",
            "pages": page_count,
            "text_excerpt": first_page_text[:max_chars],
        }
