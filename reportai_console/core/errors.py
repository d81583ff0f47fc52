"""
Error taxonomy for report service calls and client-side checks.
"""

from typing import Optional

class ReportConsoleError(Exception):
    """Base error; str(error) is a message fit to show the operator."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class TransportError(ReportConsoleError):
    """The report service could not be reached (connection, DNS, timeout)."""

class HttpError(ReportConsoleError):
    """The report service answered with a non-2xx status or an unreadable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

class ValidationError(ReportConsoleError):
    """Rejected locally before anything was sent."""

class GenerationError(ReportConsoleError):
    """Report generation failed."""
