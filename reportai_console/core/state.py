"""
State containers owned by the controllers.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional

from reportai_console.config import CONFIG
from reportai_console.core.models import PaginatedReports, Report

@dataclass
class PaginationState:
    """Listing position and the counters from the last response."""
    page: int = 1
    page_size: int = field(default_factory=lambda: CONFIG.pagination.default_page_size)
    total_count: int = 0
    total_pages: int = 0

    @classmethod
    def from_response(cls, data: PaginatedReports) -> "PaginationState":
        return cls(
            page=data.page,
            page_size=data.page_size,
            total_count=data.total_count,
            total_pages=data.total_pages or 0,
        )

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def to_dict(self):
        return asdict(self)

@dataclass
class ReportsState:
    """Current page of reports plus request flags."""
    reports: List[Report] = field(default_factory=list)
    pagination: PaginationState = field(default_factory=PaginationState)
    loading: bool = False
    error: Optional[str] = None

    def to_dict(self):
        return {
            "reports": [report.model_dump() for report in self.reports],
            "pagination": self.pagination.to_dict(),
            "loading": self.loading,
            "error": self.error,
        }

@dataclass
class GenerationState:
    """One generation request and its HTML result."""
    loading: bool = False
    error: Optional[str] = None
    generated_report: Optional[str] = None

    def to_dict(self):
        return asdict(self)
