"""Public schema exports."""

from .analysis import (
    AnalysisResponse,
    AnomalyItem,
    ColumnProfileRequest,
    ColumnProfileResponse,
    ColumnRoles,
    ReportResponse,
    ScreeningRequest,
)

__all__ = [
    "AnalysisResponse",
    "AnomalyItem",
    "ColumnProfileRequest",
    "ColumnProfileResponse",
    "ColumnRoles",
    "ReportResponse",
    "ScreeningRequest",
]
