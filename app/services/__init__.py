"""Service layer exports."""

from .fraud_report import FraudReportService, build_report_prompt
from .screening import ScreeningOutcome, ScreeningService

__all__ = [
    "FraudReportService",
    "ScreeningOutcome",
    "ScreeningService",
    "build_report_prompt",
]
