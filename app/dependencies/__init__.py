"""Expose dependency helpers for FastAPI routers."""

from .clients import get_fraud_report_service, get_gemini_client, get_screening_service
from .config import get_app_settings, get_row_limit

__all__ = [
    "get_app_settings",
    "get_fraud_report_service",
    "get_gemini_client",
    "get_row_limit",
    "get_screening_service",
]
