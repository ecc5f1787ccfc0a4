"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from app.clients import GeminiClient
from app.core.config import get_settings
from app.services import FraudReportService, ScreeningService


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_gemini_client() -> GeminiClient:
    """Provide the Gemini client used for narrative reports."""
    return GeminiClient(_settings().gemini)


@lru_cache()
def get_screening_service() -> ScreeningService:
    """Provide the screening service wrapping the analysis engine."""
    return ScreeningService()


@lru_cache()
def get_fraud_report_service() -> FraudReportService:
    """Provide the narrative report service."""
    return FraudReportService(get_gemini_client())


__all__ = [
    "get_fraud_report_service",
    "get_gemini_client",
    "get_screening_service",
]
