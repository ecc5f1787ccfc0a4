"""
Configuration-derived FastAPI dependencies.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.core.config import AppSettings, get_settings


@lru_cache()
def get_app_settings() -> AppSettings:
    """Settings shared by every request handler."""
    return get_settings()


def get_row_limit(settings: Annotated[AppSettings, Depends(get_app_settings)]) -> int:
    """Maximum number of rows a single screening request may submit."""
    return settings.max_rows


__all__ = ["get_app_settings", "get_row_limit"]
