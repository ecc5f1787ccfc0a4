"""
FastAPI application entrypoint for the ledger screening service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from app.api.routes import router as api_router
from app.core.config import get_settings
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the API with logging configured from settings."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Ledger Screening Service",
        version="0.1.0",
        description=(
            "Benford, outlier, duplicate and entity screening for tabular "
            "financial records, with optional narrative risk reports."
        ),
    )
    app.include_router(api_router, prefix="/api")
    logger.info(
        "Screening API ready (env=%s, max_rows=%d, narrative_reports=%s)",
        settings.environment,
        settings.max_rows,
        "on" if settings.gemini.enabled else "off",
    )
    return app


app = create_app()

__all__ = ["app", "create_app"]
