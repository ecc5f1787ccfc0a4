"""
FastAPI routes for the ledger screening service.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from forensics import NoAmountColumnError, UnknownColumnError

from app.dependencies import (
    get_fraud_report_service,
    get_row_limit,
    get_screening_service,
)
from app.schemas import (
    AnalysisResponse,
    ColumnProfileRequest,
    ColumnProfileResponse,
    ColumnRoles,
    ReportResponse,
    ScreeningRequest,
)
from app.services.screening import ScreeningOutcome

router = APIRouter()
logger = logging.getLogger(__name__)


def _enforce_row_limit(rows: list[dict[str, Any]], limit: int) -> None:
    if len(rows) > limit:
        raise HTTPException(
            status_code=HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
            detail=f"Request contains {len(rows)} rows; the limit is {limit}.",
        )


async def _run_screening(
    payload: ScreeningRequest, service: Any, limit: int
) -> ScreeningOutcome:
    if not payload.rows:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail="No rows supplied.")
    _enforce_row_limit(payload.rows, limit)

    manual = payload.config.to_config() if payload.config else None
    try:
        return await service.screen(payload.rows, manual)
    except UnknownColumnError as exc:
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except NoAmountColumnError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc)) from exc


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.post("/columns", status_code=HTTPStatus.OK, response_model=ColumnProfileResponse)
async def profile_columns(
    payload: ColumnProfileRequest,
    service: Annotated[Any, Depends(get_screening_service)],
    limit: Annotated[int, Depends(get_row_limit)],
) -> ColumnProfileResponse:
    """Classify columns and suggest role assignments for manual review."""
    _enforce_row_limit(payload.rows, limit)
    profile, suggested = service.profile(payload.rows)
    return ColumnProfileResponse(
        numeric=list(profile.numeric),
        date=list(profile.date),
        category=list(profile.category),
        identifier=list(profile.identifier),
        suggested_config=ColumnRoles.from_config(suggested) if suggested else None,
    )


@router.post("/analysis", status_code=HTTPStatus.OK, response_model=AnalysisResponse)
async def run_analysis(
    payload: ScreeningRequest,
    service: Annotated[Any, Depends(get_screening_service)],
    limit: Annotated[int, Depends(get_row_limit)],
) -> AnalysisResponse:
    """Screen the submitted rows and return the full analysis payload."""
    outcome = await _run_screening(payload, service, limit)
    return AnalysisResponse.from_result(outcome.result)


@router.post("/analysis/report", status_code=HTTPStatus.OK, response_model=ReportResponse)
async def run_analysis_with_report(
    payload: ScreeningRequest,
    service: Annotated[Any, Depends(get_screening_service)],
    report_service: Annotated[Any, Depends(get_fraud_report_service)],
    limit: Annotated[int, Depends(get_row_limit)],
) -> ReportResponse:
    """Screen the rows, then ask Gemini for a narrative risk assessment."""
    outcome = await _run_screening(payload, service, limit)
    report = await report_service.generate(outcome.result)
    return ReportResponse(analysis=AnalysisResponse.from_result(outcome.result), report=report)


__all__ = ["router"]
