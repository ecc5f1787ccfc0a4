"""Service that resolves column roles and runs the screening engine."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from forensics import (
    AnalysisConfig,
    AnalysisResult,
    ColumnProfile,
    NoAmountColumnError,
    classify_columns,
    perform_analysis,
)
from forensics.columns import headers_of, select_columns
from forensics.values import Row

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScreeningOutcome:
    """Result of a screening run together with the roles it used."""

    config: AnalysisConfig
    result: AnalysisResult
    auto_detected: bool


class ScreeningService:
    """Classify columns, choose roles and execute the engine off the event loop."""

    def profile(self, rows: Sequence[Row]) -> tuple[ColumnProfile, Optional[AnalysisConfig]]:
        profile = classify_columns(rows)
        suggested = select_columns(profile) if rows else None
        return profile, suggested

    def resolve_config(
        self, rows: Sequence[Row], manual: Optional[AnalysisConfig] = None
    ) -> tuple[AnalysisConfig, bool]:
        """Return the manual selection when given, otherwise the auto-detected one.

        Raises ``UnknownColumnError`` for manual columns missing from the rows and
        ``NoAmountColumnError`` when auto-detection finds no numeric column.
        """
        if manual is not None:
            manual.validate(headers_of(rows))
            return manual, False

        _, suggested = self.profile(rows)
        if suggested is None:
            raise NoAmountColumnError("No numeric columns found suitable for analysis.")
        logger.info("Auto-detected column roles: %s", suggested)
        return suggested, True

    async def screen(
        self, rows: Sequence[Row], manual: Optional[AnalysisConfig] = None
    ) -> ScreeningOutcome:
        config, auto_detected = self.resolve_config(rows, manual)
        result = await asyncio.to_thread(perform_analysis, rows, config)
        logger.info(
            "Screening complete: rows=%d valid=%d score=%d level=%s",
            result.total_rows,
            result.valid_rows,
            result.risk_score,
            result.risk_level,
        )
        return ScreeningOutcome(config=config, result=result, auto_detected=auto_detected)


__all__ = ["ScreeningOutcome", "ScreeningService"]
