"""Forensic screening engine for tabular financial records.

The engine is synchronous and side-effect free: ``perform_analysis`` maps a
row sequence and an ``AnalysisConfig`` to an immutable ``AnalysisResult``.
"""

from __future__ import annotations

from .columns import ColumnProfile, classify_columns, detect_best_columns
from .errors import ForensicsError, NoAmountColumnError, UnknownColumnError
from .models import AnalysisConfig, AnalysisResult, Anomaly, AnomalyType
from .pipeline import perform_analysis

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "Anomaly",
    "AnomalyType",
    "ColumnProfile",
    "ForensicsError",
    "NoAmountColumnError",
    "UnknownColumnError",
    "classify_columns",
    "detect_best_columns",
    "perform_analysis",
]
