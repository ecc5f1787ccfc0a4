"""
Data models shared across the screening engine.

Every result type is a frozen dataclass. The API layer serializes them through
the camelCase pydantic schemas in ``app.schemas.analysis``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Literal, Optional, Tuple

from forensics.errors import UnknownColumnError
from forensics.values import CellValue, Row

Conformity = Literal["Close", "Acceptable", "Marginally Acceptable", "Nonconformity"]
RiskLevel = Literal["Low", "Medium", "High", "Critical"]
NodeType = Literal["source", "target"]


class AnomalyType(str, Enum):
    """Kinds of row-level findings."""

    DUPLICATE_RECORD = "Duplicate Record"
    DUPLICATE_INVOICE_ID = "Duplicate Invoice ID"
    NEGATIVE_AMOUNT = "Negative Amount"
    MISSING_VALUE = "Missing Value"
    STATISTICAL_OUTLIER = "Statistical Outlier"

    @property
    def is_duplicate(self) -> bool:
        return self in (AnomalyType.DUPLICATE_RECORD, AnomalyType.DUPLICATE_INVOICE_ID)


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Role assignment for the columns of a dataset."""

    amount_column: str
    date_column: Optional[str] = None
    category_column: Optional[str] = None
    source_column: Optional[str] = None
    invoice_column: Optional[str] = None

    def roles(self) -> List[Tuple[str, Optional[str]]]:
        return [
            ("Amount", self.amount_column),
            ("Date", self.date_column),
            ("Category", self.category_column),
            ("Source", self.source_column),
            ("Invoice", self.invoice_column),
        ]

    def validate(self, headers: Iterable[str]) -> None:
        """Raise ``UnknownColumnError`` when a named column is not a header."""
        known = set(headers)
        for role, column in self.roles():
            if column is not None and column not in known:
                raise UnknownColumnError(role, column)


@dataclass(frozen=True, slots=True)
class Anomaly:
    row_index: int
    type: AnomalyType
    column: str
    value: CellValue
    row: Row

    def __post_init__(self) -> None:
        # Snapshot the source row; later edits by the caller must not leak in.
        object.__setattr__(self, "row", MappingProxyType(dict(self.row)))

    @property
    def magnitude(self) -> float:
        """Absolute numeric value, 0 for textual values."""
        if isinstance(self.value, (int, float)) and not isinstance(self.value, bool):
            return abs(self.value)
        return 0.0


@dataclass(frozen=True, slots=True)
class BenfordDataPoint:
    digit: int
    count: int
    actual: float
    expected: float


@dataclass(frozen=True, slots=True)
class HistogramBin:
    range_start: float
    range_end: float
    count: int
    label: str


@dataclass(frozen=True, slots=True)
class TimeSeriesPoint:
    date: str
    amount: float
    count: int


@dataclass(frozen=True, slots=True)
class ScatterPoint:
    id: int
    index: int
    amount: float
    is_outlier: bool
    z_score: float


@dataclass(frozen=True, slots=True)
class EntityDataPoint:
    id: str
    count: int
    total_amount: float
    average_amount: float
    is_outlier: bool


@dataclass(frozen=True, slots=True)
class HeatmapCell:
    day: str
    hour: int
    count: int
    intensity: float


@dataclass(frozen=True, slots=True)
class ParetoPoint:
    name: str
    value: float
    cumulative_percentage: float


@dataclass(frozen=True, slots=True)
class GraphNode:
    id: str
    type: NodeType
    value: float


@dataclass(frozen=True, slots=True)
class GraphLink:
    source: str
    target: str
    value: float


@dataclass(frozen=True, slots=True)
class FlowGraph:
    nodes: Tuple[GraphNode, ...] = ()
    links: Tuple[GraphLink, ...] = ()


@dataclass(frozen=True, slots=True)
class RiskBreakdown:
    outliers: float = 0.0
    duplicates: float = 0.0
    negatives: float = 0.0


@dataclass(frozen=True, slots=True)
class AnalysisStats:
    duplicate_count: int
    negative_count: int
    missing_count: int
    outlier_count: int
    total_amount: float
    average_amount: float
    high_risk_entities: int
    top_anomalies: Tuple[Anomaly, ...]
    total_at_risk: float
    forecast_loss: float
    risk_breakdown: RiskBreakdown = field(default_factory=RiskBreakdown)


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Complete outcome of one screening run."""

    column_name: str
    date_column_name: Optional[str]
    category_column_name: Optional[str]
    source_column_name: Optional[str]
    invoice_column_name: Optional[str]
    total_rows: int
    valid_rows: int
    mad: float
    conformity: Conformity
    chart_data: Tuple[BenfordDataPoint, ...]
    mad_2_digit: float
    conformity_2_digit: Conformity
    chart_data_2_digit: Tuple[BenfordDataPoint, ...]
    histogram_data: Tuple[HistogramBin, ...]
    time_series_data: Tuple[TimeSeriesPoint, ...]
    scatter_data: Tuple[ScatterPoint, ...]
    entity_data: Tuple[EntityDataPoint, ...]
    heatmap_data: Tuple[HeatmapCell, ...]
    pareto_data: Tuple[ParetoPoint, ...]
    graph_data: FlowGraph
    anomalies: Tuple[Anomaly, ...]
    risk_score: int
    risk_level: RiskLevel
    stats: AnalysisStats

    def anomalies_of(self, anomaly_type: AnomalyType) -> List[Anomaly]:
        return [anomaly for anomaly in self.anomalies if anomaly.type is anomaly_type]


__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "AnalysisStats",
    "Anomaly",
    "AnomalyType",
    "BenfordDataPoint",
    "Conformity",
    "EntityDataPoint",
    "FlowGraph",
    "GraphLink",
    "GraphNode",
    "HeatmapCell",
    "HistogramBin",
    "ParetoPoint",
    "RiskBreakdown",
    "RiskLevel",
    "ScatterPoint",
    "TimeSeriesPoint",
]
