"""
Pydantic models for screening requests and responses.

Response models read the engine's dataclasses by attribute and emit the
camelCase payload consumed by dashboards and exporters.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from forensics import AnalysisConfig, AnalysisResult, AnomalyType

CellValue = Union[str, int, float, None]


class CamelModel(BaseModel):
    """Base for payloads exchanged with the dashboard in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class ColumnRoles(CamelModel):
    """Manual column role selection; overrides auto-detection when supplied."""

    amount_column: str = Field(..., min_length=1, description="Monetary column to screen.")
    date_column: Optional[str] = Field(
        None, description="Enables the time series, heatmap and annualized forecast."
    )
    category_column: Optional[str] = Field(
        None, description="Vendor/merchant column used for entity clustering."
    )
    source_column: Optional[str] = Field(
        None, description="Employee/approver column used for the flow graph."
    )
    invoice_column: Optional[str] = Field(
        None,
        description="Identifier column used for duplicate IDs and as the Benford source.",
    )

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> "ColumnRoles":
        return cls.model_validate(config)

    def to_config(self) -> AnalysisConfig:
        return AnalysisConfig(
            amount_column=self.amount_column,
            date_column=self.date_column,
            category_column=self.category_column,
            source_column=self.source_column,
            invoice_column=self.invoice_column,
        )


class ColumnProfileRequest(BaseModel):
    """Rows to classify before choosing column roles."""

    rows: List[Dict[str, CellValue]] = Field(default_factory=list)


class ScreeningRequest(BaseModel):
    """Rows to screen plus an optional manual role selection."""

    rows: List[Dict[str, CellValue]] = Field(
        ..., description="Ordered records; position + 1 is the row index."
    )
    config: Optional[ColumnRoles] = Field(
        None, description="Manual selection. Auto-detected from the rows when omitted."
    )


class ColumnProfileResponse(CamelModel):
    """Detected column classes and the suggested role configuration."""

    numeric: List[str] = Field(default_factory=list)
    date: List[str] = Field(default_factory=list)
    category: List[str] = Field(default_factory=list)
    identifier: List[str] = Field(default_factory=list)
    suggested_config: Optional[ColumnRoles] = None


class AnomalyItem(CamelModel):
    row_index: int = Field(..., description="1-based position of the row in the input.")
    type: AnomalyType
    column: str
    value: CellValue
    row: Dict[str, CellValue] = Field(
        default_factory=dict, alias="data", description="The full source row."
    )


class BenfordPoint(CamelModel):
    digit: int
    count: int
    actual: float = Field(..., description="Observed share in percent.")
    expected: float = Field(..., description="Benford share in percent.")


class HistogramItem(CamelModel):
    range_start: float
    range_end: float
    count: int
    label: str


class TimeSeriesItem(CamelModel):
    date: str
    amount: float
    count: int


class ScatterItem(CamelModel):
    id: int
    index: int
    amount: float
    is_outlier: bool
    z_score: float


class EntityItem(CamelModel):
    id: str
    count: int
    total_amount: float
    average_amount: float
    is_outlier: bool


class HeatmapItem(CamelModel):
    day: str
    hour: int
    count: int
    intensity: float


class ParetoItem(CamelModel):
    name: str
    value: float
    cumulative_percentage: float


class GraphNodeItem(CamelModel):
    id: str
    type: str
    value: float


class GraphLinkItem(CamelModel):
    source: str
    target: str
    value: float


class FlowGraphPayload(CamelModel):
    nodes: List[GraphNodeItem] = Field(default_factory=list)
    links: List[GraphLinkItem] = Field(default_factory=list)


class RiskBreakdownPayload(CamelModel):
    outliers: float = 0.0
    duplicates: float = 0.0
    negatives: float = 0.0


class StatsPayload(CamelModel):
    duplicate_count: int
    negative_count: int
    missing_count: int
    outlier_count: int
    total_amount: float
    average_amount: float
    high_risk_entities: int
    top_anomalies: List[AnomalyItem] = Field(default_factory=list)
    total_at_risk: float
    forecast_loss: float = Field(..., description="Total at risk annualized.")
    risk_breakdown: RiskBreakdownPayload = Field(default_factory=RiskBreakdownPayload)


class AnalysisResponse(CamelModel):
    """Full screening result."""

    column_name: str
    date_column_name: Optional[str] = None
    category_column_name: Optional[str] = None
    source_column_name: Optional[str] = None
    invoice_column_name: Optional[str] = None
    total_rows: int
    valid_rows: int
    mad: float
    conformity: str
    chart_data: List[BenfordPoint]
    mad_2_digit: float = Field(..., alias="mad2Digit")
    conformity_2_digit: str = Field(..., alias="conformity2Digit")
    chart_data_2_digit: List[BenfordPoint] = Field(..., alias="chartData2Digit")
    histogram_data: List[HistogramItem] = Field(default_factory=list)
    time_series_data: List[TimeSeriesItem] = Field(default_factory=list)
    scatter_data: List[ScatterItem] = Field(default_factory=list)
    entity_data: List[EntityItem] = Field(default_factory=list)
    heatmap_data: List[HeatmapItem] = Field(default_factory=list)
    pareto_data: List[ParetoItem] = Field(default_factory=list)
    graph_data: FlowGraphPayload = Field(default_factory=FlowGraphPayload)
    anomalies: List[AnomalyItem] = Field(default_factory=list)
    risk_score: int = Field(..., ge=0, le=100)
    risk_level: str
    stats: StatsPayload

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResponse":
        return cls.model_validate(result)


class ReportResponse(BaseModel):
    """Analysis payload together with the narrative assessment."""

    analysis: AnalysisResponse
    report: str


__all__ = [
    "AnalysisResponse",
    "AnomalyItem",
    "CamelModel",
    "CellValue",
    "ColumnProfileRequest",
    "ColumnProfileResponse",
    "ColumnRoles",
    "ReportResponse",
    "ScreeningRequest",
]
