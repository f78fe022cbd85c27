"""
Pydantic request/response models.

Rationale:
- Define explicit input/output contracts for the analytics API.
- The request accepts any JSON for its fields so unknown types reach the
  dispatcher (400) and malformed project data still gets an answer,
  instead of failing validation (422).
- Result models describe the JSON the dashboard expects for each type.
"""

from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalysisType(str, Enum):
    COST_FORECAST = "cost_forecast"
    RESOURCE_UTILIZATION = "resource_utilization"
    RISK_ASSESSMENT = "risk_assessment"
    TIMELINE_PREDICTION = "timeline_prediction"
    DASHBOARD_COST_FORECAST = "dashboard_cost_forecast"


Level = Literal["Low", "Medium", "High"]


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Any = None
    project_data: Any = Field(None, alias="projectData")
    projects: Any = None


class ForecastPoint(BaseModel):
    name: str
    Actual: float
    Predicted: float


class CostForecast(BaseModel):
    forecastData: List[ForecastPoint] = Field(..., min_length=6, max_length=6)
    finalCost: float
    overrunPercentage: float
    insight: str


class HeatmapCell(BaseModel):
    x: str
    y: float


class HeatmapRow(BaseModel):
    name: str
    data: List[HeatmapCell] = Field(..., min_length=5, max_length=5)


class ResourceUtilization(BaseModel):
    utilizationScore: float
    heatmap: List[HeatmapRow]
    pendingApprovals: int
    insight: str


class RiskAssessment(BaseModel):
    riskScore: float = Field(..., ge=0, le=100)
    confidenceLevel: Level
    hotspots: List[str]
    insight: str


class Phase(BaseModel):
    name: str
    status: str


class TimelinePrediction(BaseModel):
    predictedCompletion: str
    delayProbability: Level
    phases: List[Phase]
    insight: str


class DashboardCostForecast(BaseModel):
    forecastData: List[ForecastPoint] = Field(..., min_length=6, max_length=6)
    insight: str


class ErrorResponse(BaseModel):
    message: str
    error: Optional[str] = None
