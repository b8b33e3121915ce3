# btp/schemas.py
# Pydantic models for structured inputs/outputs.

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .config import (
    FALLBACK_DELAY_RISK,
    RICH_HEAT_RISK_WEIGHT,
    RICH_MIN_DELAY_RISK,
    RICH_MIN_DURATION_DAYS,
    RICH_RAIN_RISK_WEIGHT,
    SIMPLE_HEAT_RISK_WEIGHT,
    SIMPLE_RAIN_RISK_WEIGHT,
)


class HistoricalProject(BaseModel):
    """A completed project used as reference data for estimates."""

    model_config = ConfigDict(frozen=True)

    project_type: str = Field(..., min_length=1)
    surface_area: float = Field(..., gt=0, description="Floor area in m²")
    worker_count: int = Field(0, ge=0)
    average_temperature: float = Field(25, description="°C")
    rain_days: float = Field(0, ge=0, description="Rain days per month")
    materials_cost: float = Field(0, ge=0)
    labor_cost: float = Field(0, ge=0)
    estimated_duration_days: int = Field(0, ge=0)
    delay_days: int = Field(0, ge=0, description="Observed delay in days")


class EstimationRequest(BaseModel):
    """Candidate project described by the user."""

    project_type: str
    surface_area: float = Field(..., ge=0)
    worker_count: int = Field(0, ge=0)
    average_temperature: float = 25
    rain_days: float = Field(0, ge=0)


class EstimatorOptions(BaseModel):
    """Switches for the optional estimator factors."""

    model_config = ConfigDict(frozen=True)

    worker_scaling: bool = False
    rich_recommendations: bool = False
    min_duration_days: Optional[int] = None
    min_delay_risk: float = 0.0
    rain_risk_weight: float = SIMPLE_RAIN_RISK_WEIGHT
    heat_risk_weight: float = SIMPLE_HEAT_RISK_WEIGHT
    fallback_delay_risk: float = FALLBACK_DELAY_RISK

    @classmethod
    def simple(cls) -> "EstimatorOptions":
        return cls()

    @classmethod
    def rich(cls) -> "EstimatorOptions":
        return cls(
            worker_scaling=True,
            rich_recommendations=True,
            min_duration_days=RICH_MIN_DURATION_DAYS,
            min_delay_risk=RICH_MIN_DELAY_RISK,
            rain_risk_weight=RICH_RAIN_RISK_WEIGHT,
            heat_risk_weight=RICH_HEAT_RISK_WEIGHT,
        )


class EstimationResult(BaseModel):
    """Estimate for one request. Amounts are whole currency units."""

    model_config = ConfigDict(frozen=True)

    total_cost: int = Field(..., description="materials + labor")
    materials_cost_estimate: int
    labor_cost_estimate: int
    duration_estimate_days: int
    delay_risk_percent: int = Field(..., ge=0, le=100)
    recommendations: List[str] = Field(default_factory=list)
    fallback: bool = Field(
        False, description="True when no project of the same type was found"
    )
    low_confidence: bool = False
    sample_size: int = Field(0, description="Historical records averaged")


class TypeStats(BaseModel):
    """Aggregates for one project type."""

    count: int
    total_cost: float
    average_duration_days: float
    average_delay_days: float


class HistoricalStats(BaseModel):
    """Summary of the whole historical set."""

    total_projects: int
    total_investment: float
    average_duration_days: int
    average_delay_days: int
    by_type: Dict[str, TypeStats]


class Schedule(BaseModel):
    """Calendar dates derived from an estimated duration."""

    start_date: date
    end_date: date
    duration_days: int
