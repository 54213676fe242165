"""Pydantic response schemas for the Stock Modeler API."""

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from stockmodeler import __version__

T = TypeVar("T")


# --- Base schemas ---


class Meta(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ApiResponse(BaseModel, Generic[T]):
    data: T
    meta: Meta = Field(default_factory=Meta)


class ErrorDetail(BaseModel):
    code: str = Field(description="Machine-readable error code, e.g. invalid_parameter")
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail


# --- Simulation schemas ---


class HorizonResultItem(BaseModel):
    percentile: float = Field(description="Percentile rank in [0, 1]")
    horizon_days: int = Field(description="Holding horizon in trading days")
    start_price: float
    final_price: float = Field(description="Simulated terminal price at this percentile")
    fold_change: float = Field(description="(final - start) / start")
    return_pct: float = Field(description="Simple return in percent")


class LossPoint(BaseModel):
    horizon_days: int
    loss_probability: float | None = Field(
        None, description="Smallest percentile with a gain; null when no percentile shows a gain"
    )


class RiskSummaryItem(BaseModel):
    ticker: str
    mean: float = Field(description="Mean daily log return")
    stdev: float = Field(description="Sample standard deviation of daily log returns")
    reward_risk_ratio: float | None = Field(None, description="mean / stdev; null when undefined")


class InstrumentResult(BaseModel):
    ticker: str
    start_price: float = Field(description="Most recent adjusted close")
    observations: int = Field(description="Number of daily returns in the calibration window")
    risk: RiskSummaryItem
    horizons: dict[str, list[HorizonResultItem]] = Field(
        description="Percentile rows keyed by horizon in trading days"
    )
    loss_curve: list[LossPoint]


class SimulationResult(BaseModel):
    ticker: str
    benchmark_ticker: str
    calibration_start: str
    calibration_end: str
    trial_count: int
    seed: int | None = None
    primary: InstrumentResult
    benchmark: InstrumentResult


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = __version__
    service: str = "stockmodeler-api"
