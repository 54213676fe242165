"""Simulation analysis API endpoints."""

import math
from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool

from stockmodeler.analysis.simulation import InstrumentReport
from stockmodeler.collectors.prices import PriceHistoryCollector
from stockmodeler.config import TRADING_DAYS_PER_YEAR, Settings
from stockmodeler.errors import InvalidParameterError
from stockmodeler.pipeline import run_pipeline
from stockmodeler.web.dependencies import get_collector, get_settings
from stockmodeler.web.schemas import (
    ApiResponse,
    ErrorResponse,
    HorizonResultItem,
    InstrumentResult,
    LossPoint,
    RiskSummaryItem,
    SimulationResult,
)

router = APIRouter(prefix="/analysis/simulation", tags=["simulation"])

MAX_TRIALS = 5000
MAX_HORIZON_DAYS = TRADING_DAYS_PER_YEAR * 30

# 422 is left to FastAPI: it also covers malformed queries, which use its own schema
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid parameters"},
    404: {"model": ErrorResponse, "description": "No price data for a ticker"},
}


def _instrument_result(inst: InstrumentReport) -> InstrumentResult:
    ratio = inst.risk.reward_risk_ratio
    return InstrumentResult(
        ticker=inst.ticker,
        start_price=inst.initial_price,
        observations=inst.statistics.count,
        risk=RiskSummaryItem(
            ticker=inst.ticker,
            mean=inst.risk.mean,
            stdev=inst.risk.stdev,
            reward_risk_ratio=ratio if math.isfinite(ratio) else None,
        ),
        horizons={
            str(h): [
                HorizonResultItem(
                    percentile=r.percentile,
                    horizon_days=r.horizon_days,
                    start_price=r.start_price,
                    final_price=r.final_price,
                    fold_change=r.fold_change,
                    return_pct=r.return_pct,
                )
                for r in sim.results
            ]
            for h, sim in inst.horizons.items()
        },
        loss_curve=[
            LossPoint(horizon_days=p.horizon_days, loss_probability=p.loss_probability)
            for p in inst.loss_curve
        ],
    )


@router.get(
    "/{ticker}",
    response_model=ApiResponse[SimulationResult],
    responses=ERROR_RESPONSES,
)
async def get_simulation(
    ticker: str,
    benchmark: str | None = Query(None, description="Benchmark ticker"),
    start: date | None = Query(None, description="Calibration start date"),
    end: date | None = Query(None, description="Calibration end date"),
    horizons: list[int] | None = Query(None, description="Holding horizons in trading days"),
    trials: int | None = Query(None, ge=1, le=MAX_TRIALS),
    seed: int | None = Query(None),
    settings: Settings = Depends(get_settings),
    collector: PriceHistoryCollector = Depends(get_collector),
):
    """Run a Monte Carlo simulation of a ticker against its benchmark."""
    if horizons and max(horizons) > MAX_HORIZON_DAYS:
        raise InvalidParameterError(
            f"Holding horizons must be <= {MAX_HORIZON_DAYS} trading days, got {max(horizons)}"
        )
    config = settings.simulation_config(
        ticker=ticker.upper(),
        benchmark_ticker=benchmark.upper() if benchmark else None,
        calibration_start=start,
        calibration_end=end,
        holding_horizons=tuple(horizons) if horizons else None,
        trial_count=trials,
        visualized_trial_count=0,
    )
    if seed is None:
        seed = settings.simulation_seed

    report = await run_in_threadpool(run_pipeline, config, collector, seed)

    return ApiResponse(
        data=SimulationResult(
            ticker=config.ticker,
            benchmark_ticker=config.benchmark_ticker,
            calibration_start=config.calibration_start.isoformat(),
            calibration_end=config.calibration_end.isoformat(),
            trial_count=config.trial_count,
            seed=seed,
            primary=_instrument_result(report.primary),
            benchmark=_instrument_result(report.benchmark),
        )
    )
