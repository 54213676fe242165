"""Multi-horizon Monte Carlo orchestrator.

Calibrates the random walk on each instrument's historical log returns,
runs the Monte Carlo engine for every holding horizon, and summarizes the
outcome as percentile tables and a probability-of-loss curve. The primary
ticker is always modeled side by side with a benchmark fund.
"""

import hashlib
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from stockmodeler.analysis.montecarlo import simulate_terminal_prices
from stockmodeler.analysis.returns import (
    ReturnStatistics,
    compute_log_returns,
    estimate_return_statistics,
    latest_close,
)
from stockmodeler.analysis.risk import RiskSummary, compute_risk_summary, percentile_table
from stockmodeler.analysis.sim_models import HorizonResult, LossProbability, SimulationParameters
from stockmodeler.analysis.sim_models.random_walk import simulate_random_walks
from stockmodeler.config import SimulationConfig
from stockmodeler.errors import UndefinedPercentileLookupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HorizonSimulation:
    horizon_days: int
    terminal_prices: np.ndarray
    results: list[HorizonResult]  # at the report percentiles
    loss_results: list[HorizonResult] | None = None  # only with an explicit loss-curve grid

    @property
    def loss_curve_results(self) -> list[HorizonResult]:
        return self.results if self.loss_results is None else self.loss_results


@dataclass(frozen=True)
class InstrumentReport:
    ticker: str
    initial_price: float
    statistics: ReturnStatistics
    risk: RiskSummary
    horizons: dict[int, HorizonSimulation]
    loss_curve: list[LossProbability]


@dataclass(frozen=True)
class ModelingReport:
    config: SimulationConfig
    primary: InstrumentReport
    benchmark: InstrumentReport
    sample_paths: pd.DataFrame  # day, price, trial for the primary ticker


# ---------------------------------------------------------------------------
# Seeding
# ---------------------------------------------------------------------------


def _stream_seed(seed: int | None, ticker: str, stream: str | int) -> int | None:
    """Deterministic per-(seed, ticker, stream) seed; None keeps OS entropy.

    hashlib-based so the value does not depend on the interpreter session.
    """
    if seed is None:
        return None
    key = f"{seed}:{ticker}:{stream}".encode()
    return int(hashlib.sha256(key).hexdigest(), 16) % (2**63)


# ---------------------------------------------------------------------------
# Probability of loss
# ---------------------------------------------------------------------------


def find_loss_percentile(results: Sequence[HorizonResult]) -> float:
    """Smallest percentile rank whose fold change is strictly positive.

    Raises:
        UndefinedPercentileLookupError: no rank yields a positive fold change.
    """
    positive = [r.percentile for r in results if r.fold_change > 0]
    if not positive:
        horizon = results[0].horizon_days if results else None
        raise UndefinedPercentileLookupError(horizon)
    return min(positive)


def probability_of_loss_curve(
    results_by_horizon: Mapping[int, Sequence[HorizonResult]],
) -> list[LossProbability]:
    """Loss probability per horizon, in horizon order.

    Horizons where no percentile shows a gain are reported with a
    ``None`` loss probability rather than a made-up number.
    """
    curve = []
    for horizon in sorted(results_by_horizon):
        try:
            probability: float | None = find_loss_percentile(results_by_horizon[horizon])
        except UndefinedPercentileLookupError:
            logger.info("No positive percentile found for horizon %dd", horizon)
            probability = None
        curve.append(LossProbability(horizon_days=horizon, loss_probability=probability))
    return curve


# ---------------------------------------------------------------------------
# Main entry points
# ---------------------------------------------------------------------------


def run_instrument(
    ticker: str,
    prices: Sequence[float] | np.ndarray | pd.Series,
    config: SimulationConfig,
    seed: int | None = None,
) -> InstrumentReport:
    """Calibrate on ``prices`` and simulate every configured horizon.

    Args:
        ticker: Instrument symbol, also used to key random streams.
        prices: Adjusted closing prices, chronological (oldest first).
        config: Run configuration (horizons, trials, percentiles).
        seed: Root seed for reproducible runs; None for fresh entropy.

    Raises:
        InsufficientDataError: fewer than 2 usable returns.
        InvalidParameterError: degenerate price or parameters.
    """
    log_returns = compute_log_returns(prices)
    stats = estimate_return_statistics(log_returns)
    initial_price = latest_close(prices)
    risk = compute_risk_summary(ticker, stats)

    logger.info(
        "%s: calibrated on %d returns (mean=%.6f, stdev=%.6f), start price %.2f",
        ticker, stats.count, stats.mean, stats.stdev, initial_price,
    )

    horizons: dict[int, HorizonSimulation] = {}
    for horizon in config.holding_horizons:
        params = SimulationParameters(
            initial_price=initial_price,
            daily_drift=stats.mean,
            daily_volatility=stats.stdev,
            horizon_days=horizon,
            trial_count=config.trial_count,
        )
        terminal = simulate_terminal_prices(
            params,
            seed=_stream_seed(seed, ticker, horizon),
            max_workers=config.max_workers,
        )
        loss_results = None
        if config.loss_curve_percentiles is not None:
            loss_results = percentile_table(
                terminal, initial_price, horizon, config.loss_curve_percentiles
            )
        horizons[horizon] = HorizonSimulation(
            horizon_days=horizon,
            terminal_prices=terminal,
            results=percentile_table(terminal, initial_price, horizon, config.report_percentiles),
            loss_results=loss_results,
        )
        logger.debug(
            "%s: horizon %dd median %.2f",
            ticker, horizon, float(np.median(terminal)),
        )

    loss_curve = probability_of_loss_curve(
        {h: sim.loss_curve_results for h, sim in horizons.items()}
    )

    return InstrumentReport(
        ticker=ticker,
        initial_price=initial_price,
        statistics=stats,
        risk=risk,
        horizons=horizons,
        loss_curve=loss_curve,
    )


def run_comparison(
    primary_prices: Sequence[float] | np.ndarray | pd.Series,
    benchmark_prices: Sequence[float] | np.ndarray | pd.Series,
    config: SimulationConfig,
    seed: int | None = None,
) -> ModelingReport:
    """Model the primary ticker against the benchmark over all horizons.

    Also draws ``visualized_trial_count`` illustrative paths for the primary
    ticker over the longest horizon.
    """
    logger.info(
        "Modeling %s vs %s: horizons=%s trials=%d",
        config.ticker, config.benchmark_ticker,
        list(config.holding_horizons), config.trial_count,
    )
    primary = run_instrument(config.ticker, primary_prices, config, seed=seed)
    benchmark = run_instrument(config.benchmark_ticker, benchmark_prices, config, seed=seed)

    rng = np.random.default_rng(_stream_seed(seed, config.ticker, "paths"))
    sample_paths = simulate_random_walks(
        initial_price=primary.initial_price,
        daily_drift=primary.statistics.mean,
        daily_volatility=primary.statistics.stdev,
        horizon_days=max(config.holding_horizons),
        path_count=config.visualized_trial_count,
        rng=rng,
    )

    return ModelingReport(
        config=config,
        primary=primary,
        benchmark=benchmark,
        sample_paths=sample_paths,
    )
