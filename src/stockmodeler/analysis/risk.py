"""Percentile and risk summaries.

Pure computation functions turning a terminal price distribution into
percentile tables and simple returns, plus the reward/risk ratio of the
historical calibration window.
No I/O - operates on arrays passed as arguments.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from stockmodeler.analysis.returns import ReturnStatistics
from stockmodeler.analysis.sim_models import HorizonResult
from stockmodeler.errors import InvalidParameterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskSummary:
    ticker: str
    mean: float
    stdev: float
    reward_risk_ratio: float


def _validate_percentiles(percentiles: Sequence[float]) -> np.ndarray:
    ranks = np.asarray(percentiles, dtype=float)
    if ranks.ndim != 1 or len(ranks) == 0:
        raise InvalidParameterError("At least one percentile rank is required")
    if np.any(~np.isfinite(ranks)) or np.any((ranks < 0) | (ranks > 1)):
        raise InvalidParameterError(f"Percentile ranks must lie in [0, 1], got {ranks.tolist()}")
    return ranks


def _validate_distribution(terminal_prices: np.ndarray, initial_price: float) -> np.ndarray:
    terminal = np.asarray(terminal_prices, dtype=float)
    if terminal.size == 0:
        raise InvalidParameterError("Terminal price distribution is empty")
    if initial_price <= 0:
        raise InvalidParameterError(f"initial_price must be positive, got {initial_price}")
    return terminal


def percentile_table(
    terminal_prices: np.ndarray,
    initial_price: float,
    horizon_days: int,
    percentiles: Sequence[float],
) -> list[HorizonResult]:
    """Summarize a terminal price distribution at the requested percentiles.

    Quantiles use linear interpolation between order statistics (the
    "type 7" estimator). Rows come back in the requested order.

    Args:
        terminal_prices: Simulated terminal prices.
        initial_price: Price every trial started from.
        horizon_days: Holding horizon the distribution belongs to.
        percentiles: Ranks in [0, 1].

    Returns:
        One HorizonResult per requested rank.
    """
    terminal = _validate_distribution(terminal_prices, initial_price)
    ranks = _validate_percentiles(percentiles)

    prices = np.quantile(terminal, ranks, method="linear")
    return [
        HorizonResult(
            percentile=float(rank),
            horizon_days=int(horizon_days),
            start_price=float(initial_price),
            final_price=float(price),
            fold_change=float((price - initial_price) / initial_price),
        )
        for rank, price in zip(ranks, prices)
    ]


def simple_returns_pct(terminal_prices: np.ndarray, initial_price: float) -> np.ndarray:
    """Simple return of every trial, in percent."""
    terminal = _validate_distribution(terminal_prices, initial_price)
    return 100.0 * (terminal - initial_price) / initial_price


def return_percentiles(
    terminal_prices: np.ndarray,
    initial_price: float,
    percentiles: Sequence[float],
) -> dict[float, float]:
    """Percentiles of the simple-return (%) distribution, keyed by rank."""
    ranks = _validate_percentiles(percentiles)
    gains = simple_returns_pct(terminal_prices, initial_price)
    values = np.quantile(gains, ranks, method="linear")
    return {float(r): float(v) for r, v in zip(ranks, values)}


def compute_risk_summary(ticker: str, statistics: ReturnStatistics) -> RiskSummary:
    """Reward/risk ratio of the historical calibration window.

    Ratio = mean daily log return / sample stdev of daily log returns.
    A zero stdev gives +/-inf (NaN when the mean is also zero).
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = float(np.float64(statistics.mean) / np.float64(statistics.stdev))
    if not np.isfinite(ratio):
        logger.warning("%s: degenerate reward/risk ratio (stdev=%.6g)", ticker, statistics.stdev)
    return RiskSummary(
        ticker=ticker,
        mean=statistics.mean,
        stdev=statistics.stdev,
        reward_risk_ratio=ratio,
    )
