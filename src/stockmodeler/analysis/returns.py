"""Return statistics estimation.

Pure computation functions deriving daily log returns and their
mean / sample standard deviation from a historical price series.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from stockmodeler.errors import InsufficientDataError, InvalidParameterError

logger = logging.getLogger(__name__)

MIN_OBSERVATIONS = 2


@dataclass(frozen=True)
class ReturnStatistics:
    mean: float
    stdev: float
    count: int


def compute_log_returns(prices: Sequence[float] | np.ndarray | pd.Series) -> np.ndarray:
    """Compute daily log returns from closing prices.

    Missing and non-positive prices are dropped before differencing.

    Args:
        prices: Closing prices in chronological order (oldest first).

    Returns:
        Array of len(clean_prices) - 1 daily log returns.
    """
    values = np.asarray(prices, dtype=float)
    clean = values[np.isfinite(values) & (values > 0)]
    dropped = len(values) - len(clean)
    if dropped:
        logger.warning("Dropped %d missing or non-positive prices", dropped)
    if len(clean) < 2:
        return np.array([], dtype=float)
    return np.diff(np.log(clean))


def latest_close(prices: Sequence[float] | np.ndarray | pd.Series) -> float:
    """Most recent valid closing price, the starting point of every simulation."""
    values = np.asarray(prices, dtype=float)
    valid = values[np.isfinite(values) & (values > 0)]
    if len(valid) == 0:
        raise InsufficientDataError("No valid closing price in series")
    return float(valid[-1])


def estimate_return_statistics(
    returns: Sequence[float] | np.ndarray | pd.Series,
) -> ReturnStatistics:
    """Estimate mean and unbiased (N-1) standard deviation of daily returns.

    Raises:
        InsufficientDataError: fewer than 2 observations.
        InvalidParameterError: the series contains missing or infinite values.
    """
    values = np.asarray(returns, dtype=float)
    if values.ndim != 1:
        values = values.ravel()
    if len(values) < MIN_OBSERVATIONS:
        raise InsufficientDataError(
            f"Need at least {MIN_OBSERVATIONS} returns to estimate volatility, got {len(values)}"
        )
    if not np.all(np.isfinite(values)):
        raise InvalidParameterError("Return series contains missing or infinite values")

    mean = float(np.mean(values))
    stdev = float(np.std(values, ddof=1))
    logger.debug("Return statistics: n=%d mean=%.6f stdev=%.6f", len(values), mean, stdev)
    return ReturnStatistics(mean=mean, stdev=stdev, count=len(values))
