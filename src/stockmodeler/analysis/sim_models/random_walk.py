"""Random-walk price path simulation.

Two recurrences are used on purpose:

- cumulative product ``price_t = price_{t-1} * (1 + d_t)`` drives every
  Monte Carlo terminal price and therefore every reported percentile;
- exponential ``price_t = price_{t-1} * exp(d_t)`` is used only for the
  illustrative sample paths handed to chart renderers.

They diverge for large ``|d|``; do not substitute one for the other.
"""

import logging

import numpy as np
import pandas as pd

from . import SimulationParameters
from stockmodeler.errors import InvalidParameterError

logger = logging.getLogger(__name__)


def _draw_deltas(params: SimulationParameters, rng: np.random.Generator) -> np.ndarray:
    return rng.normal(params.daily_drift, params.daily_volatility, params.horizon_days)


def simulate_path(params: SimulationParameters, rng: np.random.Generator) -> np.ndarray:
    """Simulate one price path of ``horizon_days + 1`` prices.

    The path starts at ``initial_price``; each step multiplies the previous
    price by ``1 + d`` with ``d ~ Normal(daily_drift, daily_volatility)``.
    """
    deltas = _draw_deltas(params, rng)
    return np.cumprod(np.concatenate(([params.initial_price], 1.0 + deltas)))


def simulate_closing_price(params: SimulationParameters, rng: np.random.Generator) -> float:
    """Simulate the terminal price after ``horizon_days`` steps.

    May be <= 0 when volatility is large and draws are extreme; such values
    are returned as-is.
    """
    return float(simulate_path(params, rng)[-1])


def simulate_random_walks(
    initial_price: float,
    daily_drift: float,
    daily_volatility: float,
    horizon_days: int,
    path_count: int,
    rng: np.random.Generator,
) -> pd.DataFrame:
    """Generate illustrative log-normal price paths for visualization.

    Args:
        initial_price: Starting price shared by every path.
        daily_drift: Mean of the daily log return.
        daily_volatility: Standard deviation of the daily log return.
        horizon_days: Number of simulated trading days.
        path_count: Number of paths to draw.
        rng: NumPy random generator.

    Returns:
        Long-format DataFrame with columns ``day`` (0..horizon_days),
        ``price`` and ``trial`` (1..path_count).
    """
    if path_count < 0:
        raise InvalidParameterError(f"path_count must be non-negative, got {path_count}")
    # Reuse the parameter validation for price, volatility and horizon
    SimulationParameters(initial_price, daily_drift, daily_volatility, horizon_days)

    if path_count == 0:
        return pd.DataFrame({"day": [], "price": [], "trial": []})

    deltas = rng.normal(daily_drift, daily_volatility, (path_count, horizon_days))
    log_paths = np.cumsum(deltas, axis=1)
    paths = initial_price * np.exp(np.hstack([np.zeros((path_count, 1)), log_paths]))

    days = np.arange(horizon_days + 1)
    frame = pd.DataFrame({
        "day": np.tile(days, path_count),
        "price": paths.ravel(),
        "trial": np.repeat(np.arange(1, path_count + 1), horizon_days + 1),
    })
    logger.debug("Generated %d illustrative paths over %d days", path_count, horizon_days)
    return frame
