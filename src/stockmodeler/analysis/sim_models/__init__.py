"""Monte Carlo simulation models package.

Provides the value types shared by the random-walk simulator, the
Monte Carlo engine and the percentile summarizer:
- SimulationParameters: validated inputs for one (ticker, horizon) run
- HorizonResult: one percentile row of a terminal price distribution
- LossProbability: one point of the probability-of-loss curve
"""

import math
from dataclasses import dataclass

from stockmodeler.errors import InvalidParameterError


@dataclass(frozen=True)
class SimulationParameters:
    initial_price: float
    daily_drift: float
    daily_volatility: float
    horizon_days: int
    trial_count: int = 1

    def __post_init__(self):
        for name in ("initial_price", "daily_drift", "daily_volatility"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidParameterError(f"{name} must be finite, got {getattr(self, name)}")
        if self.initial_price <= 0:
            raise InvalidParameterError(f"initial_price must be positive, got {self.initial_price}")
        if self.daily_volatility < 0:
            raise InvalidParameterError(
                f"daily_volatility must be non-negative, got {self.daily_volatility}"
            )
        if self.horizon_days < 1:
            raise InvalidParameterError(f"horizon_days must be >= 1, got {self.horizon_days}")
        if self.trial_count < 1:
            raise InvalidParameterError(f"trial_count must be >= 1, got {self.trial_count}")


@dataclass(frozen=True)
class HorizonResult:
    percentile: float
    horizon_days: int
    start_price: float
    final_price: float
    fold_change: float  # (final - start) / start

    @property
    def return_pct(self) -> float:
        return 100.0 * self.fold_change


@dataclass(frozen=True)
class LossProbability:
    horizon_days: int
    loss_probability: float | None  # None: no percentile with a positive fold change


__all__ = ["SimulationParameters", "HorizonResult", "LossProbability"]
