from dataclasses import dataclass, replace
from datetime import date

import numpy as np
from pydantic_settings import BaseSettings, SettingsConfigDict

from stockmodeler.errors import InvalidParameterError

TRADING_DAYS_PER_YEAR = 252

DEFAULT_HOLDING_HORIZONS = tuple(TRADING_DAYS_PER_YEAR * years for years in range(1, 9))
DEFAULT_REPORT_PERCENTILES = (0.10, 0.25, 0.33, 0.50, 0.66, 0.75, 0.90)


def percentile_grid(step: float) -> tuple[float, ...]:
    """Evenly spaced percentile ranks from 0 to 1 inclusive."""
    if not 0 < step <= 1:
        raise InvalidParameterError(f"Percentile grid step must be in (0, 1], got {step}")
    count = int(round(1.0 / step))
    return tuple(float(round(p, 10)) for p in np.linspace(0.0, 1.0, count + 1))


@dataclass(frozen=True)
class SimulationConfig:
    """Explicit configuration for one modeling run."""

    ticker: str
    benchmark_ticker: str
    calibration_start: date
    calibration_end: date
    holding_horizons: tuple[int, ...] = DEFAULT_HOLDING_HORIZONS
    trial_count: int = 500
    visualized_trial_count: int = 7
    report_percentiles: tuple[float, ...] = DEFAULT_REPORT_PERCENTILES
    # Optional finer grid for the loss curve; None reads it off report_percentiles
    loss_curve_percentiles: tuple[float, ...] | None = None
    max_workers: int = 1

    def __post_init__(self):
        if not self.holding_horizons:
            raise InvalidParameterError("At least one holding horizon is required")
        if any(h < 1 for h in self.holding_horizons):
            raise InvalidParameterError(f"Holding horizons must be >= 1, got {self.holding_horizons}")
        if len(set(self.holding_horizons)) != len(self.holding_horizons):
            raise InvalidParameterError(f"Holding horizons must be unique, got {self.holding_horizons}")
        if self.trial_count < 1:
            raise InvalidParameterError(f"trial_count must be >= 1, got {self.trial_count}")
        if self.visualized_trial_count < 0:
            raise InvalidParameterError(
                f"visualized_trial_count must be >= 0, got {self.visualized_trial_count}"
            )
        if self.max_workers < 1:
            raise InvalidParameterError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.calibration_start >= self.calibration_end:
            raise InvalidParameterError(
                f"Calibration window is empty: {self.calibration_start} .. {self.calibration_end}"
            )
        for name in ("report_percentiles", "loss_curve_percentiles"):
            ranks = getattr(self, name)
            if ranks is None and name == "loss_curve_percentiles":
                continue
            if not ranks or any(not 0 <= p <= 1 for p in ranks):
                raise InvalidParameterError(f"{name} must be non-empty ranks in [0, 1], got {ranks}")

    def with_overrides(self, **overrides) -> "SimulationConfig":
        """Copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SM_",
    )

    # Modeling
    ticker: str = "ROG.VX"
    benchmark_ticker: str = "VOO"
    calibration_start: str = "2014-06-01"
    calibration_end: str | None = None  # default: Monday of the current week
    holding_horizons: list[int] = list(DEFAULT_HOLDING_HORIZONS)
    report_percentiles: list[float] = list(DEFAULT_REPORT_PERCENTILES)
    loss_curve_step: float | None = None  # e.g. 0.01 for a finer loss curve

    # Monte Carlo simulation
    simulation_trial_count: int = 500
    simulation_visualized_trials: int = 7
    simulation_seed: int | None = None
    simulation_max_workers: int = 1

    # Data provider
    yahoo_request_delay: float = 0.5
    yahoo_max_retries: int = 3
    yahoo_retry_backoff: float = 2.0
    min_history_days: int = 60

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    def simulation_config(self, today: date | None = None, **overrides) -> SimulationConfig:
        """Build the explicit run configuration, applying non-None overrides."""
        from stockmodeler.collectors.prices import resolve_calibration_end

        end = (
            date.fromisoformat(self.calibration_end)
            if self.calibration_end
            else resolve_calibration_end(today or date.today())
        )
        config = SimulationConfig(
            ticker=self.ticker,
            benchmark_ticker=self.benchmark_ticker,
            calibration_start=date.fromisoformat(self.calibration_start),
            calibration_end=end,
            holding_horizons=tuple(self.holding_horizons),
            trial_count=self.simulation_trial_count,
            visualized_trial_count=self.simulation_visualized_trials,
            report_percentiles=tuple(self.report_percentiles),
            loss_curve_percentiles=(
                percentile_grid(self.loss_curve_step) if self.loss_curve_step else None
            ),
            max_workers=self.simulation_max_workers,
        )
        return config.with_overrides(**overrides)
