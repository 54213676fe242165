"""Unit tests for settings and the explicit run configuration."""

from datetime import date

import pytest

from stockmodeler.config import (
    DEFAULT_HOLDING_HORIZONS,
    Settings,
    SimulationConfig,
    percentile_grid,
)
from stockmodeler.errors import InvalidParameterError


def _config(**kwargs) -> SimulationConfig:
    base = dict(
        ticker="ROG.VX",
        benchmark_ticker="VOO",
        calibration_start=date(2014, 6, 1),
        calibration_end=date(2019, 3, 4),
    )
    base.update(kwargs)
    return SimulationConfig(**base)


class TestSimulationConfig:
    def test_defaults(self):
        config = _config()
        assert config.holding_horizons == DEFAULT_HOLDING_HORIZONS == tuple(252 * y for y in range(1, 9))
        assert config.trial_count == 500
        assert config.visualized_trial_count == 7
        assert config.loss_curve_percentiles is None

    @pytest.mark.parametrize("kwargs", [
        {"holding_horizons": ()},
        {"holding_horizons": (252, 0)},
        {"holding_horizons": (21, 21, 63)},
        {"trial_count": 0},
        {"visualized_trial_count": -1},
        {"max_workers": 0},
        {"report_percentiles": (0.5, 1.2)},
        {"loss_curve_percentiles": ()},
        {"calibration_end": date(2014, 6, 1)},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(InvalidParameterError):
            _config(**kwargs)

    def test_with_overrides_skips_none(self):
        config = _config().with_overrides(ticker="AAPL", trial_count=None)
        assert config.ticker == "AAPL"
        assert config.trial_count == 500

    def test_with_overrides_validates(self):
        with pytest.raises(InvalidParameterError):
            _config().with_overrides(trial_count=0)

    def test_fine_loss_grid_is_opt_in(self):
        config = _config(loss_curve_percentiles=percentile_grid(0.01))
        assert config.loss_curve_percentiles[0] == 0.0
        assert config.loss_curve_percentiles[-1] == 1.0


class TestPercentileGrid:
    def test_hundredths(self):
        grid = percentile_grid(0.01)
        assert len(grid) == 101
        assert grid[33] == 0.33

    @pytest.mark.parametrize("step", [0.0, -0.1, 1.5])
    def test_invalid_step(self, step):
        with pytest.raises(InvalidParameterError):
            percentile_grid(step)


class TestSettings:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SM_TICKER", "MSFT")
        monkeypatch.setenv("SM_SIMULATION_TRIAL_COUNT", "1500")
        monkeypatch.setenv("SM_HOLDING_HORIZONS", "[252, 504]")
        settings = Settings(_env_file=None)
        assert settings.ticker == "MSFT"
        assert settings.simulation_trial_count == 1500
        assert settings.holding_horizons == [252, 504]

    def test_simulation_config_resolves_end_date(self):
        settings = Settings(_env_file=None, calibration_end=None)
        config = settings.simulation_config(today=date(2024, 1, 3))
        assert config.calibration_end == date(2024, 1, 1)
        assert config.calibration_start == date(2014, 6, 1)

    def test_simulation_config_overrides(self):
        settings = Settings(_env_file=None, calibration_end="2020-01-06")
        config = settings.simulation_config(ticker="AAPL", holding_horizons=(21,), trial_count=None)
        assert config.ticker == "AAPL"
        assert config.holding_horizons == (21,)
        assert config.calibration_end == date(2020, 1, 6)
        assert config.trial_count == settings.simulation_trial_count

    def test_loss_curve_step_builds_grid(self):
        settings = Settings(_env_file=None, calibration_end="2020-01-06", loss_curve_step=0.05)
        config = settings.simulation_config()
        assert len(config.loss_curve_percentiles) == 21

    def test_loss_curve_step_unset_by_default(self):
        settings = Settings(_env_file=None, calibration_end="2020-01-06")
        assert settings.simulation_config().loss_curve_percentiles is None
