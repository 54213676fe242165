"""Pytest configuration and shared fixtures."""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from stockmodeler.api.yahoo_client import YahooClient
from stockmodeler.collectors.prices import PriceHistoryCollector
from stockmodeler.config import SimulationConfig


def make_price_frame(
    n_days: int = 300,
    mu: float = 0.0004,
    sigma: float = 0.015,
    start_price: float = 100.0,
    seed: int = 42,
) -> pd.DataFrame:
    """yfinance-shaped daily frame with Close and Adj Close columns."""
    rng = np.random.default_rng(seed)
    returns = rng.normal(mu, sigma, n_days - 1)
    close = start_price * np.exp(np.concatenate(([0.0], np.cumsum(returns))))
    index = pd.bdate_range("2022-01-03", periods=n_days, name="Date")
    return pd.DataFrame(
        {"Open": close, "Close": close * 1.01, "Adj Close": close, "Volume": 1_000},
        index=index,
    )


class FakeYahooClient(YahooClient):
    """Serves canned frames per ticker instead of calling yfinance."""

    def __init__(self, frames: dict[str, pd.DataFrame]):
        super().__init__(delay=0.0)
        self.frames = frames
        self.calls: list[tuple[str, date, date]] = []

    def get_price_history(self, ticker, start, end):
        self.calls.append((ticker, start, end))
        return self.frames.get(ticker, pd.DataFrame())


@pytest.fixture
def sample_prices() -> pd.Series:
    """300 days of realistic adjusted closes (~24% annual vol)."""
    return make_price_frame()["Adj Close"]


@pytest.fixture
def benchmark_prices() -> pd.Series:
    return make_price_frame(mu=0.0003, sigma=0.01, start_price=350.0, seed=7)["Adj Close"]


@pytest.fixture
def small_config() -> SimulationConfig:
    return SimulationConfig(
        ticker="ROG.VX",
        benchmark_ticker="VOO",
        calibration_start=date(2022, 1, 1),
        calibration_end=date(2023, 3, 1),
        holding_horizons=(21, 63),
        trial_count=200,
        visualized_trial_count=3,
    )


@pytest.fixture
def fake_client() -> FakeYahooClient:
    return FakeYahooClient({
        "ROG.VX": make_price_frame(),
        "VOO": make_price_frame(mu=0.0003, sigma=0.01, start_price=350.0, seed=7),
    })


@pytest.fixture
def fake_collector(fake_client) -> PriceHistoryCollector:
    return PriceHistoryCollector(fake_client, min_history_days=60)


@pytest.fixture
def price_frame_factory():
    return make_price_frame


@pytest.fixture
def fake_client_factory():
    return FakeYahooClient
