"""Unit tests for the price history collector and the Yahoo client."""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from stockmodeler.api.yahoo_client import YahooClient
from stockmodeler.collectors.prices import PriceHistoryCollector, resolve_calibration_end
from stockmodeler.errors import InsufficientDataError, PriceDataUnavailableError

START, END = date(2022, 1, 1), date(2023, 3, 1)


class TestResolveCalibrationEnd:
    @pytest.mark.parametrize("today, expected", [
        (date(2024, 1, 1), date(2024, 1, 1)),   # Monday
        (date(2024, 1, 3), date(2024, 1, 1)),   # Wednesday
        (date(2024, 1, 6), date(2024, 1, 1)),   # Saturday
        (date(2024, 1, 7), date(2024, 1, 8)),   # Sunday starts a new week
    ])
    def test_monday_of_current_week(self, today, expected):
        assert resolve_calibration_end(today) == expected


class TestPriceHistoryCollector:
    def test_returns_adjusted_close_series(self, fake_collector, fake_client):
        series = fake_collector.run("ROG.VX", START, END)
        expected = fake_client.frames["ROG.VX"]["Adj Close"]
        np.testing.assert_allclose(series.to_numpy(), expected.to_numpy())
        assert series.name == "ROG.VX"
        assert fake_client.calls == [("ROG.VX", START, END)]

    def test_cleans_and_sorts(self, fake_client_factory, price_frame_factory):
        frame = price_frame_factory(n_days=80)
        frame.iloc[5, frame.columns.get_loc("Adj Close")] = np.nan
        frame.iloc[6, frame.columns.get_loc("Adj Close")] = 0.0
        shuffled = frame.sample(frac=1.0, random_state=1)
        collector = PriceHistoryCollector(fake_client_factory({"X": shuffled}), min_history_days=60)

        series = collector.run("X", START, END)
        assert len(series) == 78
        assert series.index.is_monotonic_increasing
        assert (series > 0).all()

    def test_falls_back_to_close(self, fake_client_factory, price_frame_factory):
        frame = price_frame_factory(n_days=70).drop(columns=["Adj Close"])
        collector = PriceHistoryCollector(fake_client_factory({"X": frame}), min_history_days=60)
        series = collector.run("X", START, END)
        np.testing.assert_allclose(series.to_numpy(), frame["Close"].to_numpy())

    def test_empty_download(self, fake_collector):
        with pytest.raises(PriceDataUnavailableError) as exc_info:
            fake_collector.run("NOPE", START, END)
        assert exc_info.value.ticker == "NOPE"

    def test_no_price_column(self, fake_client_factory):
        frame = pd.DataFrame({"Volume": [1, 2, 3]}, index=pd.bdate_range("2022-01-03", periods=3))
        collector = PriceHistoryCollector(fake_client_factory({"X": frame}))
        with pytest.raises(PriceDataUnavailableError):
            collector.run("X", START, END)

    def test_short_history(self, fake_client_factory, price_frame_factory):
        collector = PriceHistoryCollector(
            fake_client_factory({"X": price_frame_factory(n_days=20)}), min_history_days=60
        )
        with pytest.raises(InsufficientDataError):
            collector.run("X", START, END)


class TestYahooClient:
    def test_flattens_multiindex_columns(self, monkeypatch, price_frame_factory):
        frame = price_frame_factory(n_days=5)
        frame.columns = pd.MultiIndex.from_product([frame.columns, ["VOO"]])
        captured = {}

        def fake_download(ticker, **kwargs):
            captured.update(kwargs, ticker=ticker)
            return frame

        monkeypatch.setattr("stockmodeler.api.yahoo_client.yf.download", fake_download)
        df = YahooClient(delay=0.0).get_price_history("VOO", START, END)

        assert "Adj Close" in df.columns
        assert captured["ticker"] == "VOO"
        assert captured["start"] == "2022-01-01"
        assert captured["auto_adjust"] is False

    def test_retries_connection_errors(self, monkeypatch, price_frame_factory):
        frame = price_frame_factory(n_days=5)
        attempts = []

        def flaky_download(ticker, **kwargs):
            attempts.append(ticker)
            if len(attempts) < 2:
                raise ConnectionError("reset by peer")
            return frame

        monkeypatch.setattr("stockmodeler.api.yahoo_client.yf.download", flaky_download)
        monkeypatch.setattr("tenacity.nap.time.sleep", lambda _: None)
        df = YahooClient(delay=0.0, max_retries=3).get_price_history("VOO", START, END)

        assert len(attempts) == 2
        assert not df.empty

    def test_gives_up_after_max_retries(self, monkeypatch):
        def broken_download(ticker, **kwargs):
            raise TimeoutError("timed out")

        monkeypatch.setattr("stockmodeler.api.yahoo_client.yf.download", broken_download)
        monkeypatch.setattr("tenacity.nap.time.sleep", lambda _: None)
        with pytest.raises(TimeoutError):
            YahooClient(delay=0.0, max_retries=2).get_price_history("VOO", START, END)
