import logging
from datetime import date, timedelta

import pandas as pd

from stockmodeler.api.yahoo_client import YahooClient
from stockmodeler.collectors.base import BaseCollector
from stockmodeler.errors import InsufficientDataError, PriceDataUnavailableError

logger = logging.getLogger(__name__)

# Preferred price column first
PRICE_COLUMNS = ("Adj Close", "Close")


def resolve_calibration_end(today: date) -> date:
    """Monday of the current week, with weeks starting on Sunday."""
    days_since_sunday = (today.weekday() + 1) % 7
    return today - timedelta(days=days_since_sunday) + timedelta(days=1)


class PriceHistoryCollector(BaseCollector):
    """Collects the adjusted daily closing price history of one ticker."""

    def __init__(self, client: YahooClient, min_history_days: int = 60):
        super().__init__(client)
        self.min_history_days = min_history_days

    @property
    def collection_type(self) -> str:
        return "adjusted_close"

    def fetch(self, ticker: str, start: date, end: date) -> pd.DataFrame:
        return self.client.get_price_history(ticker, start, end)

    def validate(self, ticker: str, df: pd.DataFrame) -> pd.Series:
        column = next((c for c in PRICE_COLUMNS if c in df.columns), None)
        if column is None:
            raise PriceDataUnavailableError(ticker, f"no price column in {list(df.columns)}")
        if column != PRICE_COLUMNS[0]:
            logger.warning("%s: no adjusted close, falling back to %s", ticker, column)

        series = pd.to_numeric(df[column], errors="coerce")
        series.index = pd.to_datetime(series.index)
        series = series.sort_index()

        # Drop missing and non-positive closes (halted/bad ticks)
        series = series[series.notna() & (series > 0)]
        series.name = ticker

        if not series.empty and len(series) < self.min_history_days:
            raise InsufficientDataError(
                f"{ticker}: {len(series)} trading days of history (need {self.min_history_days})"
            )
        return series
