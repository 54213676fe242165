import logging
import time
from datetime import date

import pandas as pd
import yfinance as yf
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

logger = logging.getLogger(__name__)


class YahooClient:
    """Rate-limited, retry-enabled wrapper around yfinance."""

    def __init__(self, delay: float = 0.5, max_retries: int = 3, backoff: float = 2.0):
        self._delay = delay
        self._max_retries = max_retries
        self._backoff = backoff
        self._last_request_time: float = 0.0

    def _rate_limit(self):
        elapsed = time.monotonic() - self._last_request_time
        if elapsed < self._delay:
            time.sleep(self._delay - elapsed)
        self._last_request_time = time.monotonic()

    def _call(self, func, *args, **kwargs):
        @retry(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=self._backoff, min=2, max=60),
            retry=retry_if_exception_type((ConnectionError, TimeoutError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        def _inner():
            self._rate_limit()
            return func(*args, **kwargs)

        return _inner()

    def get_price_history(self, ticker: str, start: date, end: date) -> pd.DataFrame:
        """Get daily OHLCV (with Adj Close) for a single ticker over [start, end)."""
        df = self._call(
            yf.download,
            ticker,
            start=start.isoformat(),
            end=end.isoformat(),
            interval="1d",
            auto_adjust=False,
            progress=False,
        )
        if df is None:
            return pd.DataFrame()
        # Single-ticker downloads come back with (field, ticker) MultiIndex columns
        if isinstance(df.columns, pd.MultiIndex):
            df.columns = df.columns.get_level_values(0)
        return df
