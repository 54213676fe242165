import logging
from abc import ABC, abstractmethod
from datetime import date

import pandas as pd

from stockmodeler.api.yahoo_client import YahooClient
from stockmodeler.errors import PriceDataUnavailableError


class BaseCollector(ABC):
    """Template Method pattern for all data collectors."""

    def __init__(self, client: YahooClient):
        self.client = client
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self, ticker: str, start: date, end: date) -> pd.Series:
        """Orchestrate: fetch -> validate -> series."""
        self.logger.info(f"Collecting {self.collection_type} for {ticker} ({start} .. {end})")

        try:
            df = self.fetch(ticker, start, end)
        except Exception as e:
            self.logger.error(f"Collection failed for {ticker}: {e}", exc_info=True)
            raise

        if df is None or df.empty:
            self.logger.warning(f"No data returned for {ticker}")
            raise PriceDataUnavailableError(ticker)

        series = self.validate(ticker, df)
        if series.empty:
            self.logger.warning(f"All data filtered out after validation for {ticker}")
            raise PriceDataUnavailableError(ticker, "no valid rows after validation")

        self.logger.info(f"Collected {len(series)} rows for {ticker}")
        return series

    @property
    @abstractmethod
    def collection_type(self) -> str:
        ...

    @abstractmethod
    def fetch(self, ticker: str, start: date, end: date) -> pd.DataFrame:
        ...

    @abstractmethod
    def validate(self, ticker: str, df: pd.DataFrame) -> pd.Series:
        ...
