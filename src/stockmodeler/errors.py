"""Exception hierarchy for Stock Modeler."""


class StockModelerError(Exception):
    """Base class for all Stock Modeler errors."""


class InsufficientDataError(StockModelerError):
    """Calibration history is too short to estimate return statistics."""


class InvalidParameterError(StockModelerError, ValueError):
    """A simulation parameter is out of its valid range."""


class UndefinedPercentileLookupError(StockModelerError):
    """No requested percentile yields a positive fold change."""

    def __init__(self, horizon_days: int | None = None):
        self.horizon_days = horizon_days
        where = f" for horizon {horizon_days}d" if horizon_days is not None else ""
        super().__init__(f"No percentile with a positive fold change{where}")


class PriceDataUnavailableError(StockModelerError):
    """The data provider returned no usable prices for a ticker."""

    def __init__(self, ticker: str, reason: str = "no data returned"):
        self.ticker = ticker
        self.reason = reason
        super().__init__(f"Price data unavailable for {ticker}: {reason}")
