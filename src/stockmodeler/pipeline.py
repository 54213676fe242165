import logging

from stockmodeler.analysis.simulation import ModelingReport, run_comparison
from stockmodeler.api.yahoo_client import YahooClient
from stockmodeler.collectors.prices import PriceHistoryCollector
from stockmodeler.config import Settings, SimulationConfig

logger = logging.getLogger(__name__)


def build_collector(settings: Settings) -> PriceHistoryCollector:
    client = YahooClient(
        delay=settings.yahoo_request_delay,
        max_retries=settings.yahoo_max_retries,
        backoff=settings.yahoo_retry_backoff,
    )
    return PriceHistoryCollector(client, min_history_days=settings.min_history_days)


def run_pipeline(
    config: SimulationConfig,
    collector: PriceHistoryCollector,
    seed: int | None = None,
) -> ModelingReport:
    """Master job: fetch both price histories, then model them side by side."""
    start, end = config.calibration_start, config.calibration_end

    primary_prices = collector.run(config.ticker, start, end)
    benchmark_prices = collector.run(config.benchmark_ticker, start, end)

    report = run_comparison(primary_prices, benchmark_prices, config, seed=seed)
    logger.info(
        "Modeling complete: %s vs %s over %d horizons",
        config.ticker, config.benchmark_ticker, len(config.holding_horizons),
    )
    return report
