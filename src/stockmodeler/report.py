"""Tabular views of a modeling run for the reporting collaborator.

Every function returns a pandas DataFrame; rendering (console, CSV,
charts) is left to the caller.
"""

import pandas as pd

from stockmodeler.analysis.simulation import InstrumentReport, ModelingReport
from stockmodeler.config import TRADING_DAYS_PER_YEAR


def _percentile_label(rank: float) -> str:
    return f"{rank * 100:g}%"


def horizon_table(instrument: InstrumentReport) -> pd.DataFrame:
    """One row per (horizon, report percentile)."""
    rows = [
        {
            "ticker": instrument.ticker,
            "horizon_days": r.horizon_days,
            "years": r.horizon_days / TRADING_DAYS_PER_YEAR,
            "percentile": r.percentile,
            "start_price": r.start_price,
            "final_price": r.final_price,
            "fold_change": r.fold_change,
            "return_pct": r.return_pct,
        }
        for sim in instrument.horizons.values()
        for r in sim.results
    ]
    return pd.DataFrame(rows)


def comparison_table(report: ModelingReport, horizon: int | None = None) -> pd.DataFrame:
    """Primary final price and price change next to the benchmark's change.

    Defaults to the longest horizon.
    """
    if horizon is None:
        horizon = max(report.primary.horizons)
    primary = report.primary.horizons[horizon].results
    benchmark = report.benchmark.horizons[horizon].results

    p_ticker, b_ticker = report.primary.ticker, report.benchmark.ticker
    return pd.DataFrame({
        "Percentile": [_percentile_label(r.percentile) for r in primary],
        f"{p_ticker} Final Price ($)": [round(r.final_price, 2) for r in primary],
        f"{p_ticker} Price change (%)": [round(r.return_pct, 1) for r in primary],
        f"{b_ticker} Price change (%)": [round(r.return_pct, 1) for r in benchmark],
    })


def loss_curve_table(report: ModelingReport) -> pd.DataFrame:
    """Probability of loss per horizon; missing lookups stay missing (NA)."""
    benchmark = {p.horizon_days: p.loss_probability for p in report.benchmark.loss_curve}
    rows = [
        {
            "horizon_days": point.horizon_days,
            "years": point.horizon_days / TRADING_DAYS_PER_YEAR,
            report.primary.ticker: point.loss_probability,
            report.benchmark.ticker: benchmark.get(point.horizon_days),
        }
        for point in report.primary.loss_curve
    ]
    return pd.DataFrame(rows).astype(
        {report.primary.ticker: "Float64", report.benchmark.ticker: "Float64"}
    )


def risk_table(report: ModelingReport) -> pd.DataFrame:
    rows = [
        {
            "ticker": inst.ticker,
            "start_price": inst.initial_price,
            "observations": inst.statistics.count,
            "mean_daily_return": inst.risk.mean,
            "stdev_daily_return": inst.risk.stdev,
            "reward_risk_ratio": inst.risk.reward_risk_ratio,
        }
        for inst in (report.primary, report.benchmark)
    ]
    return pd.DataFrame(rows)
