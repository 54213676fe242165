import logging
from datetime import datetime
from pathlib import Path

import click

from stockmodeler.config import Settings
from stockmodeler.errors import StockModelerError
from stockmodeler.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _parse_date(value: str | None):
    return datetime.strptime(value, "%Y-%m-%d").date() if value else None


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool):
    """Stock Modeler - Monte Carlo price simulation against a benchmark"""
    setup_logging(console_level="DEBUG" if verbose else "INFO")


@cli.command()
@click.option("--ticker", "-t", default=None, help="Ticker to model (default: SM_TICKER)")
@click.option("--benchmark", "-b", default=None, help="Benchmark ticker (default: SM_BENCHMARK_TICKER)")
@click.option("--start", "-s", "start_date", default=None,
              help="Calibration start date in YYYY-MM-DD format")
@click.option("--end", "-e", "end_date", default=None,
              help="Calibration end date in YYYY-MM-DD format (default: Monday of this week)")
@click.option("--horizon", "-H", "horizons", multiple=True, type=click.IntRange(min=1),
              help="Holding horizon in trading days (repeatable)")
@click.option("--trials", "-n", type=click.IntRange(min=1), default=None,
              help="Monte Carlo trials per horizon")
@click.option("--visualize", "-k", type=click.IntRange(min=0), default=None,
              help="Number of illustrative sample paths")
@click.option("--seed", type=int, default=None, help="Random seed for reproducible runs")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None,
              help="Worker processes for Monte Carlo trials")
@click.option("--export", "export_dir", type=click.Path(file_okay=False, path_type=Path),
              default=None, help="Directory to write CSV tables and sample paths")
def simulate(ticker, benchmark, start_date, end_date, horizons, trials, visualize, seed,
             workers, export_dir):
    """Fetch price history and run the multi-horizon simulation."""
    from stockmodeler import report as tables
    from stockmodeler.pipeline import build_collector, run_pipeline

    settings = Settings()
    try:
        config = settings.simulation_config(
            ticker=ticker,
            benchmark_ticker=benchmark,
            calibration_start=_parse_date(start_date),
            calibration_end=_parse_date(end_date),
            holding_horizons=tuple(horizons) or None,
            trial_count=trials,
            visualized_trial_count=visualize,
            max_workers=workers,
        )
        result = run_pipeline(
            config,
            build_collector(settings),
            seed=seed if seed is not None else settings.simulation_seed,
        )
    except StockModelerError as e:
        raise click.ClickException(str(e)) from e

    click.echo(
        f"Modeling {config.ticker} vs {config.benchmark_ticker} "
        f"({config.calibration_start} .. {config.calibration_end}), "
        f"{config.trial_count} trials per horizon\n"
    )

    outputs = {
        "risk": tables.risk_table(result),
        "comparison": tables.comparison_table(result),
        "loss_curve": tables.loss_curve_table(result),
        "horizons": tables.horizon_table(result.primary),
        "benchmark_horizons": tables.horizon_table(result.benchmark),
    }

    click.echo("Reward / risk:")
    click.echo(outputs["risk"].to_string(index=False))
    click.echo(f"\nOutcome after {max(config.holding_horizons)} trading days:")
    click.echo(outputs["comparison"].to_string(index=False))
    click.echo("\nProbability of loss by holding length:")
    click.echo(outputs["loss_curve"].to_string(index=False))

    if export_dir is not None:
        export_dir.mkdir(parents=True, exist_ok=True)
        outputs["sample_paths"] = result.sample_paths
        for name, frame in outputs.items():
            frame.to_csv(export_dir / f"{name}.csv", index=False)
        click.echo(f"\nExported {len(outputs)} tables to {export_dir}")


@cli.command()
@click.option("--host", default=None, help="Bind address (default: SM_API_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: SM_API_PORT)")
def serve(host: str | None, port: int | None):
    """Start the HTTP API server."""
    import uvicorn

    from stockmodeler.web.app import create_app

    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host=host or settings.api_host,
        port=port or settings.api_port,
    )


if __name__ == "__main__":
    cli()
