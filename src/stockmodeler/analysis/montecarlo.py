"""Monte Carlo engine: independent terminal-price trials.

Every trial draws from its own child of a root ``SeedSequence``. Children
depend only on the root entropy and their spawn index, so:

- trials never share random state, serially or across worker processes;
- raising ``trial_count`` under a fixed seed appends trials and leaves the
  already-drawn ones unchanged.
"""

import logging
from concurrent.futures import ProcessPoolExecutor

import numpy as np

from stockmodeler.analysis.sim_models import SimulationParameters
from stockmodeler.analysis.sim_models.random_walk import simulate_closing_price

logger = logging.getLogger(__name__)

# Below this many trials per worker the process start-up cost dominates
MIN_TRIALS_PER_WORKER = 100


def _run_trials_worker(
    params: SimulationParameters,
    seeds: list[np.random.SeedSequence],
) -> np.ndarray:
    """Picklable worker for ProcessPoolExecutor.

    Args:
        params: Shared read-only simulation parameters.
        seeds: One child seed sequence per trial in this chunk.

    Returns:
        Terminal prices in the same order as ``seeds``.
    """
    return np.array(
        [simulate_closing_price(params, np.random.default_rng(s)) for s in seeds],
        dtype=float,
    )


def simulate_terminal_prices(
    params: SimulationParameters,
    seed: int | None = None,
    max_workers: int = 1,
) -> np.ndarray:
    """Build the terminal price distribution for one (instrument, horizon).

    Args:
        params: Validated simulation parameters; ``trial_count`` sets the
            number of independent trials.
        seed: Root seed. ``None`` draws fresh OS entropy.
        max_workers: Worker processes to spread trials over (1 = serial).

    Returns:
        Array of ``trial_count`` terminal prices in trial-index order.
    """
    children = np.random.SeedSequence(seed).spawn(params.trial_count)

    workers = min(max_workers, params.trial_count // MIN_TRIALS_PER_WORKER)
    if workers <= 1:
        terminal = _run_trials_worker(params, children)
    else:
        bounds = np.linspace(0, params.trial_count, workers + 1).astype(int)
        chunks = [children[lo:hi] for lo, hi in zip(bounds[:-1], bounds[1:])]
        logger.debug(
            "Running %d trials over %d days with %d workers",
            params.trial_count, params.horizon_days, workers,
        )
        with ProcessPoolExecutor(max_workers=workers) as executor:
            parts = list(executor.map(_run_trials_worker, [params] * len(chunks), chunks))
        terminal = np.concatenate(parts)

    non_positive = int(np.sum(terminal <= 0))
    if non_positive:
        logger.warning(
            "%d of %d simulated terminal prices are non-positive (volatility %.4f)",
            non_positive, params.trial_count, params.daily_volatility,
        )
    return terminal
