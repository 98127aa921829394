from __future__ import annotations

import logging
import time
from dataclasses import asdict
from typing import Iterable

import pandas as pd

from .estimators import Method
from .montecarlo import BiasResult, MonteCarloRunner
from .worlds import get_world

logger = logging.getLogger(__name__)

DEFAULT_STUDY: list[tuple[str, Method]] = [
    ("did_parallel", Method.DID_REGRESSION),
    ("did_parallel", Method.DID_SIMPLE),
    ("did_divergent", Method.DID_REGRESSION),
    ("did_divergent", Method.DID_SIMPLE),
    ("iv_a", Method.AS_TREATED),
    ("iv_a", Method.TSLS),
    ("iv_b", Method.AS_TREATED),
    ("iv_b", Method.TSLS),
    ("iv_c", Method.AS_TREATED),
    ("iv_c", Method.TSLS),
]


def run_study(
    pairs: Iterable[tuple[str, Method | str]] = DEFAULT_STUDY,
    n_reps: int = 1000,
    seed: int = 0,
    n_jobs: int = 1,
    n: int | None = None,
) -> list[BiasResult]:
    """
    Run a Monte Carlo bias evaluation for each ``(world, method)`` pair.

    Every pair uses the same run seed, so the worlds are compared on the
    same sequence of streams. ``n`` overrides the sample size of every world.
    """
    overrides = {} if n is None else {"n": n}
    results = []
    t0 = time.perf_counter()
    for world, method in pairs:
        runner = MonteCarloRunner(get_world(world, **overrides), method)
        results.append(runner.simulate(n_reps=n_reps, seed=seed, n_jobs=n_jobs))
    logger.info("Study finished: %d pairs in %.1fs", len(results), time.perf_counter() - t0)
    return results


def bias_table(results: Iterable[BiasResult]) -> pd.DataFrame:
    """One row per ``BiasResult``, for report formatting or plotting."""
    return pd.DataFrame([asdict(r) for r in results])
