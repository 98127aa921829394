from __future__ import annotations

import logging
import math
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Callable, Sequence

import numpy as np

from .dataset import Dataset
from .estimators import Estimator, EstimationResult, Method, get_estimator
from .generators import Scenario, generate
from .streams import RandomStream

logger = logging.getLogger(__name__)

_PROGRESS_EVERY = 1000


@dataclass(frozen=True, repr=False)
class BiasResult:
    """
    Summary of a Monte Carlo run for one (world, method) pair.

    ``bias`` is the mean estimate minus the configured true effect.
    ``median_std_err`` is reported instead of a mean because near-degenerate
    IV fits have heavy-tailed (and occasionally infinite) standard errors.
    ``n_unreliable`` counts repetitions whose fit failed a diagnostic or was
    degenerate; they are included in every other statistic.
    """

    world: str
    method: str
    true_effect: float
    n_reps: int
    mean_estimate: float
    bias: float
    sd: float
    rmse: float
    median_std_err: float
    coverage: float
    n_unreliable: int

    def summary(self) -> str:
        lines = [
            "",
            f"Monte Carlo bias: {self.method} in world {self.world}  (R = {self.n_reps})",
            "─" * 50,
            f"  True effect          : {self.true_effect:>10.4f}",
            f"  Mean estimate        : {self.mean_estimate:>10.4f}",
            f"  Bias                 : {self.bias:>+10.4f}",
            f"  SD of estimates      : {self.sd:>10.4f}",
            f"  RMSE                 : {self.rmse:>10.4f}",
            f"  Median std. error    : {self.median_std_err:>10.4f}",
            f"  95% CI coverage      : {self.coverage:>10.1%}",
        ]
        if self.n_unreliable:
            lines.append(f"  Unreliable fits      : {self.n_unreliable:>10d}  (failed diagnostics)")
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()


def summarize(results: Sequence[EstimationResult], true_effect: float) -> BiasResult:
    """
    Reduce per-repetition results into a ``BiasResult``.

    Every statistic is a symmetric function of the results, so the order in
    which repetitions finished does not matter.
    """
    if not results:
        raise ValueError("Cannot summarize an empty list of results.")

    worlds = {r.world for r in results}
    methods = {r.method for r in results}
    if len(worlds) > 1 or len(methods) > 1:
        raise ValueError(
            f"Results mix worlds {sorted(worlds)} or methods {sorted(methods)}; "
            f"summarize one (world, method) pair at a time."
        )

    est = np.array([r.estimate for r in results], dtype=float)
    se = np.array([r.std_err for r in results], dtype=float)
    diff = est - true_effect

    mean_est = float(est.mean())
    return BiasResult(
        world=worlds.pop(),
        method=methods.pop(),
        true_effect=float(true_effect),
        n_reps=len(est),
        mean_estimate=mean_est,
        bias=mean_est - float(true_effect),
        sd=float(est.std(ddof=1)) if len(est) > 1 else 0.0,
        rmse=float(np.sqrt((diff ** 2).mean())),
        median_std_err=float(np.median(se)),
        coverage=float(np.mean([r.covers(true_effect) for r in results])),
        n_unreliable=sum(not r.reliable for r in results),
    )


def run_repetition(
    index: int,
    scenario: Scenario,
    estimator: Estimator,
    seed: int,
    generator: Callable[[Scenario, RandomStream], Dataset] = generate,
) -> EstimationResult:
    """One generate-then-estimate cycle on the stream for repetition ``index``."""
    dataset = generator(scenario, RandomStream.for_repetition(seed, index))
    return estimator.fit(dataset)


class MonteCarloRunner:
    """
    Monte Carlo bias evaluation for one scenario and one estimator.

    Each repetition generates a fresh dataset from its own stream, derived
    from the run seed and the repetition index, and fits the estimator to
    it. Nothing is carried between repetitions, so they can run in a
    process pool; the result is the same as a sequential run.

    Parameters
    ----------
    scenario
        The world to sample from.
    estimator
        An estimator instance, ``Method`` member, or method name.
    generator
        ``(scenario, stream) -> Dataset``. Defaults to the family
        dispatcher; any picklable callable can be substituted.

    Example::

        runner = MonteCarloRunner(get_world("iv_a"), "tsls")
        result = runner.simulate(n_reps=1000, seed=42)
        print(result.summary())
    """

    def __init__(
        self,
        scenario: Scenario,
        estimator: Estimator | Method | str,
        generator: Callable[[Scenario, RandomStream], Dataset] = generate,
    ) -> None:
        self.scenario = scenario
        self.estimator = get_estimator(estimator)
        self.generator = generator

    @property
    def true_effect(self) -> float:
        return self.scenario.true_effect

    def replicate(self, n_reps: int = 1000, seed: int = 0, n_jobs: int = 1) -> list[EstimationResult]:
        """
        Run ``n_reps`` independent repetitions and return every result in
        repetition order.

        ``n_jobs > 1`` spreads repetitions over a process pool.
        """
        if n_reps <= 0:
            raise ValueError(f"n_reps must be positive, got {n_reps}.")
        if n_jobs <= 0:
            raise ValueError(f"n_jobs must be positive, got {n_jobs}.")

        logger.info(
            "Running %d repetitions of %s in world %s (seed=%d, n_jobs=%d)",
            n_reps, self.estimator.name, self.scenario.world, seed, n_jobs,
        )
        task = partial(
            run_repetition,
            scenario=self.scenario,
            estimator=self.estimator,
            seed=seed,
            generator=self.generator,
        )

        if n_jobs == 1:
            results = []
            for r in range(n_reps):
                results.append(task(r))
                if (r + 1) % _PROGRESS_EVERY == 0:
                    logger.info("  %d/%d repetitions done", r + 1, n_reps)
        else:
            chunksize = max(1, math.ceil(n_reps / (4 * n_jobs)))
            with ProcessPoolExecutor(max_workers=n_jobs) as executor:
                results = list(executor.map(task, range(n_reps), chunksize=chunksize))

        n_unreliable = sum(not r.reliable for r in results)
        if n_unreliable:
            logger.info(
                "%d/%d repetitions of %s in world %s failed diagnostics",
                n_unreliable, n_reps, self.estimator.name, self.scenario.world,
            )
        return results

    def simulate(self, n_reps: int = 1000, seed: int = 0, n_jobs: int = 1) -> BiasResult:
        """Run ``n_reps`` repetitions and summarise them against the true effect."""
        return summarize(self.replicate(n_reps, seed, n_jobs), self.true_effect)
