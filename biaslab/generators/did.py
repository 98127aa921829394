from __future__ import annotations

import numpy as np
import pandas as pd

from ..config import DiDScenario
from ..dataset import Dataset
from ..streams import RandomStream


def generate_did(scenario: DiDScenario, stream: RandomStream) -> Dataset:
    """
    Draw one two-period sample from a DID world.

    Assignment is the deterministic threshold rule
    ``treatment = 1[pre_outcome >= threshold]``; the only randomness is in
    the baseline, the covariate and the potential outcomes. ``Y(0)`` and
    ``Y(1)`` get independent noise, and the realized ``outcome`` is the one
    selected by the unit's own assignment.
    """
    n = scenario.n

    pre_outcome = stream.normal(scenario.pre_mean, scenario.pre_sd, n)
    population = stream.normal(scenario.population_mean, scenario.population_sd, n)
    treatment = (pre_outcome >= scenario.threshold).astype(int)

    baseline = scenario.intercept + scenario.trend_slope * pre_outcome
    y0 = stream.normal(baseline, scenario.outcome_sd, n)
    y1 = stream.normal(baseline + scenario.effect, scenario.outcome_sd, n)
    outcome = np.where(treatment == 1, y1, y0)

    frame = pd.DataFrame({
        "unit": np.arange(n),
        "population": population,
        "pre_outcome": pre_outcome,
        "treatment": treatment,
        "y0": y0,
        "y1": y1,
        "outcome": outcome,
    })
    return Dataset(scenario.world, scenario.family, frame, scenario.true_effect)
