from __future__ import annotations

import numpy as np
import pandas as pd

from ..config import POTENTIAL_TREATMENTS, IVScenario
from ..dataset import Dataset
from ..streams import RandomStream


def generate_iv(scenario: IVScenario, stream: RandomStream) -> Dataset:
    """
    Draw one sample from an IV world.

    Every unit gets an instrument, a latent compliance type and two
    potential outcomes around its type's means. The world's knobs only
    change how treatment and outcome are linked to the instrument:

    - relevant instrument: ``D = D(1) if Z else D(0)`` from the compliance table
    - irrelevant instrument: ``D ~ Bernoulli(irrelevant_treatment_prob)``,
      independent of ``Z``
    - ``leakage`` shifts both potential outcomes by ``leakage * Z``

    The realized outcome is ``D * Y(1) + (1 - D) * Y(0)`` throughout.
    """
    n = scenario.n
    types = scenario.compliance_types

    # Rows follow ComplianceType order, matching the codes drawn below.
    treatment_table = np.array([POTENTIAL_TREATMENTS[t] for t in types], dtype=int)
    mean_table = np.array(scenario.outcome_mean_table, dtype=float)

    instrument = stream.binomial(scenario.instrument_prob, n)
    codes = stream.categorical(scenario.mixture_probs, n)

    d0, d1 = treatment_table[codes, 0], treatment_table[codes, 1]
    direct = scenario.leakage * instrument
    y0 = stream.normal(mean_table[codes, 0] + direct, scenario.residual_sd, n)
    y1 = stream.normal(mean_table[codes, 1] + direct, scenario.residual_sd, n)

    if scenario.instrument_relevant:
        treatment = np.where(instrument == 1, d1, d0)
    else:
        treatment = stream.binomial(scenario.irrelevant_treatment_prob, n)
    outcome = np.where(treatment == 1, y1, y0)

    frame = pd.DataFrame({
        "unit": np.arange(n),
        "instrument": instrument,
        "compliance_type": pd.Categorical.from_codes(codes, categories=[t.value for t in types]),
        "d0": d0,
        "d1": d1,
        "treatment": treatment,
        "y0": y0,
        "y1": y1,
        "outcome": outcome,
    })
    return Dataset(scenario.world, scenario.family, frame, scenario.true_effect)
