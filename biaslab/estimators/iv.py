from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.sandbox.regression.gmm import IV2SLS as _IV2SLS

from ..dataset import Dataset
from ..diagnostics import (
    Assumption,
    check_first_stage_f,
    degenerate_first_stage,
    first_stage_covariance,
)
from ._result import EstimationResult, result_from_fit
from ._validate import require_binary, require_columns

logger = logging.getLogger(__name__)

IV_ASSUMPTIONS: list[Assumption] = [
    Assumption("Relevance: the instrument strongly affects treatment", testable=True),
    Assumption("Exclusion restriction: instrument only affects outcome through treatment", testable=False),
    Assumption("Independence: instrument is uncorrelated with unobserved confounders", testable=False),
    Assumption("Monotonicity: instrument affects treatment in same direction for everyone", testable=False),
]

_ZERO_COVARIANCE = 1e-12


class TwoStageLeastSquares:
    """
    Instrumental Variables estimator using Two-Stage Least Squares (2SLS).

    Uses ``instrument`` as the excluded instrument for ``treatment`` in
    ``outcome ~ treatment``. With a single binary instrument this is the
    Wald ratio (reduced form over first stage), and under relevance,
    independence, monotonicity and the exclusion restriction it targets
    the complier average causal effect.

    A first-stage F diagnostic is attached to every result. When the
    instrument is irrelevant the first stage is close to zero and the
    estimate is a ratio of two noisy near-zero quantities: the result is
    still returned, with a very large standard error and a failed
    diagnostic. A first stage with no variation at all (a constant
    instrument or treatment, or exactly zero covariance between them)
    makes the second-stage design singular; that fit is returned as
    ``degenerate`` with the minimum-norm estimate and an infinite
    standard error.
    """

    name = "tsls"

    @property
    def assumptions(self) -> list[Assumption]:
        return list(IV_ASSUMPTIONS)

    def fit(self, dataset: Dataset) -> EstimationResult:
        """
        Estimate the effect of ``treatment`` on ``outcome`` via 2SLS.

        A constant instrument or treatment, or an exactly zero first-stage
        covariance, gives a ``degenerate`` result rather than an error.

        Raises
        ------
        ``ValueError``
            If treatment, outcome or instrument columns are missing, or
            treatment or instrument is not a 0/1 indicator.
        """
        data = dataset.observed
        require_columns(
            data,
            [("Treatment", "treatment"), ("Outcome", "outcome"), ("Instrument", "instrument")],
        )
        require_binary(data, "Treatment", "treatment", both_values=False)
        require_binary(data, "Instrument", "instrument", both_values=False)

        reason = _degeneracy(data)
        if reason is not None:
            logger.debug("Degenerate 2SLS fit in world %s: %s", dataset.world, reason)
            return EstimationResult(
                method=self.name,
                world=dataset.world,
                estimate=_minimum_norm_estimate(data),
                std_err=math.inf,
                statistic=0.0,
                pvalue=1.0,
                conf_int=(-math.inf, math.inf),
                n_obs=len(data),
                diagnostics=(degenerate_first_stage(reason),),
                degenerate=True,
                assumptions=tuple(IV_ASSUMPTIONS),
            )

        # Instrument matrix columns are renamed to match exog so params are
        # indexed by "treatment".
        X = sm.add_constant(data[["treatment"]].astype(float), prepend=True)
        Z_mat = sm.add_constant(data[["instrument"]].astype(float), prepend=True)
        Z_mat.columns = X.columns

        fit = _IV2SLS(endog=data["outcome"], exog=X, instrument=Z_mat).fit()
        check = check_first_stage_f(data, "treatment", "instrument")
        if not check.passed:
            logger.debug("Weak instrument in world %s: %s", dataset.world, check.detail)
        return result_from_fit(
            fit, "treatment", self.name, dataset.world,
            diagnostics=(check,), assumptions=IV_ASSUMPTIONS,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _degeneracy(data: pd.DataFrame) -> str | None:
    """Why the first stage carries no identifying variation, or ``None``."""
    for var in ("instrument", "treatment"):
        if data[var].nunique() < 2:
            return f"{var} is constant"
    if abs(first_stage_covariance(data, "treatment", "instrument")) < _ZERO_COVARIANCE:
        return "zero first-stage covariance"
    return None


def _minimum_norm_estimate(data: pd.DataFrame) -> float:
    """
    Treatment coefficient of the minimum-norm 2SLS solution, the same
    pseudo-inverse solution statsmodels' IV2SLS returns for a singular
    second stage. Always finite.
    """
    ones = np.ones(len(data))
    X = np.column_stack([ones, data["treatment"].to_numpy(dtype=float)])
    Z = np.column_stack([ones, data["instrument"].to_numpy(dtype=float)])
    x_hat = Z @ (np.linalg.pinv(Z) @ X)
    beta = np.linalg.pinv(x_hat) @ data["outcome"].to_numpy(dtype=float)
    return float(beta[1])
