from __future__ import annotations

import statsmodels.formula.api as smf

from ..dataset import Dataset
from ..diagnostics import Assumption
from ._result import EstimationResult, result_from_fit
from ._validate import require_binary, require_columns

DID_ASSUMPTIONS: list[Assumption] = [
    Assumption(
        "Parallel trends: treated and control groups would have followed "
        "the same trend absent treatment",
        testable=False,
    ),
    Assumption("No anticipation: treatment does not affect outcomes before it begins", testable=False),
    Assumption("Stable Unit Treatment Value Assumption (SUTVA)", testable=False),
]

_CHANGE = "_change"


class DiDRegression:
    """
    Regression-adjusted Difference-in-Differences estimator.

    Works on the per-unit change from the baseline,
    ``Δ = outcome − pre_outcome``, and fits::

        Δ ~ treatment + population

    by OLS. The coefficient on ``treatment`` is the ATT. Without the
    covariate this is exactly the classic two-group, two-period contrast
    (treated change minus control change); the covariate is partialled out
    on top of it.

    Example::

        dataset = generate(get_world("did_parallel"), RandomStream(1))
        result = DiDRegression().fit(dataset)
        print(result.summary())
    """

    name = "did_regression"
    covariates: tuple[str, ...] = ("population",)

    @property
    def assumptions(self) -> list[Assumption]:
        return list(DID_ASSUMPTIONS)

    def fit(self, dataset: Dataset) -> EstimationResult:
        """
        Estimate the ATT on the observed columns of ``dataset``.

        Raises
        ------
        ``ValueError``
            If the baseline, treatment, outcome or covariate columns are
            missing, or treatment is not a binary indicator with both groups
            present.
        """
        data = dataset.observed
        require_columns(
            data,
            [("Baseline", "pre_outcome"), ("Treatment", "treatment"), ("Outcome", "outcome")]
            + [("Covariate", c) for c in self.covariates],
        )
        require_binary(data, "Treatment", "treatment")

        data = data.assign(**{_CHANGE: data["outcome"] - data["pre_outcome"]})
        rhs = " + ".join(["treatment", *self.covariates])
        fit = smf.ols(f"{_CHANGE} ~ {rhs}", data=data).fit()
        return result_from_fit(fit, "treatment", self.name, dataset.world, assumptions=DID_ASSUMPTIONS)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SimpleDiD(DiDRegression):
    """
    Classic two-group, two-period DiD with no covariate adjustment::

        Δ ~ treatment

    The coefficient equals (mean treated change) − (mean control change).
    """

    name = "did_simple"
    covariates = ()
