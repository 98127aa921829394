from __future__ import annotations

import statsmodels.formula.api as smf

from ..dataset import Dataset
from ..diagnostics import Assumption
from ._result import EstimationResult, result_from_fit
from ._validate import require_binary, require_columns

AS_TREATED_ASSUMPTIONS: list[Assumption] = [
    Assumption("Unconfoundedness: treatment is independent of potential outcomes", testable=False),
    Assumption("Stable Unit Treatment Value Assumption (SUTVA)", testable=False),
]


class AsTreated:
    """
    Naive as-treated regression ``outcome ~ treatment``.

    Compares units by the treatment they actually received, ignoring why
    they received it. Biased whenever treatment is confounded, e.g. with a
    latent compliance type that also shifts the outcome.
    """

    name = "as_treated"

    @property
    def assumptions(self) -> list[Assumption]:
        return list(AS_TREATED_ASSUMPTIONS)

    def fit(self, dataset: Dataset) -> EstimationResult:
        data = dataset.observed
        require_columns(data, [("Treatment", "treatment"), ("Outcome", "outcome")])
        require_binary(data, "Treatment", "treatment")

        fit = smf.ols("outcome ~ treatment", data=data).fit()
        return result_from_fit(fit, "treatment", self.name, dataset.world, assumptions=AS_TREATED_ASSUMPTIONS)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
