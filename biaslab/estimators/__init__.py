from __future__ import annotations

from enum import Enum
from typing import Protocol, Union, runtime_checkable

from ..dataset import Dataset
from ._result import EstimationResult
from .did import DiDRegression, SimpleDiD
from .iv import TwoStageLeastSquares
from .ols import AsTreated


@runtime_checkable
class Estimator(Protocol):
    """
    Anything with a ``name`` and a ``fit(dataset) -> EstimationResult``.

    Estimators do not need to inherit from this; new methods plug into the
    Monte Carlo runner as long as they have the right shape.
    """

    name: str

    def fit(self, dataset: Dataset) -> EstimationResult:
        ...


class Method(str, Enum):
    DID_REGRESSION = "did_regression"
    DID_SIMPLE = "did_simple"
    AS_TREATED = "as_treated"
    TSLS = "tsls"


METHODS: dict[Method, type] = {
    Method.DID_REGRESSION: DiDRegression,
    Method.DID_SIMPLE: SimpleDiD,
    Method.AS_TREATED: AsTreated,
    Method.TSLS: TwoStageLeastSquares,
}


def get_estimator(method: Union[str, Method, Estimator]) -> Estimator:
    """Resolve a method name, ``Method`` member, or estimator instance to an estimator."""
    if isinstance(method, Estimator):
        return method
    try:
        return METHODS[Method(method)]()
    except ValueError:
        raise ValueError(
            f"Unknown method '{method}'. Known methods: {[m.value for m in Method]}"
        ) from None


def estimate(dataset: Dataset, method: Union[str, Method, Estimator]) -> EstimationResult:
    """Apply ``method`` to ``dataset``."""
    return get_estimator(method).fit(dataset)


__all__ = [
    "Estimator", "Method", "METHODS", "get_estimator", "estimate",
    "EstimationResult",
    "DiDRegression", "SimpleDiD", "AsTreated", "TwoStageLeastSquares",
]
