from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf

FIRST_STAGE_F_THRESHOLD = 10.0


@dataclass(frozen=True)
class Assumption:
    """
    A single modelling assumption required for causal identification.

    Every estimator exposes its assumptions via ``estimator.assumptions``.
    Scenarios name the assumption they break in ``violates``, so a bias
    table can be read against the list.
    """

    name: str
    """Human-readable description of the assumption."""

    testable: bool
    """``True`` if the assumption can be empirically checked; ``False`` if it rests on domain knowledge."""

    def fmt_tag(self) -> str:
        """Return a fixed-width bracketed testability label for use in summary output."""
        return "[  testable  ]" if self.testable else "[ untestable ]"


@dataclass(frozen=True)
class DiagnosticCheck:
    """Outcome of one diagnostic run against a single fit."""

    name: str
    passed: bool
    statistic: float
    detail: str

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"DiagnosticCheck({status!r}, {self.name!r}, {self.statistic:.4g})"


def first_stage_covariance(data: pd.DataFrame, treatment: str, instrument: str) -> float:
    """Sample covariance of treatment and instrument."""
    return float(np.cov(data[treatment], data[instrument], ddof=1)[0, 1])


def check_first_stage_f(
    data: pd.DataFrame,
    treatment: str,
    instrument: str,
    controls: list[str] | None = None,
    threshold: float = FIRST_STAGE_F_THRESHOLD,
) -> DiagnosticCheck:
    """
    Fit the first-stage regression and compute the partial F-statistic
    for the instrument (``H0: instrument coefficient = 0``).

    Conventional threshold: F < 10 indicates a weak instrument
    (Stock & Yogo, 2005). A failed check does not invalidate the estimate;
    it marks it as statistically uninformative.
    """
    rhs = " + ".join([instrument] + list(controls or []))
    first_stage = smf.ols(f"{treatment} ~ {rhs}", data=data).fit()
    f_stat = float(np.squeeze(first_stage.f_test(f"{instrument} = 0").fvalue))
    if not np.isfinite(f_stat):
        f_stat = 0.0

    passed = f_stat >= threshold
    if passed:
        detail = f"F = {f_stat:.2f}  (threshold: F ≥ {threshold:.0f})"
    else:
        detail = (
            f"F = {f_stat:.2f}  (threshold: F ≥ {threshold:.0f})  "
            f"Weak instrument: the instrument explains little variation in "
            f"treatment, so the IV estimate is unreliable."
        )
    return DiagnosticCheck(name="First-stage F-statistic", passed=passed, statistic=f_stat, detail=detail)


def degenerate_first_stage(reason: str) -> DiagnosticCheck:
    """Failed relevance check for a first stage with no variation to fit."""
    return DiagnosticCheck(
        name="First-stage F-statistic",
        passed=False,
        statistic=0.0,
        detail=f"F = 0.00  Degenerate first stage ({reason}): the instrument carries no information about treatment.",
    )
