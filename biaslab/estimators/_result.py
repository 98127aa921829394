from __future__ import annotations

import math
from dataclasses import dataclass

from ..diagnostics import Assumption, DiagnosticCheck


@dataclass(frozen=True, repr=False)
class EstimationResult:
    """
    The result of applying one estimator to one dataset.

    Degenerate fits (a constant instrument or treatment, or exactly zero
    first-stage covariance) are still returned as results: the estimate
    stays finite, the standard error is infinite and ``degenerate`` is set. Weak but non-zero first
    stages show up as very large standard errors and a failed diagnostic.
    """

    method: str
    world: str
    estimate: float
    std_err: float
    statistic: float
    pvalue: float
    conf_int: tuple[float, float]
    n_obs: int
    diagnostics: tuple[DiagnosticCheck, ...] = ()
    degenerate: bool = False
    assumptions: tuple[Assumption, ...] = ()

    @property
    def reliable(self) -> bool:
        """``False`` if the fit is degenerate or any diagnostic failed."""
        return not self.degenerate and all(c.passed for c in self.diagnostics)

    def covers(self, value: float) -> bool:
        """``True`` if ``value`` lies inside the 95% confidence interval."""
        lo, hi = self.conf_int
        return lo <= value <= hi

    def summary(self) -> str:
        lo, hi = self.conf_int
        se = f"{self.std_err:>10.4f}" if math.isfinite(self.std_err) else f"{'inf':>10}"
        lines = [
            "",
            f"{self.method} estimate  (world: {self.world}, n = {self.n_obs})",
            "─" * 50,
            f"  Estimate             : {self.estimate:>10.4f}",
            f"  Std. error           : {se}",
            f"  t-statistic          : {self.statistic:>10.4f}",
            f"  95% CI               : [{lo:.4f}, {hi:.4f}]",
            f"  p-value              : {self.pvalue:>10.4f}",
        ]
        if self.degenerate:
            lines.append("  Degenerate fit: the first stage has no variation to fit.")
        for check in self.diagnostics:
            status = "PASS" if check.passed else "FAIL"
            lines.append(f"  [{status}]  {check.name}: {check.detail}")
        if self.assumptions:
            lines += ["", "  Assumptions", "  " + "┄" * 48]
            for a in self.assumptions:
                lines.append(f"  {a.fmt_tag()}  {a.name}")
        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()


def result_from_fit(
    fit, term: str, method: str, world: str, diagnostics=(), degenerate=False, assumptions=(),
) -> EstimationResult:
    """Pull the ``term`` coefficient out of a fitted statsmodels regression."""
    ci = fit.conf_int()
    return EstimationResult(
        method=method,
        world=world,
        estimate=float(fit.params[term]),
        std_err=float(fit.bse[term]),
        statistic=float(fit.tvalues[term]),
        pvalue=float(fit.pvalues[term]),
        conf_int=(float(ci.loc[term, 0]), float(ci.loc[term, 1])),
        n_obs=int(fit.nobs),
        diagnostics=tuple(diagnostics),
        degenerate=degenerate,
        assumptions=tuple(assumptions),
    )
