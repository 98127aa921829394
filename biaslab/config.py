from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from ._exceptions import ConfigurationError


class ComplianceType(str, Enum):
    """
    Latent response of a unit's treatment to the instrument.

    Monotonicity is built in: there is no defier type.
    """

    COMPLIER = "complier"
    ALWAYS_TAKER = "always_taker"
    NEVER_TAKER = "never_taker"

    @property
    def potential_treatments(self) -> tuple[int, int]:
        """``(D(0), D(1))``: treatment received when the instrument is 0 and 1."""
        return POTENTIAL_TREATMENTS[self]


POTENTIAL_TREATMENTS: dict[ComplianceType, tuple[int, int]] = {
    ComplianceType.COMPLIER: (0, 1),
    ComplianceType.ALWAYS_TAKER: (1, 1),
    ComplianceType.NEVER_TAKER: (0, 0),
}


def _require_positive(name: str, value: float) -> None:
    if not value > 0:
        raise ConfigurationError(f"{name} must be positive, got {value}.")


def _require_probability(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must lie in [0, 1], got {value}.")


def _require_open_probability(name: str, value: float) -> None:
    if not 0.0 < value < 1.0:
        raise ConfigurationError(f"{name} must lie strictly between 0 and 1, got {value}.")


def _require_sample_size(n) -> None:
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise ConfigurationError(f"Sample size n must be a positive integer, got {n!r}.")


@dataclass(frozen=True)
class DiDScenario:
    """
    A two-period world with threshold assignment on the baseline outcome.

    Units are treated when ``pre_outcome >= threshold``. Potential outcomes
    in the post period are::

        Y(0) ~ N(intercept + trend_slope * pre_outcome, outcome_sd²)
        Y(1) ~ N(intercept + trend_slope * pre_outcome + effect, outcome_sd²)

    With ``trend_slope = 1`` the expected change ``Y(0) - pre_outcome`` is the
    same for every unit, so parallel trends holds. Any other slope makes the
    untreated change depend on the baseline, and because assignment is a
    function of the baseline, the treated and control groups drift apart.
    """

    world: str
    n: int = 1000
    pre_mean: float = 100.0
    pre_sd: float = 20.0
    population_mean: float = 1000.0
    population_sd: float = 100.0
    threshold: float = 110.0
    intercept: float = 30.0
    trend_slope: float = 1.0
    effect: float = -40.0
    outcome_sd: float = 20.0
    violates: str | None = None

    def __post_init__(self) -> None:
        _require_sample_size(self.n)
        _require_positive("pre_sd", self.pre_sd)
        _require_positive("population_sd", self.population_sd)
        _require_positive("outcome_sd", self.outcome_sd)
        for name in ("pre_mean", "population_mean", "threshold", "intercept", "trend_slope", "effect"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"{name} must be finite, got {getattr(self, name)}.")

    @property
    def family(self) -> str:
        return "did"

    @property
    def true_effect(self) -> float:
        """Population ATT: the constant shift between Y(1) and Y(0)."""
        return float(self.effect)


_DEFAULT_MIXTURE: dict[ComplianceType, float] = {
    ComplianceType.COMPLIER: 0.3,
    ComplianceType.ALWAYS_TAKER: 0.1,
    ComplianceType.NEVER_TAKER: 0.6,
}

_DEFAULT_OUTCOME_MEANS: dict[ComplianceType, tuple[float, float]] = {
    ComplianceType.COMPLIER: (-1.0, -2.5),
    ComplianceType.ALWAYS_TAKER: (-2.2, -2.2),
    ComplianceType.NEVER_TAKER: (0.0, 0.0),
}


def _freeze_table(name: str, table) -> dict[ComplianceType, object]:
    """
    Key a per-type table by ``ComplianceType``. Accepts a mapping or the
    ``((type, value), ...)`` pairs a scenario stores.
    """
    try:
        items = dict(table).items()
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"{name} must map compliance types to values, got {table!r}."
        ) from None
    frozen: dict[ComplianceType, object] = {}
    for key, value in items:
        try:
            frozen[ComplianceType(key)] = value
        except ValueError:
            raise ConfigurationError(
                f"{name} has unknown compliance type {key!r}. "
                f"Known types: {[t.value for t in ComplianceType]}"
            ) from None
    missing = set(ComplianceType) - set(frozen)
    if missing:
        raise ConfigurationError(
            f"{name} is missing types: {sorted(t.value for t in missing)}"
        )
    return frozen


@dataclass(frozen=True)
class IVScenario:
    """
    A randomized-encouragement world with latent compliance types.

    Each unit draws a compliance type from ``mixture`` and an instrument
    ``Z ~ Bernoulli(instrument_prob)``. Potential outcomes are normal around
    the per-type means in ``outcome_means`` (``(mean Y(0), mean Y(1))``)
    with independent residuals of SD ``residual_sd``.

    ``mixture`` and ``outcome_means`` may be given as mappings keyed by
    ``ComplianceType`` (or its value); they are stored as tuples of
    ``(type, value)`` pairs in ``ComplianceType`` order, so a scenario is
    immutable and hashable.

    Assumption-violation knobs:

    - ``leakage``: ``leakage * Z`` is added to both potential outcomes, so
      the instrument reaches the outcome outside the treatment channel
      (exclusion restriction broken when non-zero).
    - ``instrument_relevant``: when ``False``, treatment is drawn as
      ``Bernoulli(irrelevant_treatment_prob)`` independently of ``Z``
      (relevance broken).
    """

    world: str
    n: int = 1000
    instrument_prob: float = 0.5
    mixture: tuple[tuple[ComplianceType, float], ...] = tuple(_DEFAULT_MIXTURE.items())
    outcome_means: tuple[tuple[ComplianceType, tuple[float, float]], ...] = tuple(
        _DEFAULT_OUTCOME_MEANS.items()
    )
    residual_sd: float = 0.5
    leakage: float = 0.0
    instrument_relevant: bool = True
    irrelevant_treatment_prob: float = 0.5
    violates: str | None = None

    def __post_init__(self) -> None:
        _require_sample_size(self.n)
        # Both values of the instrument and of World C's treatment must be reachable.
        _require_open_probability("instrument_prob", self.instrument_prob)
        _require_open_probability("irrelevant_treatment_prob", self.irrelevant_treatment_prob)
        _require_positive("residual_sd", self.residual_sd)
        if not math.isfinite(self.leakage):
            raise ConfigurationError(f"leakage must be finite, got {self.leakage}.")

        mixture = _freeze_table("Compliance mixture", self.mixture)
        for ctype, p in mixture.items():
            _require_probability(f"Mixture proportion for {ctype.value}", p)
        total = sum(mixture.values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ConfigurationError(
                f"Compliance mixture proportions must sum to 1, got {total:.6f}."
            )

        means = _freeze_table("Potential-outcome means", self.outcome_means)
        for ctype, pair in means.items():
            try:
                y0, y1 = (float(v) for v in pair)
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"Potential-outcome means for {ctype.value} must be a "
                    f"(mean Y(0), mean Y(1)) pair, got {pair!r}."
                ) from None
            if not (math.isfinite(y0) and math.isfinite(y1)):
                raise ConfigurationError(
                    f"Potential-outcome means for {ctype.value} must be finite, got {pair!r}."
                )
            means[ctype] = (y0, y1)

        object.__setattr__(self, "mixture", tuple((t, float(mixture[t])) for t in ComplianceType))
        object.__setattr__(self, "outcome_means", tuple((t, means[t]) for t in ComplianceType))

    @property
    def family(self) -> str:
        return "iv"

    @property
    def compliance_types(self) -> list[ComplianceType]:
        return list(ComplianceType)

    @property
    def mixture_probs(self) -> list[float]:
        """Mixture proportions in ``ComplianceType`` order."""
        return [p for _, p in self.mixture]

    @property
    def outcome_mean_table(self) -> list[tuple[float, float]]:
        """``(mean Y(0), mean Y(1))`` per type, in ``ComplianceType`` order."""
        return [pair for _, pair in self.outcome_means]

    def proportion(self, ctype: ComplianceType | str) -> float:
        return dict(self.mixture)[ComplianceType(ctype)]

    def outcome_mean(self, ctype: ComplianceType | str) -> tuple[float, float]:
        return dict(self.outcome_means)[ComplianceType(ctype)]

    @property
    def true_effect(self) -> float:
        """Complier average causal effect: mean Y(1) minus mean Y(0) among compliers."""
        y0, y1 = self.outcome_mean(ComplianceType.COMPLIER)
        return float(y1 - y0)
