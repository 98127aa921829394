"""
Named scenario presets.

Each world keeps the same generative rules as its family and changes only
the knob that breaks one identifying assumption:

===================  ==========================================  ===========================
world                what changes                                assumption broken
===================  ==========================================  ===========================
did_parallel         nothing (``trend_slope = 1``)               none
did_divergent        ``trend_slope = 2``                         parallel trends
iv_a                 nothing                                     none
iv_b                 ``leakage = -0.5``                          exclusion restriction
iv_c                 ``instrument_relevant = False``             relevance
===================  ==========================================  ===========================
"""
from __future__ import annotations

import dataclasses

from ._exceptions import ConfigurationError
from .config import DiDScenario, IVScenario

DID_PARALLEL = DiDScenario(world="did_parallel")
DID_DIVERGENT = DiDScenario(world="did_divergent", trend_slope=2.0, violates="parallel trends")

IV_WORLD_A = IVScenario(world="iv_a")
IV_WORLD_B = IVScenario(world="iv_b", leakage=-0.5, violates="exclusion restriction")
IV_WORLD_C = IVScenario(world="iv_c", instrument_relevant=False, violates="relevance")

WORLDS: dict[str, DiDScenario | IVScenario] = {
    s.world: s for s in (DID_PARALLEL, DID_DIVERGENT, IV_WORLD_A, IV_WORLD_B, IV_WORLD_C)
}


def get_world(name: str, **overrides) -> DiDScenario | IVScenario:
    """
    Look up a preset by name, optionally replacing some of its fields::

        small = get_world("iv_a", n=200)

    The replacement is validated like any new scenario.
    """
    try:
        scenario = WORLDS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown world '{name}'. Known worlds: {sorted(WORLDS)}"
        ) from None
    if not overrides:
        return scenario
    try:
        return dataclasses.replace(scenario, **overrides)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid override for world '{name}': {exc}") from None
