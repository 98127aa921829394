from __future__ import annotations

from typing import Callable, Union

from .._exceptions import ConfigurationError
from ..config import DiDScenario, IVScenario
from ..dataset import Dataset
from ..streams import RandomStream
from .did import generate_did
from .iv import generate_iv

Scenario = Union[DiDScenario, IVScenario]

_GENERATORS: dict[type, Callable[..., Dataset]] = {
    DiDScenario: generate_did,
    IVScenario: generate_iv,
}


def generate(scenario: Scenario, stream: RandomStream) -> Dataset:
    """Draw one dataset from ``scenario`` using the generator for its family."""
    try:
        generator = _GENERATORS[type(scenario)]
    except KeyError:
        raise ConfigurationError(
            f"No generator registered for scenario type {type(scenario).__name__}."
        ) from None
    return generator(scenario, stream)


__all__ = ["generate", "generate_did", "generate_iv", "Scenario"]
