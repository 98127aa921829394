from __future__ import annotations

from typing import Sequence

import numpy as np


class RandomStream:
    """
    A seedable source of independent random draws.

    Streams are passed explicitly to generators; nothing in biaslab touches
    global random state. A Monte Carlo run derives one child stream per
    repetition from the run seed and the repetition index, so repetitions
    are reproducible and can run in any order or in parallel::

        stream = RandomStream(42)
        child = RandomStream.for_repetition(42, index=7)
    """

    def __init__(self, seed: int | np.random.SeedSequence | None = None) -> None:
        if isinstance(seed, np.random.SeedSequence):
            self._seed_seq = seed
        else:
            self._seed_seq = np.random.SeedSequence(seed)
        self._rng = np.random.default_rng(self._seed_seq)

    @classmethod
    def for_repetition(cls, seed: int, index: int) -> RandomStream:
        """Independent stream for repetition ``index`` of a run seeded with ``seed``."""
        if index < 0:
            raise ValueError(f"Repetition index must be non-negative, got {index}.")
        return cls(np.random.SeedSequence(entropy=seed, spawn_key=(index,)))

    @property
    def entropy(self):
        """Root entropy of the stream, for reporting which seed produced a run."""
        return self._seed_seq.entropy

    def normal(self, mean, sd, size: int) -> np.ndarray:
        return self._rng.normal(mean, sd, size=size)

    def binomial(self, p: float, size: int, trials: int = 1) -> np.ndarray:
        """Bernoulli draws by default (``trials=1``), as integers."""
        return self._rng.binomial(trials, p, size=size)

    def categorical(self, probs: Sequence[float], size: int) -> np.ndarray:
        """Draw ``size`` integer category codes, code ``k`` with probability ``probs[k]``."""
        return self._rng.choice(len(probs), size=size, p=np.asarray(probs, dtype=float))

    def permutation(self, n: int) -> np.ndarray:
        return self._rng.permutation(n)

    def __repr__(self) -> str:
        return f"RandomStream(entropy={self._seed_seq.entropy}, spawn_key={self._seed_seq.spawn_key})"
