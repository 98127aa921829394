from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from .config import ComplianceType
from .streams import RandomStream

OBSERVED_COLUMNS: dict[str, list[str]] = {
    "did": ["unit", "population", "pre_outcome", "treatment", "outcome"],
    "iv": ["unit", "instrument", "treatment", "outcome"],
}

LATENT_COLUMNS: dict[str, list[str]] = {
    "did": ["y0", "y1"],
    "iv": ["compliance_type", "d0", "d1", "y0", "y1"],
}


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    One generated sample: a per-unit dataframe tagged with its world.

    ``frame`` holds both observable and latent columns. Estimators only ever
    read ``observed``; the potential outcomes (``y0``, ``y1``) and, for IV
    worlds, the compliance type and potential treatments are kept so the
    in-sample estimand can be computed and assumptions can be inspected.
    """

    world: str
    family: str
    frame: pd.DataFrame
    true_effect: float

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def observed(self) -> pd.DataFrame:
        """Only the columns an analyst could actually observe."""
        return self.frame[OBSERVED_COLUMNS[self.family]]

    @property
    def latent(self) -> pd.DataFrame:
        return self.frame[LATENT_COLUMNS[self.family]]

    @property
    def sample_effect(self) -> float:
        """
        The in-sample estimand, computed from both potential outcomes.

        For DID worlds this is the sample ATT (mean ``Y(1) - Y(0)`` among the
        treated). For IV worlds it is the sample CACE (the same mean among
        compliers).
        """
        df = self.frame
        if self.family == "did":
            mask = df["treatment"] == 1
        else:
            mask = df["compliance_type"] == ComplianceType.COMPLIER.value
        if not mask.any():
            return float("nan")
        return float((df.loc[mask, "y1"] - df.loc[mask, "y0"]).mean())

    def permuted(self, stream: RandomStream) -> Dataset:
        """The same units in a random order."""
        order = stream.permutation(len(self.frame))
        frame = self.frame.iloc[order].reset_index(drop=True)
        return Dataset(self.world, self.family, frame, self.true_effect)
