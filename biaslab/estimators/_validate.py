from __future__ import annotations

import pandas as pd


def require_columns(data: pd.DataFrame, columns: list[tuple[str, str]]) -> None:
    """Raise ``ValueError`` naming the first ``(label, column)`` pair missing from ``data``."""
    for label, var in columns:
        if var not in data.columns:
            raise ValueError(f"{label} column '{var}' not found in dataframe.")


def require_binary(data: pd.DataFrame, label: str, var: str, both_values: bool = True) -> None:
    """
    Raise ``ValueError`` unless ``var`` is a 0/1 indicator. With
    ``both_values`` the column must also take both values.
    """
    vals = set(data[var].dropna().unique())
    if not vals <= {0, 1, 0.0, 1.0}:
        raise ValueError(f"{label} '{var}' must be binary (0/1). Found: {sorted(vals)}")
    if both_values and len(vals) < 2:
        raise ValueError(
            f"{label} '{var}' takes a single value ({sorted(vals)}); "
            f"both 0 and 1 are needed to estimate an effect."
        )
