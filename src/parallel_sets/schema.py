# parallel-sets/src/parallel_sets/schema.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from numbers import Real

import numpy as np
import pandas as pd
from pandas.api.types import CategoricalDtype, is_numeric_dtype

from . import _shared

# -----------------------------------------------------------------------------
# CategoricalTable (layout-facing contract)
# -----------------------------------------------------------------------------
# Contract:
#   - one row per record, one pandas Categorical column per selected variable
#   - a float weight column (WEIGHT_COL), every weight > 0
#
# Policy:
#   - zero-weight records are dropped silently (they contribute nothing)
#   - records with a missing category in any selected variable are dropped
#   - non-categorical columns are coerced; categories keep their natural order
#   - the caller's frame is never mutated
# -----------------------------------------------------------------------------

WEIGHT_COL = "__weight__"


def natural_levels(s: pd.Series) -> list[object]:
    """
    Natural level order of a column.

    Declared categories win for pandas Categoricals (unused ones included).
    Otherwise the distinct non-missing values are sorted numerically for
    numeric columns and lexically (by their text) for everything else.
    """
    if isinstance(s.dtype, CategoricalDtype):
        return list(s.cat.categories)
    vals = [v for v in pd.unique(s) if not _shared.is_na_scalar(v)]
    if is_numeric_dtype(s.dtype):
        return sorted(vals)
    return sorted(vals, key=str)


def _resolve_weight(data: pd.DataFrame, weight: str | float | None) -> np.ndarray:
    n = len(data)
    if weight is None:
        return np.ones(n, dtype=float)
    if isinstance(weight, str):
        if weight not in data.columns:
            raise ValueError(f"weight column not found: {weight!r}")
        w = pd.to_numeric(data[weight], errors="coerce")
        if w.isna().any():
            i = w.index[w.isna()][0]
            raise ValueError(f"weight column {weight!r}: non-numeric weight at row index={i}")
        arr = w.to_numpy(dtype=float)
    elif isinstance(weight, Real) and not isinstance(weight, bool):
        arr = np.full(n, float(weight), dtype=float)
    else:
        raise ValueError(f"weight must be None, a column name or a number (got {weight!r})")

    if not np.isfinite(arr).all():
        raise ValueError("weights contain non-finite values")
    if (arr < 0).any():
        raise ValueError("weights must be >= 0")
    return arr


@dataclass(frozen=True)
class CategoricalTable:
    df: pd.DataFrame
    variables: tuple[str, ...]

    @classmethod
    def from_frame(
        cls,
        data: pd.DataFrame,
        variables: Sequence[str],
        weight: str | float | None = None,
    ) -> CategoricalTable:
        names = _shared.dedup_preserve_order([str(v) for v in variables])
        missing = [v for v in names if v not in data.columns]
        if missing:
            raise ValueError(f"variables not found in data: {missing}")

        w = _resolve_weight(data, weight)
        cols: dict[str, object] = {}
        for v in names:
            s = data[v]
            cols[v] = pd.Categorical(s, categories=natural_levels(s))
        df = pd.DataFrame(cols)
        df[WEIGHT_COL] = w

        keep = (df[WEIGHT_COL] > 0).to_numpy()
        n_zero = int((~keep).sum())
        if names:
            complete = df[names].notna().all(axis=1).to_numpy()
            n_na = int((keep & ~complete).sum())
            # to_numpy() may hand back a read-only view under copy-on-write
            keep = keep & complete
        else:
            n_na = 0
        if n_zero or n_na:
            _shared.dlog(f"CategoricalTable: dropped zero_weight={n_zero} missing_category={n_na}")

        df = df.loc[keep].reset_index(drop=True)
        return cls(df=df, variables=tuple(names))

    @property
    def total_weight(self) -> float:
        return float(self.df[WEIGHT_COL].sum())

    @property
    def weights(self) -> np.ndarray:
        return self.df[WEIGHT_COL].to_numpy(dtype=float)

    def levels(self, variable: str) -> list[object]:
        return list(self.df[variable].cat.categories)

    def codes(self, variable: str) -> np.ndarray:
        """Integer position of each record's level in the current level order."""
        return self.df[variable].cat.codes.to_numpy()

    def with_levels(self, levels: dict[str, list[object]]) -> CategoricalTable:
        """Return a copy whose categories follow `levels` (a permutation per variable)."""
        df = self.df.copy()
        for v, lv in levels.items():
            df[v] = df[v].cat.reorder_categories(list(lv))
        return CategoricalTable(df=df, variables=self.variables)
