# parallel-sets/src/parallel_sets/frequency.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np
import pandas as pd

from . import _shared
from .schema import WEIGHT_COL, CategoricalTable

Side = Literal["left", "right"]

PAIR_COLS = [
    "left",
    "right",
    "left_code",
    "right_code",
    "freq",
    "left_cum",
    "right_cum",
    "row_id",
]


@dataclass(frozen=True)
class PairFrequencyTable:
    """
    Weighted cross-tabulation of one adjacent variable pair.

    Columns (see PAIR_COLS):
      - left/right: level keys ("<variable>:<level>")
      - left_code/right_code: level positions in the canonical order
      - freq: summed weight of the cell (always > 0)
      - left_cum: running freq over rows sorted by (left, right)
      - right_cum: running freq over rows sorted by (right, left)
      - row_id: 1-based id in cross-tabulation order (right major, left minor)

    `left_slot` is the 1-based axis slot of the left variable; the right
    variable sits at `left_slot + 1`.
    """

    left_var: str
    right_var: str
    left_slot: int
    df: pd.DataFrame

    @property
    def right_slot(self) -> int:
        return self.left_slot + 1

    @property
    def total(self) -> float:
        return float(self.df["freq"].sum())

    def __len__(self) -> int:
        return len(self.df)


def _running_position(primary: np.ndarray, secondary: np.ndarray, freq: np.ndarray) -> np.ndarray:
    # np.lexsort sorts by the last key first
    idx = np.lexsort((secondary, primary))
    out = np.empty_like(freq)
    out[idx] = np.cumsum(freq[idx])
    return out


def build_pair_table(
    table: CategoricalTable,
    left: str,
    right: str,
    *,
    left_slot: int = 1,
) -> PairFrequencyTable:
    """
    Cross-tabulate `left` x `right` and attach cumulative stack positions.

    The two running positions use different sort keys on purpose: each side of
    the pair stacks its ribbons in its own level order, which keeps crossing
    ribbons from overlapping inside one axis stack.
    """
    frame = pd.DataFrame(
        {
            "left_code": table.codes(left),
            "right_code": table.codes(right),
            "freq": table.df[WEIGHT_COL].to_numpy(dtype=float),
        }
    )
    tab = frame.groupby(["right_code", "left_code"], sort=True, as_index=False)["freq"].sum()
    tab = tab[tab["freq"] > 0].reset_index(drop=True)

    lc = tab["left_code"].to_numpy()
    rc = tab["right_code"].to_numpy()
    freq = tab["freq"].to_numpy(dtype=float)

    left_levels = table.levels(left)
    right_levels = table.levels(right)

    out = pd.DataFrame(
        {
            "left": [_shared.make_level_key(left, left_levels[i]) for i in lc],
            "right": [_shared.make_level_key(right, right_levels[i]) for i in rc],
            "left_code": lc,
            "right_code": rc,
            "freq": freq,
            "left_cum": _running_position(lc, rc, freq),
            "right_cum": _running_position(rc, lc, freq),
            "row_id": np.arange(1, len(tab) + 1),
        },
        columns=PAIR_COLS,
    )
    _shared.dlog(f"pair {left} x {right}: {len(out)} nonzero cells, total={out['freq'].sum():g}")
    return PairFrequencyTable(left_var=left, right_var=right, left_slot=left_slot, df=out)


def level_totals(pair: PairFrequencyTable, side: Side) -> pd.DataFrame:
    """
    Per-level totals on one side of a pair, in level order.

    Returns columns: key, total, mid (stack midpoint: cumsum(total) - total/2).
    """
    if side not in ("left", "right"):
        raise ValueError(f"invalid side={side!r} (use left|right)")
    code_col = f"{side}_code"
    g = (
        pair.df.groupby([code_col, side], sort=True, as_index=False)["freq"]
        .sum()
        .rename(columns={side: "key", "freq": "total"})
    )
    g["mid"] = g["total"].cumsum() - g["total"] / 2.0
    return g[["key", "total", "mid"]]
