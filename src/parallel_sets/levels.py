# parallel-sets/src/parallel_sets/levels.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from . import _shared
from .schema import CategoricalTable


@dataclass(frozen=True)
class LevelOrdering:
    """
    Per-variable level order plus the disambiguated keys used for colouring.

    `keys[v][i]` is the key of `levels[v][i]`; `full` concatenates the keys of
    every unique variable in first-appearance order (canonical legend order).
    """

    levels: dict[str, list[object]]
    keys: dict[str, list[str]]

    @property
    def full(self) -> list[str]:
        out: list[str] = []
        for v in self.keys:
            out.extend(self.keys[v])
        return out


def level_weights(table: CategoricalTable, variable: str) -> np.ndarray:
    """Summed weight per level, aligned with `table.levels(variable)`."""
    n_levels = len(table.levels(variable))
    return np.bincount(
        table.codes(variable), weights=table.weights, minlength=n_levels
    ).astype(float)


def reorder_by_weight(levels: list[object], weights: np.ndarray, flag: int) -> list[object]:
    """
    Reorder `levels` by signed summed weight.

    flag=1 puts the heaviest level first, flag=-1 the lightest, flag=0 keeps
    the input order. Ties keep the input order (stable sort).
    """
    if flag == 0:
        return list(levels)
    score = -weights if flag > 0 else weights
    idx = np.argsort(score, kind="stable")
    return [levels[i] for i in idx]


def order_levels(
    table: CategoricalTable,
    variables: Sequence[str],
    order: Any = 1,
) -> CategoricalTable:
    """
    Apply per-position ordering flags and return the reordered table.

    `order` is a scalar or a sequence recycled over `variables`. A variable that
    appears more than once is reordered once per appearance, so the last
    nonzero flag wins.
    """
    flags = [_shared.norm_order_flag(x) for x in _shared.recycle(order, len(variables))]
    current = table
    for v, flag in zip(variables, flags, strict=True):
        if flag == 0:
            continue
        new = reorder_by_weight(current.levels(v), level_weights(current, v), flag)
        current = current.with_levels({v: new})
    return current


def build_level_ordering(table: CategoricalTable) -> LevelOrdering:
    levels: dict[str, list[object]] = {}
    keys: dict[str, list[str]] = {}
    for v in table.variables:
        lv = table.levels(v)
        levels[v] = lv
        keys[v] = [_shared.make_level_key(v, x) for x in lv]
    return LevelOrdering(levels=levels, keys=keys)


def prepare_levels(
    table: CategoricalTable,
    variables: Sequence[str],
    order: Any = 1,
) -> tuple[CategoricalTable, LevelOrdering]:
    """
    Order and disambiguate levels in one step.

    Fewer than two variables only produces a diagnostic; the caller decides
    whether a degenerate layout is useful.
    """
    if len(variables) < 2:
        _shared.warn(
            "parallel_sets needs at least two variables, e.g. variables=['X', 'Y']; "
            "no ribbons will be drawn"
        )
    ordered = order_levels(table, variables, order) if variables else table
    return ordered, build_level_ordering(ordered)
