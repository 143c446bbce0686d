# parallel-sets/src/parallel_sets/layout.py
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pandas as pd

from . import _shared
from .axes import axis_segments, label_anchors
from .frequency import PairFrequencyTable, build_pair_table
from .levels import prepare_levels
from .params import ParallelParams
from .ribbons import GeometryContext, get_strategy
from .schema import CategoricalTable
from .scene import Scene


def _as_variable_list(variables: str | Sequence[str]) -> list[str]:
    if isinstance(variables, str):
        return [variables]
    return [str(v) for v in variables]


def build_pairs(table: CategoricalTable, variables: Sequence[str]) -> list[PairFrequencyTable]:
    """One frequency table per adjacent pair; pair i spans slots i and i + 1."""
    return [
        build_pair_table(table, variables[i], variables[i + 1], left_slot=i + 1)
        for i in range(len(variables) - 1)
    ]


def parallel_sets(
    variables: str | Sequence[str],
    data: pd.DataFrame,
    weight: str | float | None = None,
    method: str = "angle",
    **kwargs: Any,
) -> Scene:
    """
    Lay out a parallel-coordinate chart for categorical variables.

    Parameters
    ----------
    variables : str or sequence of str
        Columns to display, left to right. Repeats are allowed; every position
        gets its own axis slot.
    data : pandas.DataFrame
        Input records. Never mutated.
    weight : str, float or None, optional
        Column name holding record weights, a constant weight, or None (1).
    method : str, optional
        One of "parset", "angle" (default), "adj.angle", "hammock".
    **kwargs
        Remaining ParallelParams fields (alpha, width, order, ratio, asp,
        label, text_* options).

    Returns
    -------
    Scene
        Bars, ribbons (or lines) and labels in draw order, plus default axis
        and legend configuration.

    Notes
    -----
    - Fewer than two variables only warns; no ribbons are produced.
    - Unknown methods and a missing ratio for hammock/adj.angle raise ValueError.
    - The computation is pure: identical inputs give identical scenes.
    """
    params = ParallelParams(method=method, **kwargs)
    names = _as_variable_list(variables)

    table = CategoricalTable.from_frame(data, names, weight)
    table, ordering = prepare_levels(table, names, params.order)

    ctx = GeometryContext(
        width=params.width,
        n_vars=len(names),
        total_weight=table.total_weight,
        ratio=params.ratio,
        aspect=params.aspect,
    )
    strategy = get_strategy(params.method)

    geometry = []
    for pair in build_pairs(table, names):
        geometry.extend(strategy.compute(pair, ctx))

    bars = axis_segments(table, names, params.width)
    texts = label_anchors(bars, params)
    _shared.dlog(
        f"parallel_sets: method={params.method} vars={len(names)} "
        f"bars={len(bars)} geometry={len(geometry)} labels={len(texts)}"
    )

    return Scene(
        method=params.method,
        primitives=tuple([*bars, *geometry, *texts]),
        levels=tuple(ordering.full),
        x_ticks=tuple(range(1, len(names) + 1)),
        x_labels=tuple(names),
        alpha=params.alpha,
        aspect_ratio=params.aspect,
        y_max=table.total_weight,
    )
