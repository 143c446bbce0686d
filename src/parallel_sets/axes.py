# parallel-sets/src/parallel_sets/axes.py
from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from . import _shared
from .levels import level_weights
from .params import ParallelParams
from .schema import CategoricalTable
from .scene import Bar, Text

# Labels sit just right of the axis slot.
LABEL_X_NUDGE = 0.01
SHADOW_X_SCALE = 0.01
SHADOW_Y_SCALE = 0.1


def axis_segments(
    table: CategoricalTable,
    variables: Sequence[str],
    width: float,
) -> list[Bar]:
    """
    Stack every variable's levels into bar segments.

    Variable j (1-based, repeats included) sits at x = j. Levels are stacked
    from 0 upward in level order, each segment as tall as the level's summed
    weight; levels without weight get no segment.
    """
    out: list[Bar] = []
    for slot, v in enumerate(variables, start=1):
        levels = table.levels(v)
        w = level_weights(table, v)
        tops = np.cumsum(w)
        for lv, wi, top in zip(levels, w, tops, strict=True):
            if wi <= 0:
                continue
            out.append(
                Bar(
                    variable=v,
                    slot=slot,
                    key=_shared.make_level_key(v, lv),
                    label=_shared.format_level(lv),
                    x=float(slot),
                    width=float(width),
                    ymin=float(top - wi),
                    ymax=float(top),
                )
            )
    return out


def label_anchors(bars: Sequence[Bar], params: ParallelParams) -> list[Text]:
    """
    Text anchors for the bar segments.

    Main label: (slot + 0.01 + offset, segment midpoint). The optional shadow
    copy is nudged by the shadow offsets and listed first so the renderer
    draws it behind the main text. `text_offset` is recycled over segments.
    """
    if not params.label or not bars:
        return []

    offsets = [float(x) for x in _shared.recycle(params.text_offset, len(bars))]
    main: list[Text] = []
    shadow: list[Text] = []
    for b, off in zip(bars, offsets, strict=True):
        main.append(
            Text(
                text=b.label,
                x=b.slot + LABEL_X_NUDGE + off,
                y=b.ymid,
                angle=float(params.text_angle),
                colour=params.text_colour,
                size=float(params.text_size),
            )
        )
        if params.text_shadow:
            shadow.append(
                Text(
                    text=b.label,
                    x=b.slot + SHADOW_X_SCALE * params.text_shadow_x_offset + off,
                    y=b.ymid - SHADOW_Y_SCALE * params.text_shadow_y_offset,
                    angle=float(params.text_angle),
                    colour=params.text_shadow_colour,
                    size=float(params.text_shadow_size),
                    shadow=True,
                )
            )
    return shadow + main
