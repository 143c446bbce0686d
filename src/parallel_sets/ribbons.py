# parallel-sets/src/parallel_sets/ribbons.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Union

import numpy as np
import pandas as pd

from . import _shared
from .frequency import PairFrequencyTable, level_totals
from .scene import Line, Ribbon, Station

# -----------------------------------------------------------------------------
# Ribbon geometry engine
# -----------------------------------------------------------------------------
# Every strategy maps one PairFrequencyTable to drawable geometry:
#   compute(pair, ctx) -> list[Ribbon] | list[Line]
#
# Shared preamble (all strategies):
#   left endpoint  x = left_slot  + width/2, span [left_cum  - freq, left_cum]
#   right endpoint x = right_slot - width/2, span [right_cum - freq, right_cum]
# -----------------------------------------------------------------------------

# 15% of slack at each end of the steepest ribbon.
ANGLE_MARGIN = 1.3

# Vertical headroom the display reserves above the stacked bars.
HAMMOCK_HEADROOM = 1.1

Geometry = Union[Ribbon, Line]


@dataclass(frozen=True)
class GeometryContext:
    """
    Per-call constants shared by every pair.

    n_vars counts axis slots (repeated variables included); total_weight is the
    summed weight of the whole table (the display height).
    """

    width: float
    n_vars: int
    total_weight: float
    ratio: float | None = None
    aspect: float | None = None

    def require_ratio(self, method: str) -> float:
        if self.ratio is None:
            raise ValueError(f"ratio required for method={method!r}")
        return float(self.ratio)


@dataclass(frozen=True)
class Endpoints:
    x_left: np.ndarray
    x_right: np.ndarray
    left_min: np.ndarray
    left_max: np.ndarray
    right_min: np.ndarray
    right_max: np.ndarray


def pair_endpoints(pair: PairFrequencyTable, width: float) -> Endpoints:
    df = pair.df
    n = len(df)
    freq = df["freq"].to_numpy(dtype=float)
    left_cum = df["left_cum"].to_numpy(dtype=float)
    right_cum = df["right_cum"].to_numpy(dtype=float)
    return Endpoints(
        x_left=np.full(n, pair.left_slot + width / 2.0),
        x_right=np.full(n, pair.right_slot - width / 2.0),
        left_min=left_cum - freq,
        left_max=left_cum,
        right_min=right_cum - freq,
        right_max=right_cum,
    )


@dataclass(frozen=True)
class ShrunkEndpoints:
    """Endpoints pulled toward the ribbon centre so every slope is at most max_slope."""

    ends: Endpoints
    x_left_new: np.ndarray
    x_right_new: np.ndarray
    slope: np.ndarray
    max_slope: float


def shrink_to_common_angle(pair: PairFrequencyTable, width: float) -> ShrunkEndpoints:
    """
    Shrink each ribbon's horizontal run to dy / max_slope.

    Offsets keep their side of the bar: new = sign(o) * (|o| + (dx - new_dx) / 2).
    When every ribbon is flat there is no common angle to match and the
    endpoints stay where they are.
    """
    ends = pair_endpoints(pair, width)
    dx = ends.x_right - ends.x_left
    dy = np.abs(ends.left_max - ends.right_max)
    slope = dy / dx
    max_slope = ANGLE_MARGIN * float(slope.max()) if len(slope) else 0.0
    new_dx = dy / max_slope if max_slope > 0 else dx

    shrink = (dx - new_dx) / 2.0
    off_left = ends.x_left - pair.left_slot
    off_right = ends.x_right - pair.right_slot
    new_left = np.sign(off_left) * (np.abs(off_left) + shrink)
    new_right = np.sign(off_right) * (np.abs(off_right) + shrink)
    return ShrunkEndpoints(
        ends=ends,
        x_left_new=pair.left_slot + new_left,
        x_right_new=pair.right_slot + new_right,
        slope=slope,
        max_slope=max_slope,
    )


def realign_shift(pair: PairFrequencyTable, shrunk: ShrunkEndpoints) -> np.ndarray:
    """
    Rigid x shift per ribbon that closes the gaps left by shrinking.

    Ribbons are grouped by their right level. In each group the steepest
    ribbon (ties: the one reaching furthest right) is the reference; every
    ribbon's shrunk right end is moved onto the reference's right end, so
    shift = x_right_new - reference and the reference itself has shift 0.
    """
    frame = pd.DataFrame(
        {
            "grp": pair.df["right_code"].to_numpy(),
            "slope": shrunk.slope,
            "xr": shrunk.x_right_new,
        }
    )
    group_max = frame.groupby("grp")["slope"].transform("max")
    candidates = frame["xr"].where(frame["slope"] == group_max)
    reference = candidates.groupby(frame["grp"]).transform("max")
    return (frame["xr"] - reference).to_numpy(dtype=float)


class RibbonStrategy(ABC):
    """
    Method-specific geometry.

    Contract:
      - Input: one PairFrequencyTable and the shared GeometryContext
      - Output: one Ribbon (or Line) per table row, keyed by the left level
    """

    method: ClassVar[str]

    @abstractmethod
    def compute(self, pair: PairFrequencyTable, ctx: GeometryContext) -> list[Geometry]:
        raise NotImplementedError


class ParsetStrategy(RibbonStrategy):
    method = "parset"

    def compute(self, pair: PairFrequencyTable, ctx: GeometryContext) -> list[Geometry]:
        e = pair_endpoints(pair, ctx.width)
        out: list[Geometry] = []
        for i, r in enumerate(pair.df.itertuples(index=False)):
            out.append(
                Ribbon(
                    pair=pair.left_slot,
                    row_id=int(r.row_id),
                    key=str(r.left),
                    freq=float(r.freq),
                    stations=(
                        Station(float(e.x_left[i]), float(e.left_min[i]), float(e.left_max[i])),
                        Station(float(e.x_right[i]), float(e.right_min[i]), float(e.right_max[i])),
                    ),
                )
            )
        return out


class AngleStrategy(RibbonStrategy):
    """
    Common-angle ribbons: flat at both bars, one shared slope in between.
    """

    method = "angle"

    def compute(self, pair: PairFrequencyTable, ctx: GeometryContext) -> list[Geometry]:
        s = shrink_to_common_angle(pair, ctx.width)
        shift = realign_shift(pair, s)
        e = s.ends
        xl = s.x_left_new - shift
        xr = s.x_right_new - shift

        out: list[Geometry] = []
        for i, r in enumerate(pair.df.itertuples(index=False)):
            lo_l, hi_l = float(e.left_min[i]), float(e.left_max[i])
            lo_r, hi_r = float(e.right_min[i]), float(e.right_max[i])
            out.append(
                Ribbon(
                    pair=pair.left_slot,
                    row_id=int(r.row_id),
                    key=str(r.left),
                    freq=float(r.freq),
                    stations=(
                        Station(float(e.x_left[i]), lo_l, hi_l),
                        Station(float(xl[i]), lo_l, hi_l),
                        Station(float(xr[i]), lo_r, hi_r),
                        Station(float(e.x_right[i]), lo_r, hi_r),
                    ),
                )
            )
        return out


class AdjustedAngleStrategy(RibbonStrategy):
    """
    Common angle without realignment, drawn as centre lines whose stroke
    width carries the frequency. The widest line is `ratio` of the display
    height.
    """

    method = "adj.angle"

    def compute(self, pair: PairFrequencyTable, ctx: GeometryContext) -> list[Geometry]:
        ratio = ctx.require_ratio(self.method)
        s = shrink_to_common_angle(pair, ctx.width)
        e = s.ends
        freq = pair.df["freq"].to_numpy(dtype=float)
        if not len(freq):
            return []
        widths = ratio * ctx.total_weight * freq / float(freq.max())

        out: list[Geometry] = []
        for i, r in enumerate(pair.df.itertuples(index=False)):
            y_l = (float(e.left_min[i]) + float(e.left_max[i])) / 2.0
            y_r = (float(e.right_min[i]) + float(e.right_max[i])) / 2.0
            out.append(
                Line(
                    pair=pair.left_slot,
                    row_id=int(r.row_id),
                    key=str(r.left),
                    freq=float(r.freq),
                    points=(
                        (float(e.x_left[i]), y_l),
                        (float(s.x_left_new[i]), y_l),
                        (float(s.x_right_new[i]), y_r),
                        (float(e.x_right[i]), y_r),
                    ),
                    width=float(widths[i]),
                )
            )
        return out


class HammockStrategy(RibbonStrategy):
    """
    Hammock ribbons between level midpoints.

    The width is corrected for the slope of the connecting segment
    (freq / cos(atan(tangent))) in display space, then rescaled so the widest
    half thickness equals ratio / 2 * total_weight.
    """

    method = "hammock"

    def aspect_factor(self, ctx: GeometryContext) -> float:
        aspect = 1.0 if ctx.aspect is None else float(ctx.aspect)
        return ctx.n_vars / (HAMMOCK_HEADROOM * ctx.total_weight) * aspect

    def half_widths(self, pair: PairFrequencyTable, ctx: GeometryContext) -> np.ndarray:
        ratio = ctx.require_ratio(self.method)
        e = pair_endpoints(pair, ctx.width)
        mid_l, mid_r = self._midpoints(pair)
        dx = e.x_right - e.x_left
        tangent = np.abs(mid_r - mid_l) * self.aspect_factor(ctx) / dx
        w = pair.df["freq"].to_numpy(dtype=float) / np.cos(np.arctan(tangent))
        max_width = ratio / 2.0 * ctx.total_weight
        return w * max_width / float(w.max())

    def _midpoints(self, pair: PairFrequencyTable) -> tuple[np.ndarray, np.ndarray]:
        lt = level_totals(pair, "left").set_index("key")["mid"]
        rt = level_totals(pair, "right").set_index("key")["mid"]
        mid_l = pair.df["left"].map(lt).to_numpy(dtype=float)
        mid_r = pair.df["right"].map(rt).to_numpy(dtype=float)
        return mid_l, mid_r

    def compute(self, pair: PairFrequencyTable, ctx: GeometryContext) -> list[Geometry]:
        if not len(pair):
            return []
        e = pair_endpoints(pair, ctx.width)
        mid_l, mid_r = self._midpoints(pair)
        half = self.half_widths(pair, ctx)

        out: list[Geometry] = []
        for i, r in enumerate(pair.df.itertuples(index=False)):
            h = float(half[i])
            out.append(
                Ribbon(
                    pair=pair.left_slot,
                    row_id=int(r.row_id),
                    key=str(r.left),
                    freq=float(r.freq),
                    stations=(
                        Station(float(e.x_left[i]), float(mid_l[i]) - h, float(mid_l[i]) + h),
                        Station(float(e.x_right[i]), float(mid_r[i]) - h, float(mid_r[i]) + h),
                    ),
                )
            )
        return out


_STRATEGIES: dict[str, type[RibbonStrategy]] = {
    cls.method: cls
    for cls in (ParsetStrategy, AngleStrategy, AdjustedAngleStrategy, HammockStrategy)
}


def get_strategy(method: str) -> RibbonStrategy:
    """Resolve a method name; unknown names raise ValueError (unsupported method)."""
    return _STRATEGIES[_shared.norm_method(method)]()


def compute_ribbon_geometry(
    pair: PairFrequencyTable,
    ctx: GeometryContext,
    method: str,
) -> list[Geometry]:
    return get_strategy(method).compute(pair, ctx)
