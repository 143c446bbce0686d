# parallel-sets/src/parallel_sets/scene.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

# -----------------------------------------------------------------------------
# Drawable primitives (renderer-facing contract)
# -----------------------------------------------------------------------------
# Coordinates are data units: x in axis slots (variables at 1..k), y in
# cumulative weight. Colour keys are level keys ("<variable>:<level>"); the
# renderer maps keys to colours, so restyling never reruns the layout.
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Station:
    """Vertical span of a ribbon at one x position."""

    x: float
    ymin: float
    ymax: float

    @property
    def ymid(self) -> float:
        return (self.ymin + self.ymax) / 2.0


@dataclass(frozen=True)
class Bar:
    """Stacked axis segment of one level of one variable."""

    variable: str
    slot: int
    key: str
    label: str
    x: float
    width: float
    ymin: float
    ymax: float

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def ymid(self) -> float:
        return (self.ymin + self.ymax) / 2.0


@dataclass(frozen=True)
class Ribbon:
    """
    Filled band between two adjacent axes.

    `stations` are ordered by x; the band is the area between the ymin and
    ymax curves through them. `key` is the left level (ribbons take the colour
    of the category they start from).
    """

    pair: int
    row_id: int
    key: str
    freq: float
    stations: tuple[Station, ...]

    def polygon(self) -> np.ndarray:
        """Closed outline: lower edge left to right, upper edge right to left."""
        lower = [(s.x, s.ymin) for s in self.stations]
        upper = [(s.x, s.ymax) for s in reversed(self.stations)]
        return np.asarray(lower + upper, dtype=float)


@dataclass(frozen=True)
class Line:
    """Centre line of a ribbon drawn with a stroke width in data (y) units."""

    pair: int
    row_id: int
    key: str
    freq: float
    points: tuple[tuple[float, float], ...]
    width: float


@dataclass(frozen=True)
class Text:
    text: str
    x: float
    y: float
    angle: float
    colour: str
    size: float
    shadow: bool = False


Primitive = Union[Bar, Ribbon, Line, Text]


@dataclass(frozen=True)
class Scene:
    """
    Ordered drawable primitives plus default axis/legend configuration.

    Draw order is the tuple order: bars, then ribbons or lines, then labels
    (shadow copies before the text they outline).
    """

    method: str
    primitives: tuple[Primitive, ...]
    levels: tuple[str, ...]
    x_ticks: tuple[int, ...]
    x_labels: tuple[str, ...]
    alpha: float = 0.5
    aspect_ratio: float | None = None
    x_expand: float = 0.1
    x_title: str = ""
    y_max: float = 0.0

    @property
    def bars(self) -> list[Bar]:
        return [p for p in self.primitives if isinstance(p, Bar)]

    @property
    def ribbons(self) -> list[Ribbon]:
        return [p for p in self.primitives if isinstance(p, Ribbon)]

    @property
    def lines(self) -> list[Line]:
        return [p for p in self.primitives if isinstance(p, Line)]

    @property
    def texts(self) -> list[Text]:
        return [p for p in self.primitives if isinstance(p, Text)]
