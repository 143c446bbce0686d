# parallel-sets/src/parallel_sets/render.py
from __future__ import annotations

import re
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.lines import Line2D
from matplotlib.patches import Patch, Rectangle

from .scene import Bar, Line, Ribbon, Scene, Text

# ggplot-style text sizes are millimetres.
_MM_TO_PT = 72.27 / 25.4

_GREY_RE = re.compile(r"^gr[ae]y(\d{1,3})$")

_ZORDER = {"bar": 1.0, "ribbon": 2.0, "line": 2.0, "shadow": 3.0, "text": 4.0}

_MIN_LINE_PT = 0.1


def apply_pub_style(fontsize: int = 12) -> None:
    """Apply publication-style matplotlib rcParams.

    Parameters
    ----------
    fontsize : int, optional
        Base font size used for axes/labels (default 12).

    Notes
    -----
    This mutates global matplotlib rcParams for the current Python process.
    """
    plt.rcParams.update(
        {
            "font.size": fontsize,
            "axes.labelsize": fontsize + 2,
            "xtick.labelsize": fontsize,
            "ytick.labelsize": fontsize,
            "axes.linewidth": 1.1,
        }
    )


def resolve_colour(name: str) -> str:
    """
    Translate R-style grey names ("grey20") to matplotlib grey levels ("0.2").

    Any other value is passed through unchanged.
    """
    m = _GREY_RE.match(str(name).strip().lower())
    if m:
        level = min(int(m.group(1)), 100)
        return str(level / 100.0)
    return name


def level_colours(
    scene: Scene,
    cmap_name: str = "tab20",
    overrides: dict[str, object] | None = None,
) -> dict[str, object]:
    """
    Map every level key to a colour by its position in the legend order.

    `overrides` replaces individual keys (e.g. greying out minor levels).
    """
    cmap = matplotlib.colormaps[cmap_name]
    n = int(getattr(cmap, "N", 256))
    out: dict[str, object] = {}
    for i, key in enumerate(scene.levels):
        out[key] = cmap(i % n) if n <= 20 else cmap(i / max(len(scene.levels) - 1, 1))
    if overrides:
        out.update(overrides)
    return out


def _data_to_points(ax: Axes, *, flip: bool) -> float:
    """Points per data unit along the weight axis (y, or x when flipped)."""
    fig = ax.figure
    p0 = ax.transData.transform((0.0, 0.0))
    p1 = ax.transData.transform((1.0, 1.0))
    px = abs(p1[0] - p0[0]) if flip else abs(p1[1] - p0[1])
    return float(px) * 72.0 / float(fig.dpi)


def _set_limits(ax: Axes, scene: Scene, *, flip: bool) -> None:
    k = max(len(scene.x_ticks), 1)
    bar_w = max((b.width for b in scene.bars), default=0.0)
    pad = scene.x_expand * max(k - 1, 1) + scene.x_expand
    slot_lim = (1.0 - bar_w / 2.0 - pad, k + bar_w / 2.0 + pad)
    weight_lim = (0.0, max(scene.y_max, 1e-9) * 1.05)
    if flip:
        ax.set_ylim(*slot_lim)
        ax.set_xlim(*weight_lim)
        ax.set_yticks(list(scene.x_ticks))
        ax.set_yticklabels(list(scene.x_labels))
        ax.set_ylabel(scene.x_title)
    else:
        ax.set_xlim(*slot_lim)
        ax.set_ylim(*weight_lim)
        ax.set_xticks(list(scene.x_ticks))
        ax.set_xticklabels(list(scene.x_labels))
        ax.set_xlabel(scene.x_title)
    if scene.aspect_ratio is not None:
        ax.set_box_aspect(scene.aspect_ratio)


def _draw_bar(ax: Axes, b: Bar, colour: object, *, flip: bool) -> None:
    if flip:
        xy, w, h = (b.ymin, b.x - b.width / 2.0), b.height, b.width
    else:
        xy, w, h = (b.x - b.width / 2.0, b.ymin), b.width, b.height
    ax.add_patch(
        Rectangle(xy, w, h, facecolor=colour, edgecolor=colour, zorder=_ZORDER["bar"])
    )


def _draw_ribbon(ax: Axes, r: Ribbon, colour: object, alpha: float, *, flip: bool) -> None:
    xs = [s.x for s in r.stations]
    lo = [s.ymin for s in r.stations]
    hi = [s.ymax for s in r.stations]
    if flip:
        ax.fill_betweenx(xs, lo, hi, color=colour, alpha=alpha, lw=0, zorder=_ZORDER["ribbon"])
    else:
        ax.fill_between(xs, lo, hi, color=colour, alpha=alpha, lw=0, zorder=_ZORDER["ribbon"])


class _DataWidthLine(Line2D):
    """
    Line2D whose stroke width is given in data units along the weight axis.

    The width in points is resolved on every draw, after aspect and layout
    adjustments (set_box_aspect, tight_layout, savefig dpi) have fixed the
    axes box.
    """

    def __init__(self, xdata, ydata, *, data_width: float, flip: bool, **kwargs):
        super().__init__(xdata, ydata, **kwargs)
        self.data_width = float(data_width)
        self.flip = bool(flip)

    def points_width(self) -> float:
        if self.axes is None:
            return self.get_linewidth()
        return max(self.data_width * _data_to_points(self.axes, flip=self.flip), _MIN_LINE_PT)

    def draw(self, renderer):
        self.set_linewidth(self.points_width())
        super().draw(renderer)


def _draw_line(ax: Axes, ln: Line, colour: object, alpha: float, *, flip: bool) -> None:
    xs = [p[0] for p in ln.points]
    ys = [p[1] for p in ln.points]
    if flip:
        xs, ys = ys, xs
    artist = _DataWidthLine(
        xs,
        ys,
        data_width=ln.width,
        flip=flip,
        color=colour,
        alpha=alpha,
        solid_capstyle="butt",
        zorder=_ZORDER["line"],
    )
    ax.add_line(artist)
    artist.set_linewidth(artist.points_width())


def _draw_text(ax: Axes, t: Text, *, flip: bool) -> None:
    x, y = (t.y, t.x) if flip else (t.x, t.y)
    ax.text(
        x,
        y,
        t.text,
        rotation=t.angle,
        color=resolve_colour(t.colour),
        fontsize=t.size * _MM_TO_PT,
        ha="center",
        va="center",
        zorder=_ZORDER["shadow" if t.shadow else "text"],
    )


def _draw_legend(ax: Axes, scene: Scene, palette: dict[str, object]) -> None:
    handles = [
        Patch(facecolor=palette.get(key, "0.5"), edgecolor="none", label=key)
        for key in scene.levels
    ]
    ax.legend(
        handles=handles,
        loc="center left",
        bbox_to_anchor=(1.02, 0.5),
        frameon=False,
        fontsize="small",
    )


def render_scene(
    scene: Scene,
    ax: Axes | None = None,
    *,
    flip: bool = False,
    cmap: str = "tab20",
    colours: dict[str, object] | None = None,
    legend: bool = True,
) -> Axes:
    """
    Draw a Scene onto matplotlib axes.

    Parameters
    ----------
    scene : Scene
        Output of `parallel_sets`.
    ax : matplotlib.axes.Axes or None, optional
        Target axes; a new figure is created when omitted.
    flip : bool, optional
        Swap axes so variables run top to bottom.
    cmap : str, optional
        Colormap used for level colours (by legend position).
    colours : dict or None, optional
        Per-level-key colour overrides.
    legend : bool, optional
        Draw a fill legend with one entry per level key, in legend order.

    Returns
    -------
    matplotlib.axes.Axes
        The axes that were drawn on.

    Notes
    -----
    Line widths given in data units are converted to points at draw time,
    so later aspect or layout changes keep them proportional to the display
    height.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8.0, 6.0))

    palette = level_colours(scene, cmap, colours)
    _set_limits(ax, scene, flip=flip)

    for p in scene.primitives:
        if isinstance(p, Bar):
            _draw_bar(ax, p, palette.get(p.key, "0.5"), flip=flip)
        elif isinstance(p, Ribbon):
            _draw_ribbon(ax, p, palette.get(p.key, "0.5"), scene.alpha, flip=flip)
        elif isinstance(p, Line):
            _draw_line(ax, p, palette.get(p.key, "0.5"), scene.alpha, flip=flip)
        elif isinstance(p, Text):
            _draw_text(ax, p, flip=flip)
        else:
            raise TypeError(f"unknown primitive: {type(p).__name__}")
    if legend and scene.levels:
        _draw_legend(ax, scene, palette)
    return ax


def save_scene(
    scene: Scene,
    out_png: str | Path,
    *,
    dpi: int = 220,
    figsize: tuple[float, float] = (8.0, 6.0),
    fontsize: int = 12,
    flip: bool = False,
    cmap: str = "tab20",
    colours: dict[str, object] | None = None,
    legend: bool = True,
) -> Path:
    """Render `scene` to a PNG file and return its path."""
    apply_pub_style(fontsize=int(fontsize))
    out = Path(out_png)
    out.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=figsize)
    fig.patch.set_facecolor("white")
    render_scene(scene, ax, flip=flip, cmap=cmap, colours=colours, legend=legend)
    fig.tight_layout()
    fig.savefig(out, dpi=int(dpi))
    plt.close(fig)
    return out
