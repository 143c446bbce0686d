# parallel-sets/tests/test_layout_scene.py
from __future__ import annotations

from collections import defaultdict

import pandas as pd
import pytest

from parallel_sets import Bar, Line, Ribbon, Text, parallel_sets
from parallel_sets.datasets import load_mtcars, load_titanic

METHODS = ["parset", "angle", "adj.angle", "hammock"]


def _kw(method: str) -> dict:
    return {"ratio": 0.2} if method in {"hammock", "adj.angle"} else {}


@pytest.mark.parametrize("method", METHODS)
def test_axis_heights_sum_to_total_weight(method):
    df = load_titanic()
    variables = ["Class", "Survived", "Sex", "Class"]
    scene = parallel_sets(variables, df, weight="Freq", method=method, **_kw(method))

    heights: dict[int, float] = defaultdict(float)
    for b in scene.bars:
        heights[b.slot] += b.height
    assert sorted(heights) == [1, 2, 3, 4]
    for total in heights.values():
        assert total == pytest.approx(2201)
    assert scene.y_max == pytest.approx(2201)


@pytest.mark.parametrize("method", METHODS)
def test_scene_is_idempotent(method):
    a = parallel_sets(["gear", "cyl"], load_mtcars(), method=method, **_kw(method))
    b = parallel_sets(["gear", "cyl"], load_mtcars(), method=method, **_kw(method))
    assert a == b


def test_draw_order_bars_ribbons_labels():
    scene = parallel_sets(["gear", "cyl", "am"], load_mtcars(), method="angle")
    kinds = [type(p) for p in scene.primitives]
    first_ribbon = kinds.index(Ribbon)
    first_text = kinds.index(Text)
    assert all(k is Bar for k in kinds[:first_ribbon])
    assert all(k is Ribbon for k in kinds[first_ribbon:first_text])
    assert all(k is Text for k in kinds[first_text:])
    # one set of ribbons per adjacent pair
    assert {r.pair for r in scene.ribbons} == {1, 2}


def test_end_to_end_two_by_two_parset():
    df = pd.DataFrame(
        {
            "L": ["A", "A", "B", "B"],
            "R": ["X", "Y", "X", "Y"],
            "w": [3, 1, 2, 1],
        }
    )
    scene = parallel_sets(["L", "R"], df, weight="w", method="parset")
    tops = {
        (r.key, r.freq): (r.stations[0].ymax, r.stations[1].ymax) for r in scene.ribbons
    }
    assert tops[("L:A", 3.0)] == (3.0, 3.0)
    assert tops[("L:A", 1.0)] == (4.0, 6.0)
    assert tops[("L:B", 2.0)] == (6.0, 5.0)
    assert tops[("L:B", 1.0)] == (7.0, 7.0)

    assert scene.levels == ("L:A", "L:B", "R:X", "R:Y")
    assert scene.x_ticks == (1, 2)
    assert scene.x_labels == ("L", "R")
    assert scene.x_title == ""
    assert scene.x_expand == pytest.approx(0.1)


def test_adjusted_angle_emits_lines():
    scene = parallel_sets(["gear", "cyl"], load_mtcars(), method="adj.angle", ratio=0.2)
    assert scene.ribbons == []
    assert len(scene.lines) == 8
    assert all(isinstance(x, Line) for x in scene.lines)


def test_hammock_defaults_aspect_ratio():
    scene = parallel_sets(["gear", "cyl"], load_mtcars(), method="hammock", ratio=0.2)
    assert scene.aspect_ratio == 1.0
    half = max((r.stations[0].ymax - r.stations[0].ymin) / 2 for r in scene.ribbons)
    assert half == pytest.approx(3.2)

    other = parallel_sets(["gear", "cyl"], load_mtcars(), method="angle")
    assert other.aspect_ratio is None


def test_constant_weight_scales_display():
    scene = parallel_sets(["gear", "cyl"], load_mtcars(), weight=2, method="parset")
    assert scene.y_max == pytest.approx(64)


def test_single_variable_warns_and_draws_no_ribbons(capsys):
    scene = parallel_sets(["gear"], load_mtcars(), method="parset")
    assert "at least two variables" in capsys.readouterr().err
    assert scene.ribbons == []
    assert sum(b.height for b in scene.bars) == pytest.approx(32)
    assert scene.texts


def test_no_variables_gives_empty_scene(capsys):
    scene = parallel_sets([], load_mtcars(), method="parset")
    assert "[WARN]" in capsys.readouterr().err
    assert scene.primitives == ()


def test_unknown_method_is_rejected():
    with pytest.raises(ValueError, match="unsupported method"):
        parallel_sets(["gear", "cyl"], load_mtcars(), method="sankey")


@pytest.mark.parametrize("method", ["hammock", "adj.angle"])
def test_ratio_is_required(method):
    with pytest.raises(ValueError, match="ratio required"):
        parallel_sets(["gear", "cyl"], load_mtcars(), method=method)


def test_unknown_parameter_is_rejected():
    with pytest.raises(ValueError):
        parallel_sets(["gear", "cyl"], load_mtcars(), colour_scheme="rainbow")


def test_order_per_variable():
    scene = parallel_sets(["gear", "cyl"], load_mtcars(), method="parset", order=[-1, 0])
    gear = [b.label for b in scene.bars if b.slot == 1]
    cyl = [b.label for b in scene.bars if b.slot == 2]
    assert gear == ["5", "4", "3"]
    assert cyl == ["4", "6", "8"]


def test_variables_as_single_string():
    scene = parallel_sets("gear", load_mtcars(), method="parset")
    assert scene.x_labels == ("gear",)
