# parallel-sets/tests/test_levels.py
from __future__ import annotations

import pandas as pd
import pytest

from parallel_sets.levels import order_levels, prepare_levels
from parallel_sets.schema import CategoricalTable


def _abc_table() -> CategoricalTable:
    df = pd.DataFrame(
        {
            "v": ["A", "B", "C", "A", "C"],
            "u": ["x", "x", "y", "y", "y"],
            "w": [6.0, 5.0, 12.0, 4.0, 8.0],
        }
    )
    # A=10, B=5, C=20
    return CategoricalTable.from_frame(df, ["v", "u"], weight="w")


def test_natural_order_is_lexical():
    t = _abc_table()
    assert t.levels("v") == ["A", "B", "C"]


def test_descending_order_by_weight():
    t = order_levels(_abc_table(), ["v", "u"], order=1)
    assert t.levels("v") == ["C", "A", "B"]


def test_ascending_and_unchanged():
    t = order_levels(_abc_table(), ["v", "u"], order=[-1, 0])
    assert t.levels("v") == ["B", "A", "C"]
    assert t.levels("u") == ["x", "y"]

    t0 = order_levels(_abc_table(), ["v", "u"], order="unchanged")
    assert t0.levels("v") == ["A", "B", "C"]


def test_ties_keep_natural_order():
    df = pd.DataFrame({"v": ["B", "A", "C"], "u": ["x", "x", "x"], "w": [5.0, 5.0, 1.0]})
    t = CategoricalTable.from_frame(df, ["v", "u"], weight="w")
    assert order_levels(t, ["v", "u"], order=1).levels("v") == ["A", "B", "C"]
    assert order_levels(t, ["v", "u"], order=-1).levels("v") == ["C", "A", "B"]


def test_numeric_levels_sort_numerically():
    df = pd.DataFrame({"n": [10, 9, 100, 9], "u": ["a"] * 4})
    t = CategoricalTable.from_frame(df, ["n", "u"])
    assert t.levels("n") == [9, 10, 100]


def test_declared_categories_are_kept():
    s = pd.Categorical(["lo", "hi", "mid"], categories=["lo", "mid", "hi"])
    df = pd.DataFrame({"c": s, "u": ["a", "a", "b"]})
    t = CategoricalTable.from_frame(df, ["c", "u"])
    assert t.levels("c") == ["lo", "mid", "hi"]


def test_prepare_levels_builds_disambiguated_keys():
    df = pd.DataFrame({"a": ["yes", "no"], "b": ["yes", "yes"]})
    t = CategoricalTable.from_frame(df, ["a", "b"])
    _, ordering = prepare_levels(t, ["a", "b"], order=0)
    assert ordering.keys["a"] == ["a:no", "a:yes"]
    assert ordering.keys["b"] == ["b:yes"]
    # identical level text in two variables never collides
    assert ordering.full == ["a:no", "a:yes", "b:yes"]
    assert len(set(ordering.full)) == len(ordering.full)


def test_prepare_levels_warns_for_single_variable(capsys):
    df = pd.DataFrame({"a": ["x", "y"]})
    t = CategoricalTable.from_frame(df, ["a"])
    _, ordering = prepare_levels(t, ["a"])
    assert "at least two variables" in capsys.readouterr().err
    assert ordering.full == ["a:x", "a:y"]


def test_repeated_variable_last_nonzero_flag_wins():
    t = order_levels(_abc_table(), ["v", "u", "v"], order=[1, 0, -1])
    assert t.levels("v") == ["B", "A", "C"]


def test_invalid_order_flag_raises():
    with pytest.raises(ValueError):
        order_levels(_abc_table(), ["v", "u"], order="sideways")
