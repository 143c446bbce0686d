# parallel-sets/tests/test_shared_flags.py
import pytest

from parallel_sets import _shared


def test_norm_order_flag_synonyms():
    f = _shared.norm_order_flag
    assert f(1) == 1
    assert f(5) == 1
    assert f(-1) == -1
    assert f(0) == 0
    assert f("decreasing") == 1
    assert f("desc") == 1
    assert f("increasing") == -1
    assert f("ASC") == -1
    assert f("unchanged") == 0
    assert f("none") == 0


def test_norm_order_flag_rejects_garbage():
    with pytest.raises(ValueError, match="invalid order flag"):
        _shared.norm_order_flag("sideways")
    with pytest.raises(ValueError, match="invalid order flag"):
        _shared.norm_order_flag(True)


def test_norm_method():
    assert _shared.norm_method("Parset") == "parset"
    assert _shared.norm_method(" angle ") == "angle"
    assert _shared.norm_method("adj_angle") == "adj.angle"
    with pytest.raises(ValueError, match="unsupported method"):
        _shared.norm_method("sankey")


def test_level_keys_are_variable_qualified():
    assert _shared.make_level_key("gear", 3) == "gear:3"
    assert _shared.make_level_key("cyl", 3) != _shared.make_level_key("gear", 3)


def test_recycle():
    assert _shared.recycle(0, 3) == [0, 0, 0]
    assert _shared.recycle([1, 0], 5) == [1, 0, 1, 0, 1]
    assert _shared.recycle([1, 0, -1], 2) == [1, 0]
    with pytest.raises(ValueError):
        _shared.recycle([], 2)


def test_warn_goes_to_stderr(capsys):
    _shared.warn("something odd")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[WARN] something odd" in captured.err


def test_dlog_respects_env(monkeypatch, capsys):
    monkeypatch.delenv("PARSETS_DEBUG", raising=False)
    _shared.dlog("hidden")
    assert capsys.readouterr().err == ""

    monkeypatch.setenv("PARSETS_DEBUG", "1")
    _shared.dlog("shown")
    assert "[DEBUG] shown" in capsys.readouterr().err


def test_format_level_drops_integral_float_suffix():
    assert _shared.format_level(4.0) == "4"
    assert _shared.format_level(2.5) == "2.5"
    assert _shared.format_level(3) == "3"
    assert _shared.format_level("Crew") == "Crew"
    assert _shared.make_level_key("cyl", 6.0) == "cyl:6"
