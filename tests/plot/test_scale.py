"""Tests for ordinal and continuous scales."""

import pytest

from benchplot.errors import InvariantError, NumericDataError
from benchplot.plot.aes import Aes
from benchplot.plot.config import PlotConfig
from benchplot.plot.key import Key
from benchplot.plot.plot import Plot
from benchplot.plot.projection import ProjectionParser
from benchplot.plot.scale import ordinal_scale
from benchplot.plot.units import UnitClass, UnitMetadata
from benchplot.plot.value import Point, Value, ValueKind


def _color_pt(v: str) -> Point:
    return Point().replace(Aes.COLOR, Value(kinds=ValueKind.DISCRETE, key=Key((("c", v),))))


def _unit_plot() -> Plot:
    parser = ProjectionParser()
    config = PlotConfig()
    config.set_iv(Aes.X, parser.parse("n"))
    config.set_dv(Aes.Y)
    config.set_iv(Aes.ROW, parser.parse(".unit"))
    return Plot(config)


def test_ordinal_scale_dense_and_ordered():
    """{"b","a","a","c"} maps to bound 3 with a < b < c."""
    pts = [_color_pt(v) for v in ("b", "a", "a", "c")]
    scale, bound = ordinal_scale(pts, Aes.COLOR)
    assert bound == 3
    assert [scale(p) for p in pts] == [1, 0, 0, 2]


def test_ordinal_scale_unbound_aes():
    """An unbound aesthetic has a single ordinal value."""
    scale, bound = ordinal_scale([_color_pt("a"), _color_pt("b")], Aes.ROW)
    assert bound == 1
    assert scale(_color_pt("a")) == 0


def test_ordinal_scale_rejects_unknown_value():
    """Looking up a value not in the originating points is an invariant failure."""
    scale, _ = ordinal_scale([_color_pt("a")], Aes.COLOR)
    with pytest.raises(InvariantError):
        scale(_color_pt("z"))


def test_continuous_scale_binary_rescale(make_record):
    """B/op values 2048..4096 rescale by 1024 with prefix Ki."""
    plot = _unit_plot()
    for n, v in (("1", 2048.0), ("2", 3072.0), ("3", 4096.0)):
        plot.add(make_record({"n": n}, {"B/op": v}))
    s = plot.continuous_scale(plot.points, Aes.Y, True)
    assert s.factor == 1024
    assert s.scaler.prefix == "Ki"
    assert s.label == "KiB/op"
    assert (s.lo, s.hi) == (2048.0, 4096.0)
    assert s(4096.0) == 4.0


def test_continuous_scale_no_rescale(make_record):
    """Without rescaling the scale is the identity with the bare unit."""
    plot = _unit_plot()
    for n, v in (("1", 2048.0), ("2", 4096.0)):
        plot.add(make_record({"n": n}, {"B/op": v}))
    s = plot.continuous_scale(plot.points, Aes.Y, False)
    assert s.factor == 1
    assert s.scaler.prefix == ""
    assert s.label == "B/op"


def test_continuous_scale_decimal_and_metadata_override(make_record):
    """sec/op uses SI prefixes; unit metadata can force a class."""
    plot = _unit_plot()
    plot.add(make_record({"n": "1"}, {"sec/op": 0.002}))
    s = plot.continuous_scale(plot.points, Aes.Y, True)
    assert s.scaler.prefix == "m"
    assert s.label == "msec/op"

    plot.set_units({"sec/op": UnitMetadata("sec/op", unit_class=UnitClass.BINARY)})
    s = plot.continuous_scale(plot.points, Aes.Y, True)
    assert s.scaler.prefix == ""


def test_continuous_scale_several_units(make_record):
    """Several units share one decimal prefix and are listed in first-seen order."""
    plot = _unit_plot()
    plot.add(make_record({"n": "1"}, {"sec/op": 3000.0, "B/op": 5000.0}))
    s = plot.continuous_scale(plot.points, Aes.Y, True)
    assert s.factor == 1000
    assert s.label == "ksec/op, kB/op"


def test_continuous_scale_iv_is_identity(make_record):
    """Scales of independent variables are never rescaled."""
    plot = _unit_plot()
    plot.add(make_record({"n": "8000"}, {"sec/op": 1.0}))
    s = plot.continuous_scale(plot.points, Aes.X, True)
    assert s.factor == 1
    assert s.label == "n"
    assert s.hi == 8000.0


def test_continuous_scale_requires_numeric(make_record):
    """Non-numeric data has no continuous scale."""
    plot = _unit_plot()
    plot.add(make_record({"n": "big"}, {"sec/op": 1.0}))
    with pytest.raises(NumericDataError):
        plot.continuous_scale(plot.points, Aes.X, False)
