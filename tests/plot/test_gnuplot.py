"""Tests for gnuplot script generation."""

import io

import pytest

from benchplot.errors import ConfigError, NoDataError, NumericDataError
from benchplot.plot.aes import Aes
from benchplot.plot.config import PlotConfig
from benchplot.plot.gnuplot import GnuplotWriter, gnuplot_script, gp_string
from benchplot.plot.plot import Plot
from benchplot.plot.projection import ProjectionParser


def _plot(x="n", color="name", col=None) -> Plot:
    parser = ProjectionParser()
    config = PlotConfig()
    config.set_iv(Aes.X, parser.parse(x))
    config.set_dv(Aes.Y)
    config.set_iv(Aes.ROW, parser.parse(".unit"))
    config.set_iv(Aes.COLOR, parser.parse(color))
    if col is not None:
        config.set_iv(Aes.COL, parser.parse(col))
    return Plot(config)


def _simple_records(make_record):
    return [
        make_record({"name": "A", "n": "1"}, {"sec/op": 10.0}),
        make_record({"name": "A", "n": "2"}, {"sec/op": 20.0}),
        make_record({"name": "B", "n": "1"}, {"sec/op": 30.0}),
        make_record({"name": "B", "n": "2"}, {"sec/op": 40.0}),
    ]


def test_single_cell_script(make_record):
    """One facet, two colors, no intervals."""
    plot = _plot()
    plot.add_all(_simple_records(make_record))
    expected = "\n".join([
        "set format xy '%.0s%c'",
        'set xlabel "n"',
        'set ylabel "sec/op"',
        "plot '-' using 1:2 with lp title \"A\" linecolor 1, '-' using 1:2 with lp title \"B\" linecolor 2",
        "1 10",
        "2 20",
        "e",
        "1 30",
        "2 40",
        "e",
        "unset label 1",
        "unset title",
    ]) + "\n"
    assert gnuplot_script(plot) == expected


def test_script_is_deterministic(make_record):
    """The script does not depend on record order or repeated rendering."""
    records = _simple_records(make_record)
    p1 = _plot()
    p1.add_all(records)
    p2 = _plot()
    p2.add_all(reversed(records))
    assert gnuplot_script(p1) == gnuplot_script(p1) == gnuplot_script(p2)


def test_gnuplot_writes_bytes(make_record):
    """Plot.gnuplot with an empty terminal writes the script."""
    plot = _plot()
    plot.add_all(_simple_records(make_record))
    buf = io.BytesIO()
    plot.gnuplot("", buf)
    assert buf.getvalue().decode() == gnuplot_script(plot)


def test_log_scale_directives(make_record):
    """Log-scaled axes get a set logscale line with their base."""
    parser = ProjectionParser()
    config = PlotConfig()
    config.set_iv(Aes.X, parser.parse("n"))
    config.set_dv(Aes.Y)
    config.set_iv(Aes.ROW, parser.parse(".unit"))
    config.set_log_scale(Aes.X, 2)
    config.set_log_scale(Aes.Y, 10)
    plot = Plot(config)
    plot.add_all(_simple_records(make_record))
    lines = gnuplot_script(plot).splitlines()
    assert lines[:2] == ["set logscale x 2", "set logscale y 10"]


def test_confidence_band(make_record):
    """Six samples per point produce a band and a confidence legend entry."""
    plot = _plot()
    for n in ("1", "2"):
        for i in range(6):
            plot.add(make_record({"name": "A", "n": n}, {"sec/op": 10.0 * int(n) + i}))
    script = gnuplot_script(plot)
    assert "'-' using 1:2:3 with filledcurves title '' fc linetype 1 fs transparent solid 0.25" in script
    assert "1/0 with filledcurves title '95% confidence'" in script
    lines = script.splitlines()
    assert "1 10 15" in lines
    assert "2 20 25" in lines
    assert "1 12.5" in lines


def test_multiplot_layout_and_labels(make_record):
    """Several units make facet rows with row labels."""
    plot = _plot()
    plot.add(make_record({"name": "A", "n": "1"}, {"sec/op": 1.0, "B/op": 64.0}))
    script = gnuplot_script(plot)
    lines = script.splitlines()
    assert lines[0].startswith("set multiplot layout 2,1 columnsfirst")
    assert 'set label 1 "B/op" at char 2, graph 0.5 center rotate by 90' in lines
    assert 'set label 1 "sec/op" at char 2, graph 0.5 center rotate by 90' in lines
    assert lines.index('set ylabel "B/op"') < lines.index('set ylabel "sec/op"')
    assert lines[-1] == "unset multiplot"


def test_empty_cell_skipped(make_record):
    """A facet without points advances the multiplot."""
    plot = _plot(col="name")
    plot.add(make_record({"name": "A", "n": "1"}, {"sec/op": 1.0}))
    plot.add(make_record({"name": "B", "n": "1"}, {"B/op": 2.0}))
    lines = gnuplot_script(plot).splitlines()
    assert lines.count("set multiplot next") == 2
    assert 'set title "B"' in lines
    assert 'set label 1 "sec/op" at char 2, graph 0.5 center rotate by 90' in lines


def test_png_terminal_size(make_record):
    """The png terminal is sized per facet."""
    plot = _plot()
    plot.add(make_record({"name": "A", "n": "1"}, {"sec/op": 1.0, "B/op": 64.0}))
    script = GnuplotWriter(plot).script("png")
    assert script.splitlines()[0] == "set terminal pngcairo size 640,960"


def test_errors(make_record):
    """Empty plots, non-numeric axes and unknown terminals are rejected."""
    with pytest.raises(NoDataError):
        gnuplot_script(_plot())

    plot = _plot(x="name")
    plot.add(make_record({"name": "A"}, {"sec/op": 1.0}))
    with pytest.raises(NumericDataError):
        gnuplot_script(plot)

    plot = _plot()
    plot.add_all(_simple_records(make_record))
    with pytest.raises(ConfigError):
        GnuplotWriter(plot).script("svg")


def test_gp_string_escapes():
    """Quotes and backslashes are escaped."""
    assert gp_string('a"b\\c') == '"a\\"b\\\\c"'


def test_confidence_reaches_bands(bench_records):
    """The requested level is used for summaries and named in the legend."""
    plot = _plot()
    plot.add_all(bench_records)
    buf = io.BytesIO()
    plot.gnuplot("", buf, 0.5)
    script = buf.getvalue().decode("utf-8")
    # Two runs per series give a 50% band but not a 95% one.
    assert "with filledcurves title ''" in script
    assert "title '50% confidence'" in script

    default = _plot()
    default.add_all(bench_records)
    assert "confidence" not in gnuplot_script(default)


def test_legend_uses_summarized_level(bench_records):
    """Points summarized earlier keep their own level in the legend."""
    plot = _plot()
    plot.add_all(bench_records)
    plot.transform_summarize(confidence=0.5)
    script = gnuplot_script(plot, 0.95)
    assert "title '50% confidence'" in script
    assert "95% confidence" not in script
