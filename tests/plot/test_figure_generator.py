"""Tests for Plotly figure generation."""

import pytest

from benchplot.errors import NoDataError
from benchplot.plot.aes import Aes
from benchplot.plot.config import PlotConfig
from benchplot.plot.figure_generator import FigureGenerator, write_html
from benchplot.plot.plot import Plot
from benchplot.plot.projection import ProjectionParser


def _plot(log_x: bool = False) -> Plot:
    parser = ProjectionParser()
    config = PlotConfig()
    config.set_iv(Aes.X, parser.parse("n"))
    config.set_dv(Aes.Y)
    config.set_iv(Aes.ROW, parser.parse(".unit"))
    config.set_iv(Aes.COLOR, parser.parse("name"))
    if log_x:
        config.set_log_scale(Aes.X, 2)
    return Plot(config)


def test_make_figure_traces_and_layout(bench_records):
    """One line per color per facet; two facets for two units."""
    plot = _plot()
    plot.add_all(bench_records)
    fig = FigureGenerator().make_figure(plot)
    lines = [t for t in fig["data"] if t.get("mode") == "markers+lines"]
    # 2 units x 2 names.
    assert len(lines) == 4
    assert sorted({t["name"] for t in lines}) == ["Decode", "Encode"]
    assert sum(1 for t in lines if t["showlegend"]) == 2
    assert fig["layout"]["height"] == 2 * 480
    assert fig["layout"]["width"] == 640


def test_make_figure_rescales_bytes(bench_records):
    """B/op values are shown in KiB with the prefix in the axis title."""
    plot = _plot()
    plot.add_all(bench_records)
    fig = FigureGenerator().make_figure(plot)
    titles = {fig["layout"][k]["title"]["text"] for k in fig["layout"] if k.startswith("yaxis")}
    assert "KiB/op" in titles
    byte_lines = [t for t in fig["data"] if t.get("mode") == "markers+lines" and t.get("yaxis", "y") == "y"]
    assert list(byte_lines[0]["y"]) == [8.0, 64.0]


def test_make_figure_band(make_record):
    """Enough samples draw a band and add a confidence legend entry."""
    plot = _plot()
    for n in ("1", "2"):
        for i in range(6):
            plot.add(make_record({"name": "A", "n": n}, {"sec/op": float(i)}))
    fig = FigureGenerator(confidence=0.95).make_figure(plot)
    bands = [t for t in fig["data"] if t.get("fill") == "toself"]
    assert any(t.get("name") == "95% confidence" for t in bands)
    assert len(bands) == 2


def test_make_figure_log_axis(bench_records):
    """Log-scaled aesthetics become log axes."""
    plot = _plot(log_x=True)
    plot.add_all(bench_records)
    fig = FigureGenerator().make_figure(plot)
    assert fig["layout"]["xaxis"]["type"] == "log"


def test_make_figure_no_data():
    """An empty plot cannot be drawn."""
    with pytest.raises(NoDataError):
        FigureGenerator().make_figure(_plot())


def test_write_html(tmp_path, bench_records):
    """write_html produces an HTML page."""
    plot = _plot()
    plot.add_all(bench_records)
    out = tmp_path / "plot.html"
    write_html(FigureGenerator().make_figure(plot), out)
    assert "<html>" in out.read_text(encoding="utf-8")


def test_make_figure_legend_uses_summarized_level(bench_records):
    """The legend names the level the drawn bands were computed at."""
    plot = _plot()
    plot.add_all(bench_records)
    plot.transform_summarize(confidence=0.5)
    fig = FigureGenerator(confidence=0.95).make_figure(plot)
    names = {t.get("name") for t in fig["data"]}
    assert "50% confidence" in names
    assert "95% confidence" not in names
