"""Gnuplot backend: emits a gnuplot script for a Plot, or runs gnuplot on it.

Layout: one plot per (row, col) facet, laid out with ``set multiplot`` when
there is more than one. Inside a facet every COLOR value is a line, preceded
by a translucent confidence band when one could be computed.
"""

from __future__ import annotations

import io
import json
import shutil
import subprocess
from typing import IO, TYPE_CHECKING, Callable, Optional

from benchplot.errors import ConfigError, NoDataError, NumericDataError, RenderError
from benchplot.plot.aes import Aes
from benchplot.plot.scale import ordinal_scale
from benchplot.plot.transform import group_by, slice_by, summarize
from benchplot.plot.value import Point, ValueKind, format_number, points_kinds, value_sort_key
from benchplot.utils.logging import get_logger

if TYPE_CHECKING:
    from benchplot.plot.plot import Plot

logger = get_logger(__name__)

TERMINALS = ("", "png")

# Pixel size of one facet in rendered output.
CELL_WIDTH = 640
CELL_HEIGHT = 480


def gp_string(s: str) -> str:
    """s as a double-quoted gnuplot string literal."""
    return json.dumps(s, ensure_ascii=False)


def _emission_key(pt: Point):
    # X last and numeric: a line plot needs its points in x order.
    return (
        value_sort_key(pt.get(Aes.COL)),
        value_sort_key(pt.get(Aes.ROW)),
        value_sort_key(pt.get(Aes.COLOR)),
        pt.get(Aes.X).val,
    )


class GnuplotWriter:
    """Builds the gnuplot script for one Plot."""

    def __init__(self, plot: "Plot", confidence: float = 0.95) -> None:
        self.plot = plot
        self.confidence = confidence
        self._color_scale: Optional[Callable[[Point], int]] = None
        self._lines: list[str] = []

    def _emit(self, line: str) -> None:
        self._lines.append(line)

    def script(self, term: str = "") -> str:
        """The complete gnuplot script for terminal term.

        Raises:
            NoDataError: If the plot has no points.
            NumericDataError: If X or Y is not numeric.
            ConfigError: If term is not a supported terminal.
        """
        pts = list(self.plot.points)
        if not pts:
            raise NoDataError("no data")
        if not points_kinds(pts, Aes.X) & ValueKind.CONTINUOUS:
            raise NumericDataError("non-numeric X data not supported")
        if not points_kinds(pts, Aes.Y) & ValueKind.CONTINUOUS:
            raise NumericDataError("non-numeric Y data not supported")
        if term not in TERMINALS:
            raise ConfigError(f"unknown output type {term}")

        self._lines = []
        row_scale, n_rows = ordinal_scale(pts, Aes.ROW)
        col_scale, n_cols = ordinal_scale(pts, Aes.COL)
        multiplot = n_rows > 1 or n_cols > 1
        self._color_scale, _ = ordinal_scale(pts, Aes.COLOR)

        if term == "png":
            self._emit(f"set terminal pngcairo size {n_cols * CELL_WIDTH},{n_rows * CELL_HEIGHT}")

        if multiplot:
            self._emit(
                f"set multiplot layout {n_rows},{n_cols} columnsfirst "
                "margins char 12,1.0,char 4,char 2 spacing char 10, char 4"
            )

        for aes, axis in ((Aes.X, "x"), (Aes.Y, "y")):
            base = self.plot.log_scale.get(aes)
            if base:
                self._emit(f"set logscale {axis} {base}")

        # Engineering-notation tick labels; axis labels stay unprefixed.
        self._emit("set format xy '%.0s%c'")

        pts.sort(key=_emission_key)
        cells = group_by(pts, lambda pt: (row_scale(pt), col_scale(pt)))
        for col in range(n_cols):
            for row in range(n_rows):
                cell = cells.get((row, col), [])
                if multiplot and col == 0 and cell:
                    label = cell[0].get(Aes.ROW).string_values()
                    self._emit(f"set label 1 {gp_string(label)} at char 2, graph 0.5 center rotate by 90")
                if multiplot and row == 0 and cell:
                    self._emit(f"set title {gp_string(cell[0].get(Aes.COL).string_values())}")
                self._one_plot(cell)
                self._emit("unset label 1")
                self._emit("unset title")

        if multiplot:
            self._emit("unset multiplot")

        logger.debug(f"gnuplot: {len(pts)} points in {n_rows}x{n_cols} cells")
        return "".join(line + "\n" for line in self._lines)

    def _one_plot(self, pts: list[Point]) -> None:
        if not pts:
            self._emit("set multiplot next")
            return

        # gnuplot does the SI scaling of tick labels, so no rescaling here.
        x_scale = self.plot.continuous_scale(pts, Aes.X, False)
        y_scale = self.plot.continuous_scale(pts, Aes.Y, False)
        self._emit(f"set xlabel {gp_string(x_scale.label)}")
        self._emit(f"set ylabel {gp_string(y_scale.label)}")

        plot_args: list[str] = []
        data: list[str] = []
        band_confidence: Optional[float] = None
        for color, series in slice_by(pts, lambda pt: pt.get(Aes.COLOR)):
            color_idx = self._color_scale(series[0]) + 1
            series = summarize(series, Aes.Y, self.confidence, self.plot.assumption_for)

            ranged = [pt for pt in series if pt.get(Aes.Y).summary.has_range]
            if ranged:
                if band_confidence is None:
                    band_confidence = ranged[0].get(Aes.Y).summary.confidence
                plot_args.append(
                    f"'-' using 1:2:3 with filledcurves title '' fc linetype {color_idx} "
                    "fs transparent solid 0.25"
                )
                for pt in ranged:
                    y = pt.get(Aes.Y).summary
                    data.append(
                        f"{format_number(x_scale(pt.get(Aes.X).val))} "
                        f"{format_number(y_scale(y.lo))} {format_number(y_scale(y.hi))}"
                    )
                data.append("e")

            title = color.key.string_values() if color.key is not None else ""
            plot_args.append(f"'-' using 1:2 with lp title {gp_string(title)} linecolor {color_idx}")
            for pt in series:
                data.append(
                    f"{format_number(x_scale(pt.get(Aes.X).val))} "
                    f"{format_number(y_scale(pt.get(Aes.Y).val))}"
                )
            data.append("e")

        if band_confidence is not None:
            plot_args.append(
                f"1/0 with filledcurves title '{format_number(round(band_confidence * 100, 6))}% confidence' "
                "fc linetype 0 fs transparent solid 0.25"
            )

        self._emit("plot " + ", ".join(plot_args))
        self._lines.extend(data)


def render_gnuplot(plot: "Plot", term: str, out: IO[bytes], confidence: float = 0.95) -> None:
    """Write plot's gnuplot script (term "") or its gnuplot rendering (term "png") to out.

    Raises:
        BenchplotError: From GnuplotWriter.script.
        RenderError: If gnuplot is missing or fails.
    """
    code = GnuplotWriter(plot, confidence).script(term).encode("utf-8")
    if term == "":
        out.write(code)
        return

    exe = shutil.which("gnuplot")
    if exe is None:
        raise RenderError("gnuplot executable not found on PATH")
    logger.info(f"Running {exe} (terminal {term})")
    try:
        proc = subprocess.run([exe], input=code, stdout=subprocess.PIPE, check=True)
    except subprocess.CalledProcessError as e:
        raise RenderError(f"gnuplot failed: exit status {e.returncode}") from e
    out.write(proc.stdout)


def gnuplot_script(plot: "Plot", confidence: float = 0.95) -> str:
    """Convenience: the script as text."""
    buf = io.BytesIO()
    render_gnuplot(plot, "", buf, confidence)
    return buf.getvalue().decode("utf-8")
