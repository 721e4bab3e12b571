"""Plotly figure generation for benchmark plots.

This module provides the FigureGenerator class for creating Plotly figure
dictionaries from a Plot, the interactive counterpart of the gnuplot backend:
one subplot per (row, col) facet, one line per COLOR value, and a shaded
confidence band where one could be computed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import plotly.graph_objects as go
from plotly.colors import DEFAULT_PLOTLY_COLORS
from plotly.subplots import make_subplots

from benchplot.errors import NoDataError, NumericDataError
from benchplot.plot.aes import Aes
from benchplot.plot.plot import Plot
from benchplot.plot.scale import ordinal_scale
from benchplot.plot.transform import group_by, slice_by, summarize
from benchplot.plot.value import Point, ValueKind, format_number, points_kinds, value_sort_key
from benchplot.utils.logging import get_logger

logger = get_logger(__name__)

# Pixel size of one facet.
CELL_WIDTH = 640
CELL_HEIGHT = 480

BAND_OPACITY = 0.25


def _facet_key(pt: Point):
    return (
        value_sort_key(pt.get(Aes.COL)),
        value_sort_key(pt.get(Aes.ROW)),
        value_sort_key(pt.get(Aes.COLOR)),
        pt.get(Aes.X).val,
    )


class FigureGenerator:
    """Generates Plotly figure dictionaries from a Plot.

    Attributes:
        confidence: Confidence level for summarizing points that are not
            summarized yet, e.g. 0.95.
        rescale: Scale the dependent variable to a common SI/IEC prefix.
    """

    def __init__(self, confidence: float = 0.95, rescale: bool = True) -> None:
        self.confidence = confidence
        self.rescale = rescale

    def make_figure(self, plot: Plot) -> dict:
        """Generate Plotly figure dictionary for plot.

        Args:
            plot: Plot whose points are drawn.

        Returns:
            Plotly figure dictionary.

        Raises:
            NoDataError: If the plot has no points.
            NumericDataError: If X or Y is not numeric.
        """
        pts = list(plot.points)
        logger.info(f"FigureGenerator.make_figure: points={len(pts)}, aes={plot.aes!r}")
        if not pts:
            raise NoDataError("no data")
        if not points_kinds(pts, Aes.X) & ValueKind.CONTINUOUS:
            raise NumericDataError("non-numeric X data not supported")
        if not points_kinds(pts, Aes.Y) & ValueKind.CONTINUOUS:
            raise NumericDataError("non-numeric Y data not supported")

        row_scale, n_rows = ordinal_scale(pts, Aes.ROW)
        col_scale, n_cols = ordinal_scale(pts, Aes.COL)
        color_scale, _ = ordinal_scale(pts, Aes.COLOR)
        multiplot = n_rows > 1 or n_cols > 1

        pts.sort(key=_facet_key)
        cells = group_by(pts, lambda pt: (row_scale(pt), col_scale(pt)))

        titles = [""] * (n_rows * n_cols)
        if multiplot:
            for (row, col), cell in cells.items():
                parts = [cell[0].get(Aes.ROW).string_values() if n_rows > 1 else "",
                         cell[0].get(Aes.COL).string_values() if n_cols > 1 else ""]
                titles[row * n_cols + col] = " / ".join(p for p in parts if p)

        fig = make_subplots(
            rows=n_rows,
            cols=n_cols,
            subplot_titles=titles,
            horizontal_spacing=0.08,
            vertical_spacing=0.1,
        )

        legend_seen: set[str] = set()
        band_confidence: Optional[float] = None
        for (row, col), cell in cells.items():
            level = self._add_cell(fig, plot, cell, row + 1, col + 1, color_scale, legend_seen)
            if band_confidence is None:
                band_confidence = level

        if band_confidence is not None:
            # Legend entry for the bands.
            fig.add_trace(
                go.Scatter(
                    x=[None],
                    y=[None],
                    mode="lines",
                    fill="toself",
                    line=dict(color="gray"),
                    opacity=BAND_OPACITY,
                    name=f"{format_number(round(band_confidence * 100, 6))}% confidence",
                ),
                row=1,
                col=1,
            )

        for aes, update in ((Aes.X, fig.update_xaxes), (Aes.Y, fig.update_yaxes)):
            if plot.log_scale.get(aes):
                update(type="log")

        fig.update_layout(
            width=n_cols * CELL_WIDTH,
            height=n_rows * CELL_HEIGHT,
            margin=dict(l=60, r=20, t=60, b=60),
            showlegend=True,
            uirevision="keep",
        )
        result = fig.to_dict()
        logger.debug(f"Figure generated: {len(result.get('data', []))} traces")
        return result

    def _add_cell(
        self,
        fig: go.Figure,
        plot: Plot,
        pts: list[Point],
        row: int,
        col: int,
        color_scale,
        legend_seen: set[str],
    ) -> Optional[float]:
        """Add one facet's traces; returns the confidence of its first band, if any."""
        x_scale = plot.continuous_scale(pts, Aes.X, False)
        y_scale = plot.continuous_scale(pts, Aes.Y, self.rescale)
        fig.update_xaxes(title_text=x_scale.label, row=row, col=col)
        fig.update_yaxes(title_text=y_scale.label, row=row, col=col)

        band_confidence: Optional[float] = None
        for color, series in slice_by(pts, lambda pt: pt.get(Aes.COLOR)):
            series = summarize(series, Aes.Y, self.confidence, plot.assumption_for)
            rgb = DEFAULT_PLOTLY_COLORS[color_scale(series[0]) % len(DEFAULT_PLOTLY_COLORS)]
            name = color.key.string_values() if color.key is not None else ""

            ranged = [pt for pt in series if pt.get(Aes.Y).summary.has_range]
            if ranged:
                if band_confidence is None:
                    band_confidence = ranged[0].get(Aes.Y).summary.confidence
                xs = [x_scale(pt.get(Aes.X).val) for pt in ranged]
                lo = [y_scale(pt.get(Aes.Y).summary.lo) for pt in ranged]
                hi = [y_scale(pt.get(Aes.Y).summary.hi) for pt in ranged]
                fig.add_trace(
                    go.Scatter(
                        x=xs + xs[::-1],
                        y=hi + lo[::-1],
                        mode="lines",
                        fill="toself",
                        line=dict(width=0, color=rgb),
                        opacity=BAND_OPACITY,
                        hoverinfo="skip",
                        legendgroup=name,
                        showlegend=False,
                    ),
                    row=row,
                    col=col,
                )

            fig.add_trace(
                go.Scatter(
                    x=[x_scale(pt.get(Aes.X).val) for pt in series],
                    y=[y_scale(pt.get(Aes.Y).val) for pt in series],
                    mode="markers+lines",
                    line=dict(color=rgb),
                    name=name,
                    legendgroup=name,
                    showlegend=name not in legend_seen,
                ),
                row=row,
                col=col,
            )
            legend_seen.add(name)
        return band_confidence


def write_html(fig_dict: dict, path: Union[str, Path]) -> None:
    """Write a figure dictionary as a standalone HTML page."""
    go.Figure(fig_dict).write_html(str(path), include_plotlyjs="cdn")
    logger.info(f"Wrote {path}")
