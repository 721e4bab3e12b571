"""
Plot: points projected from benchmark records.

Each aesthetic (X, Y, COLOR, ROW, COL) is bound to a Projection. Adding a
record projects it through every aesthetic and appends the cartesian product
of the resulting values as points. The dependent variable (.value) is not
projected: it is filled in from the record's metric for whichever unit the
.unit aesthetic selected.

Example:
    config = PlotConfig()
    parser = ProjectionParser()
    config.set_iv(Aes.X, parser.parse("n"))
    config.set_dv(Aes.Y)
    config.set_iv(Aes.ROW, parser.parse(".unit"))
    plot = Plot(config)
    for rec in records:
        plot.add(rec)
    plot.transform_summarize()
"""

from __future__ import annotations

from typing import IO, Iterable, Optional

from benchplot.errors import ConfigError
from benchplot.plot.aes import Aes, AesMap
from benchplot.plot.config import PlotConfig
from benchplot.plot.gnuplot import render_gnuplot
from benchplot.plot.key import Field
from benchplot.plot.projection import Projection
from benchplot.plot.records import Record
from benchplot.plot.scale import ContinuousScale, continuous_scale
from benchplot.plot.stats import Assumption
from benchplot.plot.transform import compare, summarize
from benchplot.plot.units import UnitClass, UnitMetadata, class_of
from benchplot.plot.value import Point, Value, ValueKind
from benchplot.utils.logging import get_logger

logger = get_logger(__name__)


class Plot:
    """A set of points plus the bindings that produced them.

    Attributes:
        aes: Projection for each aesthetic.
        log_scale: Log base for each aesthetic, 0 for linear.
        dv_aes: Aesthetic showing .value, or None.
        unit_aes: Aesthetic whose projection carries .unit, or None.
        unit_field: The .unit field of unit_aes's projection.
        units: Per-unit metadata, see set_units.
        points: Points in insertion order (replaced wholesale by transforms).
    """

    def __init__(self, config: PlotConfig) -> None:
        unit_aes: Optional[Aes] = None
        unit_field: Optional[Field] = None
        dv_aes: Optional[Aes] = None
        for aes in Aes:
            proj = config.aes.get(aes)
            if proj.unit_field is not None:
                if unit_aes is not None:
                    raise ConfigError("at most one dimension may show .unit")
                unit_aes, unit_field = aes, proj.unit_field
            if proj.dv:
                if dv_aes is not None:
                    raise ConfigError("at most one dimension may show .value")
                dv_aes = aes
        if unit_aes is not None and dv_aes is None:
            raise ConfigError(
                f".unit is mapped to the {unit_aes.short_name} dimension, but no dimension shows .value"
            )
        if unit_aes is None and dv_aes is not None:
            raise ConfigError(
                f".value is mapped to the {dv_aes.short_name} dimension, but no dimension shows .unit"
            )

        self.aes: AesMap[Projection] = config.aes.copy()
        self.log_scale: AesMap[int] = config.log_scale.copy()
        self.unit_aes = unit_aes
        self.unit_field = unit_field
        self.dv_aes = dv_aes
        self.units: dict[str, UnitMetadata] = {}
        self.points: list[Point] = []

    def add(self, rec: Record) -> int:
        """Project rec onto zero or more points and append them.

        Returns:
            Number of points added.
        """
        n_before = len(self.points)
        # Work items are (next aes index, partial values). Candidates are
        # pushed in reverse so they pop in projection order.
        stack: list[tuple[int, list[Value]]] = [(0, [Value()] * len(Aes))]
        while stack:
            i, vals = stack.pop()
            if i == len(Aes):
                self.points.append(Point(tuple(vals)))
                continue

            aes = Aes(i)
            proj = self.aes.get(aes)
            if proj.dv:
                # Filled in at the .unit aesthetic.
                stack.append((i + 1, vals))
                continue

            candidates = []
            for val in proj.project(rec):
                nxt = list(vals)
                if proj.unit_field is not None:
                    unit = val.key.get(proj.unit_field)
                    metric = rec.value(unit)
                    if metric is None:
                        logger.debug(f"add: record has no {unit!r} value, dropping candidate")
                        continue
                    nxt[self.dv_aes] = Value(kinds=ValueKind.CONTINUOUS, val=metric)
                nxt[aes] = val
                candidates.append((i + 1, nxt))
            stack.extend(reversed(candidates))

        return len(self.points) - n_before

    def add_all(self, records: Iterable[Record]) -> int:
        """add() every record; returns the total number of points added."""
        return sum(self.add(rec) for rec in records)

    def label(self, pt: Point, aes: Aes) -> str:
        """Axis/legend label of aes: the unit name for .value, else the projection."""
        proj = self.aes.get(aes)
        if proj.dv:
            return self.unit_name(pt)
        return str(proj)

    def unit_name(self, pt: Point) -> str:
        """Unit of pt's dependent variable ("" without a .unit binding)."""
        if self.unit_aes is None:
            return ""
        key = pt.get(self.unit_aes).key
        return key.get(self.unit_field) if key is not None else ""

    def set_units(self, units: dict[str, UnitMetadata]) -> None:
        self.units = dict(units)

    def unit_class(self, unit: str) -> UnitClass:
        meta = self.units.get(unit)
        return meta.resolved_class() if meta is not None else class_of(unit)

    def assumption_for(self, pt: Point) -> Assumption:
        meta = self.units.get(self.unit_name(pt))
        return meta.assumption if meta is not None else Assumption.NOTHING

    def _require_dv(self, what: str) -> Aes:
        if self.dv_aes is None:
            raise ConfigError(f"{what} requires a dimension showing .value")
        return self.dv_aes

    def transform_summarize(self, aes: Optional[Aes] = None, confidence: float = 0.95) -> None:
        """Summarize aes (default: the .value aesthetic) in place of the raw points."""
        if aes is None:
            aes = self._require_dv("summarize")
        self.points = summarize(self.points, aes, confidence, self.assumption_for)
        logger.info(f"Summarized {aes.short_name}: {len(self.points)} points")

    def transform_compare(self, compare_aes: Aes = Aes.COLOR, ratio_aes: Optional[Aes] = None) -> None:
        """Replace .value (or ratio_aes) by its ratio to the first compare_aes value."""
        if ratio_aes is None:
            ratio_aes = self._require_dv("compare")
        self.points = compare(self.points, compare_aes, ratio_aes)
        logger.info(f"Compared {ratio_aes.short_name} by {compare_aes.short_name}: {len(self.points)} points")

    def continuous_scale(self, pts: list[Point], aes: Aes, rescale: bool) -> ContinuousScale:
        return continuous_scale(self, pts, aes, rescale)

    def gnuplot(self, term: str, out: IO[bytes], confidence: float = 0.95) -> None:
        """Write gnuplot source (term "") or a rendered image (term "png") to out.

        confidence is used for series that are not summarized yet.
        """
        render_gnuplot(self, term, out, confidence)

    def __repr__(self) -> str:
        return f"Plot(aes={self.aes!r}, points={len(self.points)})"
