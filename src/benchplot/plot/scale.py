"""Ordinal and continuous scales derived from a point list.

A scale is only valid against the points it was built from; looking up a
value it has never seen is a programming error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from benchplot.errors import InvariantError, NumericDataError
from benchplot.plot.aes import Aes
from benchplot.plot.units import Scaler, UnitClass, common_scale
from benchplot.plot.value import Point, Value, ValueKind, points_kinds, value_sort_key

if TYPE_CHECKING:
    from benchplot.plot.plot import Plot


def sorted_values(values: set[Value]) -> list[Value]:
    return sorted(values, key=value_sort_key)


def ordinal_scale(pts: list[Point], aes: Aes) -> tuple[Callable[[Point], int], int]:
    """Map the distinct aes values of pts onto [0, bound) in Value order.

    Returns:
        (scale, bound) where scale(point) is the dense index of point's aes value.
    """
    ordered = sorted_values({pt.get(aes) for pt in pts})
    index = {v: i for i, v in enumerate(ordered)}

    def scale(pt: Point) -> int:
        try:
            return index[pt.get(aes)]
        except KeyError:
            raise InvariantError(
                f"{aes.short_name} value {pt.get(aes)} is not in its ordinal scale"
            ) from None

    return scale, len(index)


@dataclass(frozen=True)
class ContinuousScale:
    """Linear map for one axis: values are divided by scaler.factor.

    Attributes:
        lo, hi: Range of the unscaled values.
        label: Axis label (prefixed unit for the dependent variable).
        scaler: Factor and prefix applied to values.
    """
    lo: float
    hi: float
    label: str
    scaler: Scaler = Scaler()

    @property
    def factor(self) -> float:
        return self.scaler.factor

    def __call__(self, v: float) -> float:
        return self.scaler(v)


def continuous_scale(plot: "Plot", pts: list[Point], aes: Aes, rescale: bool) -> ContinuousScale:
    """Derive the numeric scale of aes over pts.

    Only the dependent variable is ever rescaled: its label lists the units
    found on pts and, if rescale is set, one common SI/IEC prefix chosen from
    the largest value.

    Raises:
        NumericDataError: If aes is not continuous on every point.
    """
    if not points_kinds(pts, aes) & ValueKind.CONTINUOUS:
        raise NumericDataError(f"{aes.short_name} data must be numeric")

    lo = hi = 0.0
    for i, pt in enumerate(pts):
        val = pt.get(aes).val
        if i == 0:
            lo = hi = val
        else:
            lo, hi = min(lo, val), max(hi, val)

    projection = plot.aes.get(aes)
    if not pts or not projection.dv:
        return ContinuousScale(lo=lo, hi=hi, label=str(projection))

    # Several units show up when, say, color is bound to .unit.
    unit_names: list[str] = []
    for pt in pts:
        name = plot.unit_name(pt)
        if name not in unit_names:
            unit_names.append(name)

    scaler = Scaler()
    if rescale:
        cls = UnitClass.DECIMAL
        if len(unit_names) == 1:
            cls = plot.unit_class(unit_names[0])
        # Only the highest value: keep precision where the axis needs it.
        scaler = common_scale([hi], cls)

    label = ", ".join(scaler.prefix + n for n in unit_names)
    return ContinuousScale(lo=lo, hi=hi, label=label, scaler=scaler)
