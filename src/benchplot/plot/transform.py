"""
Point transforms: summarize and compare.

Both take a list of points and return a new list; the input is never
modified. Grouping always preserves first-seen order, so the output is
deterministic for a given input order.

summarize(pts, aes, confidence)
    Collapse points that differ only in aes into one point whose aes value is
    a confidence-interval summary of the group.

compare(pts, compare_aes, ratio_aes)
    Normalize ratio_aes against a baseline: the first value of compare_aes
    in sort order. Each non-baseline value of compare_aes becomes one point
    holding median(group) / median(baseline group).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Hashable, Iterable, Optional, TypeVar

from benchplot.errors import ConfigError, NumericDataError
from benchplot.plot.aes import Aes
from benchplot.plot.stats import Assumption, median
from benchplot.plot.value import Point, Value, ValueKind, points_kinds, value_sort_key
from benchplot.utils.logging import get_logger

if TYPE_CHECKING:
    from benchplot.plot.plot import Plot

logger = get_logger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def group_by(items: Iterable[T], grouper: Callable[[T], K]) -> dict[K, list[T]]:
    """Group items by grouper(item). Groups and their members keep input order."""
    out: dict[K, list[T]] = {}
    for item in items:
        out.setdefault(grouper(item), []).append(item)
    return out


def slice_by(items: list[T], grouper: Callable[[T], K]) -> list[tuple[K, list[T]]]:
    """Split items into runs of consecutive elements with equal grouper(item)."""
    runs: list[tuple[K, list[T]]] = []
    for item in items:
        k = grouper(item)
        if runs and runs[-1][0] == k:
            runs[-1][1].append(item)
        else:
            runs.append((k, [item]))
    return runs


def points_sample(pts: Iterable[Point], aes: Aes) -> list[float]:
    """The continuous aes values of pts."""
    vals = []
    for pt in pts:
        v = pt.get(aes)
        if not v.has(ValueKind.CONTINUOUS):
            raise NumericDataError(f"non-continuous {aes.short_name} value {v}")
        vals.append(v.val)
    return vals


def summarize(
    pts: list[Point],
    aes: Aes,
    confidence: float,
    assumption_for: Optional[Callable[[Point], Assumption]] = None,
) -> list[Point]:
    """Replace each group of points that differ only in aes by one summary point.

    Args:
        pts: Input points.
        aes: Aesthetic to summarize; must be continuous on every point.
        confidence: Confidence level of the interval, e.g. 0.95.
        assumption_for: Chooses the distribution assumption for a group from
            its first point. Defaults to Assumption.NOTHING.

    Returns:
        One point per distinct combination of the other aesthetics. Input
        that is already summarized is returned unchanged.

    Raises:
        NumericDataError: If aes is not continuous on every point.
    """
    kinds = points_kinds(pts, aes)
    if kinds & ValueKind.SUMMARY:
        return list(pts)
    if not kinds & ValueKind.CONTINUOUS:
        raise NumericDataError(f"summarize: {aes.short_name} data must be numeric")

    groups = group_by(pts, lambda pt: pt.without(aes))

    # Keep it a ratio if the input is.
    out_kinds = ValueKind.CONTINUOUS | ValueKind.SUMMARY | (kinds & ValueKind.RATIO)
    out: list[Point] = []
    for group in groups.values():
        assumption = assumption_for(group[0]) if assumption_for is not None else Assumption.NOTHING
        summary = assumption.summary(points_sample(group, aes), confidence)
        for w in summary.warnings:
            logger.debug(f"summarize {aes.short_name}: {w}")
        v = Value(kinds=out_kinds, val=summary.center, summary=summary)
        out.append(group[0].replace(aes, v))

    logger.debug(f"summarize {aes.short_name}: {len(pts)} points -> {len(out)} points")
    return out


def compare(pts: list[Point], compare_aes: Aes, ratio_aes: Aes) -> list[Point]:
    """Normalize ratio_aes of every compare_aes value against a common baseline.

    Points are stably sorted by compare_aes and the first value becomes the
    baseline for the whole set. Groups of points that agree on every other
    aesthetic but have no baseline member are dropped.

    Raises:
        NumericDataError: If ratio_aes is not continuous on every point.
    """
    if not pts:
        return []
    if not points_kinds(pts, ratio_aes) & ValueKind.CONTINUOUS:
        raise NumericDataError(f"compare: {ratio_aes.short_name} data must be numeric")

    # Sorting up front keeps every group below sorted by compare_aes.
    pts = sorted(pts, key=lambda pt: value_sort_key(pt.get(compare_aes)))
    baseline = pts[0].get(compare_aes)

    groups = group_by(pts, lambda pt: pt.without(compare_aes, ratio_aes))

    out: list[Point] = []
    n_dropped = 0
    for group in groups.values():
        cmp_groups = group_by(group, lambda pt: pt.get(compare_aes))
        if baseline not in cmp_groups:
            # Nothing to normalize against.
            n_dropped += 1
            continue
        base_median = median(points_sample(cmp_groups[baseline], ratio_aes))
        for cmp_val, cmp_pts in cmp_groups.items():
            if cmp_val == baseline:
                continue
            ratio = _ratio(median(points_sample(cmp_pts, ratio_aes)), base_median)
            new_cmp = Value(
                kinds=cmp_val.kinds | ValueKind.RATIO,
                key=cmp_val.key,
                val=cmp_val.val,
                denom=baseline.key,
            )
            new_ratio = Value(kinds=ValueKind.CONTINUOUS | ValueKind.RATIO, val=ratio)
            out.append(cmp_pts[0].replace(compare_aes, new_cmp).replace(ratio_aes, new_ratio))

    if n_dropped:
        logger.debug(f"compare: dropped {n_dropped} groups without baseline {baseline}")
    logger.debug(f"compare {compare_aes.short_name}: {len(pts)} points -> {len(out)} points")
    return out


def _ratio(num: float, denom: float) -> float:
    if denom == 0:
        return math.copysign(math.inf, num) if num else math.nan
    return num / denom


@dataclass(frozen=True)
class TransformOpt:
    """A named transform that can be requested by configuration."""
    doc: str
    apply: Callable[["Plot", float], Any]


TRANSFORMS: dict[str, TransformOpt] = {
    "compare": TransformOpt(
        "normalize each value against the first color value at the same X",
        lambda plot, confidence: plot.transform_compare(),
    ),
    "summarize": TransformOpt(
        "collapse repeated measurements of .value into a median and confidence interval",
        lambda plot, confidence: plot.transform_summarize(confidence=confidence),
    ),
}


def get_transform(name: str) -> TransformOpt:
    """Look up a transform by name.

    Raises:
        ConfigError: If no transform has that name.
    """
    try:
        return TRANSFORMS[name]
    except KeyError:
        known = ", ".join(sorted(TRANSFORMS))
        raise ConfigError(f"unknown transform {name!r} (known: {known})") from None
