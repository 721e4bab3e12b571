"""
Sample statistics used by the summarize and compare transforms.

Two assumptions are supported:

- Assumption.NOTHING (the default): distribution-free. The center is the
  median and the confidence interval comes from the sign test, i.e. order
  statistics chosen with the Binomial(n, 1/2) distribution. With too few
  samples no interval exists at the requested confidence; the interval is
  then (-inf, +inf) and a warning is attached to the summary.
- Assumption.EXACT: every measurement is exact. The center is the value and
  the interval is degenerate; differing values produce a warning.

numpy for samples, scipy.stats for the binomial distribution; no plotting
dependencies.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import numpy as np
from scipy.stats import binom


@dataclass(frozen=True)
class Summary:
    """Center and confidence interval of a sample.

    lo/hi are -inf/+inf when no interval could be computed.
    """
    center: float
    lo: float
    hi: float
    confidence: float
    warnings: tuple[str, ...] = ()

    @property
    def has_range(self) -> bool:
        return not math.isinf(self.lo)


def as_sample(values: Iterable[float]) -> np.ndarray:
    """Sorted float array of values."""
    return np.sort(np.asarray(list(values), dtype=float))


def median(values: Iterable[float]) -> float:
    sample = as_sample(values)
    if sample.size == 0:
        return math.nan
    return float(np.median(sample))


def median_ci(sample: np.ndarray, confidence: float) -> tuple[float, float, bool]:
    """Distribution-free confidence interval for the median of a sorted sample.

    Returns (lo, hi, ok). The interval [x(j), x(n-j+1)] covers the median with
    probability 1 - 2*P(X <= j-1); j is the largest order that still reaches
    the requested confidence. ok is False if even j=1 falls short.
    """
    n = int(sample.size)
    if n == 0:
        return math.nan, math.nan, False
    alpha = (1.0 - confidence) / 2.0
    # Smallest k with P(X <= k) > alpha; ppf gives the smallest with >= alpha.
    k = int(binom.ppf(alpha, n, 0.5))
    if binom.cdf(k, n, 0.5) <= alpha:
        k += 1
    j = min(max(k, 0), n // 2)
    if j == 0:
        return -math.inf, math.inf, False
    return float(sample[j - 1]), float(sample[n - j]), True


def _min_samples(confidence: float) -> int:
    n = 1
    while 2.0 * 0.5 ** n > 1.0 - confidence and n < 1024:
        n += 1
    return n


class Assumption(Enum):
    """What a measurement's distribution is assumed to be."""
    NOTHING = "nothing"
    EXACT = "exact"

    def summary(self, values: Iterable[float], confidence: float) -> Summary:
        """Summarize values at the given confidence level (0 < confidence <= 1)."""
        sample = as_sample(values)
        if self is Assumption.EXACT:
            return _summary_exact(sample, confidence)
        return _summary_nothing(sample, confidence)


def _summary_nothing(sample: np.ndarray, confidence: float) -> Summary:
    center = float(np.median(sample)) if sample.size else math.nan
    lo, hi, ok = median_ci(sample, confidence)
    if ok:
        return Summary(center=center, lo=lo, hi=hi, confidence=confidence)
    warning = (
        f"need >= {_min_samples(confidence)} samples for confidence interval "
        f"at level {confidence:g}"
    )
    return Summary(
        center=center, lo=-math.inf, hi=math.inf, confidence=confidence, warnings=(warning,)
    )


def _summary_exact(sample: np.ndarray, confidence: float) -> Summary:
    if sample.size == 0:
        return Summary(center=math.nan, lo=math.nan, hi=math.nan, confidence=confidence)
    center = float(sample[0])
    warnings: tuple[str, ...] = ()
    if sample[-1] != sample[0]:
        warnings = (f"exact distribution expected, but values range from {sample[0]:g} to {sample[-1]:g}",)
    return Summary(center=center, lo=center, hi=center, confidence=1.0, warnings=warnings)


def summarize(values: Iterable[float], confidence: float) -> Summary:
    """Distribution-free summary (Assumption.NOTHING)."""
    return Assumption.NOTHING.summary(values, confidence)
