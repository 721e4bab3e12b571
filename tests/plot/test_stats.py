"""Tests for sample statistics."""

import math

import numpy as np

from benchplot.plot.stats import Assumption, as_sample, median, median_ci, summarize


def test_median_even_and_odd():
    """median handles both odd and even sample sizes."""
    assert median([3.0, 1.0, 2.0]) == 2.0
    assert median([4.0, 1.0, 2.0, 3.0]) == 2.5
    assert math.isnan(median([]))


def test_median_ci_six_samples():
    """Six samples give the widest order-statistic interval at 95%."""
    lo, hi, ok = median_ci(as_sample([6, 1, 5, 2, 4, 3]), 0.95)
    assert ok
    assert (lo, hi) == (1.0, 6.0)


def test_median_ci_narrows_with_more_samples():
    """With many samples the interval excludes the extremes."""
    sample = as_sample(range(1, 21))
    lo, hi, ok = median_ci(sample, 0.95)
    assert ok
    assert 1.0 < lo <= 10.5 <= hi < 20.0


def test_median_ci_large_sample():
    """Thousands of samples give a tight symmetric interval around the median."""
    s = Assumption.NOTHING.summary([float(i) for i in range(2000)], 0.95)
    assert s.has_range
    assert s.center == 999.5
    assert 940.0 < s.lo < 999.5 < s.hi < 1060.0
    assert s.lo + s.hi == 1999.0


def test_median_ci_two_samples_at_half_confidence():
    """Two samples suffice for a 50% interval."""
    lo, hi, ok = median_ci(as_sample([3.0, 1.0]), 0.5)
    assert ok
    assert (lo, hi) == (1.0, 3.0)


def test_summary_nothing_too_few_samples():
    """Without enough samples the interval is unbounded and a warning is attached."""
    s = summarize([1.0, 2.0, 3.0], 0.95)
    assert s.center == 2.0
    assert s.lo == -math.inf and s.hi == math.inf
    assert "need >= 6 samples" in s.warnings[0]


def test_summary_nothing_with_range():
    """Enough samples give a finite interval around the median."""
    s = Assumption.NOTHING.summary(np.arange(10, dtype=float), 0.95)
    assert s.has_range
    assert s.lo <= s.center <= s.hi
    assert s.warnings == ()


def test_summary_exact():
    """EXACT collapses to the value; disagreeing values warn."""
    s = Assumption.EXACT.summary([4.0, 4.0], 0.95)
    assert (s.center, s.lo, s.hi) == (4.0, 4.0, 4.0)
    assert s.warnings == ()
    s = Assumption.EXACT.summary([4.0, 5.0], 0.95)
    assert s.warnings
