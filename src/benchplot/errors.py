"""
Exception types raised by benchplot.

- ConfigError for invalid aesthetic bindings, option values, transform or
  aesthetic names. Raised before any plot state is modified.
- NumericDataError when an operation needs numeric (continuous) values and
  the data does not provide them.
- NoDataError when nothing is left to plot.
- RenderError when the gnuplot executable is missing or fails.
- InvariantError for internal consistency faults (stale scale lookups,
  incomparable values). These indicate a bug and are never caught by the
  library.
"""

from __future__ import annotations

__all__ = [
    "BenchplotError",
    "ConfigError",
    "NumericDataError",
    "NoDataError",
    "InvariantError",
    "RenderError",
]


class BenchplotError(Exception):
    """Base class for all benchplot errors."""


class ConfigError(BenchplotError, ValueError):
    """Invalid plot configuration (bindings, options, names)."""


class NumericDataError(BenchplotError, ValueError):
    """An aesthetic that must be numeric holds non-numeric values."""


class NoDataError(BenchplotError):
    """No records survived loading and filtering."""


class InvariantError(BenchplotError, RuntimeError):
    """Internal invariant violated; indicates a programming error."""


class RenderError(BenchplotError):
    """An external renderer (gnuplot) is missing or failed."""
