"""
benchplot: small-multiples plots of benchmark results.

This package provides:
- Plot: maps benchmark records onto aesthetics (x, y, color, row, col)
- Transforms that summarize repeated measurements or compare them to a baseline
- Renderers for gnuplot scripts and Plotly figures
- Logging utilities for library and command-line use

For logging configuration in scripts:
    ```python
    from benchplot.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from benchplot.utils.logging import configure_logging, get_logger

from benchplot.errors import (
    BenchplotError,
    ConfigError,
    InvariantError,
    NoDataError,
    NumericDataError,
    RenderError,
)
from benchplot.plot import Aes, Plot, PlotConfig, Record

# Ensure the benchplot logger has a NullHandler so logs don't propagate to root
# when no application has configured logging.
_logger = logging.getLogger("benchplot")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "Aes",
    "BenchplotError",
    "ConfigError",
    "InvariantError",
    "NoDataError",
    "NumericDataError",
    "Plot",
    "PlotConfig",
    "Record",
    "RenderError",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
