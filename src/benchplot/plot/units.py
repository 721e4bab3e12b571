"""Unit classes and common scaling for axis labels.

common_scale picks one SI (decimal) or IEC (binary) prefix for a set of
values, e.g. 2.5e6 sec/op -> factor 1e6, prefix "M".
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from benchplot.plot.stats import Assumption


class UnitClass(Enum):
    """How a unit's magnitudes are scaled."""
    DECIMAL = "decimal"  # SI prefixes, powers of 1000
    BINARY = "binary"  # IEC prefixes, powers of 1024


@dataclass(frozen=True)
class Scaler:
    """Divide values by factor and prepend prefix to the unit."""
    factor: float = 1.0
    prefix: str = ""

    def __call__(self, v: float) -> float:
        return v / self.factor


_DECIMAL_SCALES = [
    (1e24, "Y"),
    (1e21, "Z"),
    (1e18, "E"),
    (1e15, "P"),
    (1e12, "T"),
    (1e9, "G"),
    (1e6, "M"),
    (1e3, "k"),
    (1.0, ""),
    (1e-3, "m"),
    (1e-6, "µ"),
    (1e-9, "n"),
    (1e-12, "p"),
    (1e-15, "f"),
]

_BINARY_SCALES = [
    (float(1 << 80), "Yi"),
    (float(1 << 70), "Zi"),
    (float(1 << 60), "Ei"),
    (float(1 << 50), "Pi"),
    (float(1 << 40), "Ti"),
    (float(1 << 30), "Gi"),
    (float(1 << 20), "Mi"),
    (float(1 << 10), "Ki"),
    (1.0, ""),
]

# Base quantities measured in bytes.
_BYTE_UNITS = frozenset({"B", "bytes"})


def class_of(unit: str) -> UnitClass:
    """UnitClass of a unit such as "B/op" or "sec/op"."""
    base = unit.split("/", 1)[0].strip()
    if base in _BYTE_UNITS:
        return UnitClass.BINARY
    return UnitClass.DECIMAL


def common_scale(values: Iterable[float], cls: UnitClass) -> Scaler:
    """Largest prefix that keeps the smallest non-zero magnitude >= 1.

    Non-finite and zero values are ignored; if nothing remains the scale is 1.
    """
    mags = [abs(v) for v in values if math.isfinite(v) and v != 0]
    if not mags:
        return Scaler()
    smallest = min(mags)
    scales = _BINARY_SCALES if cls is UnitClass.BINARY else _DECIMAL_SCALES
    for factor, prefix in scales:
        if smallest >= factor:
            return Scaler(factor=factor, prefix=prefix)
    # Smaller than every prefix.
    factor, prefix = scales[-1]
    return Scaler(factor=factor, prefix=prefix)


@dataclass(frozen=True)
class UnitMetadata:
    """Per-unit settings supplied alongside the records.

    Attributes:
        unit: Unit name, e.g. "sec/op".
        assumption: Distribution assumed when summarizing this unit.
        unit_class: Overrides class_of(unit) when scaling axis labels.
    """
    unit: str
    assumption: Assumption = Assumption.NOTHING
    unit_class: Optional[UnitClass] = None

    def resolved_class(self) -> UnitClass:
        return self.unit_class if self.unit_class is not None else class_of(self.unit)
