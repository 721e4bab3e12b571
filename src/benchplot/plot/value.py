"""Aesthetic values and points.

A Value is a small tagged union: a bitset of kinds plus the payload for each
kind. A label that parses as a number is both DISCRETE and CONTINUOUS, so it
can be used as a category or as a coordinate. Values are immutable and
hashable, which lets points be grouped by structural equality.
"""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass, replace
from enum import IntFlag
from typing import TYPE_CHECKING, Iterable, Optional

from benchplot.errors import InvariantError
from benchplot.plot.aes import AES_COUNT, Aes, AesMap
from benchplot.plot.key import Key, compare_keys

if TYPE_CHECKING:
    from benchplot.plot.stats import Summary


class ValueKind(IntFlag):
    """Classification bits of a Value."""
    DISCRETE = 1
    CONTINUOUS = 2
    SUMMARY = 4  # implies CONTINUOUS
    RATIO = 8  # implies CONTINUOUS or DISCRETE


NO_KINDS = ValueKind(0)
ALL_KINDS = ValueKind.DISCRETE | ValueKind.CONTINUOUS | ValueKind.SUMMARY | ValueKind.RATIO

# Fallback order used by Value.compare when two values share no kind.
_KIND_PRECEDENCE = (ValueKind.DISCRETE, ValueKind.CONTINUOUS, ValueKind.SUMMARY, ValueKind.RATIO)


@dataclass(frozen=True)
class Value:
    """One aesthetic value of a point.

    Attributes:
        kinds: Which of the payload fields below are meaningful.
        key: Category key, if DISCRETE.
        val: Number, if CONTINUOUS (the center, if SUMMARY).
        summary: Confidence interval summary, if SUMMARY.
        denom: Baseline key, if RATIO and DISCRETE.
    """
    kinds: ValueKind = NO_KINDS
    key: Optional[Key] = None
    val: float = 0.0
    summary: Optional["Summary"] = None
    denom: Optional[Key] = None

    def has(self, kind: ValueKind) -> bool:
        return bool(self.kinds & kind)

    def with_continuous(self, val: float) -> "Value":
        return replace(self, kinds=self.kinds | ValueKind.CONTINUOUS, val=val)

    def compare(self, other: "Value") -> int:
        """Three-way comparison: negative, zero or positive.

        Discrete values compare by key (then by denominator for ratios),
        continuous values numerically. Values sharing neither kind fall back to
        a fixed kind order so sorting stays deterministic.

        Raises:
            InvariantError: If the two values cannot be ordered at all.
        """
        shared = self.kinds & other.kinds
        if shared & ValueKind.DISCRETE:
            c = compare_keys(self.key, other.key)
            if c != 0:
                return c
            if self.kinds & ValueKind.RATIO:
                return compare_keys(self.denom, other.denom)
            return 0
        if shared & ValueKind.CONTINUOUS:
            return (self.val > other.val) - (self.val < other.val)
        for kind in _KIND_PRECEDENCE:
            if self.kinds & kind and not other.kinds & kind:
                return -1
            if not self.kinds & kind and other.kinds & kind:
                return 1
        if not self.kinds and not other.kinds:
            # Unbound aesthetics: every point holds the same empty value.
            return 0
        raise InvariantError(f"incomparable kinds {self.kinds!r}, {other.kinds!r}")

    def string_values(self) -> str:
        """Like str(), but renders keys by their field values only."""
        if not self.kinds:
            return ""
        if self.kinds & ValueKind.DISCRETE:
            s = self.key.string_values() if self.key is not None else ""
            if self.kinds & ValueKind.RATIO:
                d = self.denom.string_values() if self.denom is not None else ""
                return s + " vs " + d
            return s
        return format_number(self.val)

    def __str__(self) -> str:
        if not self.kinds:
            return ""
        if self.kinds & ValueKind.DISCRETE:
            s = str(self.key) if self.key is not None else ""
            if self.kinds & ValueKind.RATIO:
                return s + " vs " + (str(self.denom) if self.denom is not None else "")
            return s
        return format_number(self.val)


# Sort key for sorted()/list.sort() over Values.
value_sort_key = functools.cmp_to_key(Value.compare)


def format_number(v: float) -> str:
    """Shortest text for v; integral values print without a trailing '.0'."""
    if math.isfinite(v) and v == int(v) and abs(v) < 1e21:
        return str(int(v))
    return repr(float(v))


@dataclass(frozen=True)
class Point:
    """Exactly one Value per aesthetic. Immutable and hashable."""
    values: tuple[Value, ...] = (Value(),) * AES_COUNT

    def get(self, aes: Aes) -> Value:
        return self.values[aes]

    def replace(self, aes: Aes, val: Value) -> "Point":
        """A copy of this point with aes set to val."""
        vals = list(self.values)
        vals[aes] = val
        return Point(tuple(vals))

    def without(self, *aes: Aes) -> "Point":
        """A copy with the given aesthetics cleared; used as a grouping key."""
        vals = list(self.values)
        for a in aes:
            vals[a] = Value()
        return Point(tuple(vals))

    @classmethod
    def from_map(cls, m: AesMap[Value]) -> "Point":
        return cls(m.values())

    def to_map(self) -> AesMap[Value]:
        return AesMap(values=self.values)

    def __str__(self) -> str:
        return "{" + ", ".join(f"{aes.short_name}:{self.values[aes]}" for aes in Aes) + "}"


def points_kinds(pts: Iterable[Point], aes: Aes) -> ValueKind:
    """Kinds shared by the aes value of every point (ALL_KINDS if pts is empty)."""
    kinds = ALL_KINDS
    for pt in pts:
        kinds &= pt.get(aes).kinds
    return kinds
