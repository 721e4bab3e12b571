"""Aesthetics: the visual channels a benchmark value can be mapped to.

Defines the Aes enumeration and AesMap, a dense fixed-size map keyed by Aes
that underlies points and the per-aesthetic configuration.
"""

from __future__ import annotations

import functools
from enum import IntEnum
from typing import Callable, Generic, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")
D = TypeVar("D")


class Aes(IntEnum):
    """Aesthetic dimension of a plot."""
    X = 0
    Y = 1
    COLOR = 2
    ROW = 3  # facet row
    COL = 4  # facet column

    @property
    def short_name(self) -> str:
        """Short lower-case name, such as "x" or "color"."""
        return _SHORT_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> Optional["Aes"]:
        """Inverse of short_name. Returns None for unknown names."""
        return _name_to_aes().get(name)

    def __str__(self) -> str:
        return self.short_name


_SHORT_NAMES = {
    Aes.X: "x",
    Aes.Y: "y",
    Aes.COLOR: "color",
    Aes.ROW: "row",
    Aes.COL: "col",
}

# Number of aesthetics; AesMap storage size.
AES_COUNT = len(Aes)


@functools.cache
def _name_to_aes() -> dict[str, Aes]:
    return {aes.short_name: aes for aes in Aes}


class AesMap(Generic[T]):
    """Map from every Aes to a value of type T, backed by a fixed-size list.

    Copies are independent (no aliasing between maps); payloads themselves are
    shared, so they should be immutable.
    """

    __slots__ = ("_vals",)

    def __init__(self, default: Optional[T] = None, values: Optional[Iterable[T]] = None) -> None:
        if values is not None:
            vals = list(values)
            if len(vals) != AES_COUNT:
                raise ValueError(f"AesMap needs {AES_COUNT} values, got {len(vals)}")
            self._vals: list = vals
        else:
            self._vals = [default] * AES_COUNT

    def get(self, aes: Aes) -> T:
        return self._vals[aes]

    def set(self, aes: Aes, val: T) -> None:
        self._vals[aes] = val

    def copy(self) -> "AesMap[T]":
        return AesMap(values=self._vals)

    def transform(self, fn: Callable[[T], D]) -> "AesMap[D]":
        """Return a new map holding fn(value) for every aesthetic."""
        return AesMap(values=[fn(v) for v in self._vals])

    def items(self) -> Iterator[tuple[Aes, T]]:
        for aes in Aes:
            yield aes, self._vals[aes]

    def values(self) -> tuple:
        return tuple(self._vals)

    def __iter__(self) -> Iterator[T]:
        return iter(self._vals)

    def __len__(self) -> int:
        return AES_COUNT

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AesMap):
            return NotImplemented
        return self._vals == other._vals

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        parts = ", ".join(f"{aes.short_name}:{val}" for aes, val in self.items())
        return "{" + parts + "}"
