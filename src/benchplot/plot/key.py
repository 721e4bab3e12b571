"""Fields and keys: the discrete result of projecting a record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Field:
    """A named field of a projection. Tuple fields are composites of other fields."""
    name: str
    is_tuple: bool = False

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Key:
    """Immutable, hashable result of projecting a record: (field, value) pairs."""
    pairs: tuple[tuple[str, str], ...] = ()

    def get(self, f: Union[Field, str]) -> str:
        """Value of field f in this key, or "" if the key lacks it."""
        name = f.name if isinstance(f, Field) else f
        for k, v in self.pairs:
            if k == name:
                return v
        return ""

    def string_values(self) -> str:
        """Only the field values, comma separated."""
        return ",".join(v for _, v in self.pairs)

    def sort_key(self) -> tuple:
        return (tuple(v for _, v in self.pairs), tuple(k for k, _ in self.pairs))

    def __str__(self) -> str:
        return " ".join(f"{k}:{v}" for k, v in self.pairs)


def compare_keys(a: Optional[Key], b: Optional[Key]) -> int:
    """Lexicographic comparison of two keys by field values. None sorts first."""
    if a == b:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    ka, kb = a.sort_key(), b.sort_key()
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0
