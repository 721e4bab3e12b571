"""Projections from benchmark records onto keys and aesthetic values.

A field expression such as ``"goos,goarch"`` projects a record onto a Key
holding those fields' values. Three special names exist:

- ``.unit``: the unit of each metric a record reports. A projection carrying
  ``.unit`` fans out into one key per unit on the record.
- ``.value``: the metric for that unit (the dependent variable). It is bound
  by the plot itself, never projected here.
- ``.residue``: every field not mentioned by another projection.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Protocol

from benchplot.errors import ConfigError, InvariantError
from benchplot.plot.key import Field, Key
from benchplot.plot.value import Value, ValueKind

if TYPE_CHECKING:
    from benchplot.plot.records import Record

UNIT_FIELD_NAME = ".unit"
VALUE_NAME = ".value"
RESIDUE_NAME = ".residue"


class FieldExpr(Protocol):
    """Interface shared by field projections and the residue projection."""

    def fields(self) -> tuple[Field, ...]: ...

    def project(self, rec: "Record") -> Key: ...

    def project_values(self, rec: "Record") -> list[Key]: ...


class FieldProjection:
    """Projection onto an explicit, ordered list of fields."""

    def __init__(self, fields: tuple[Field, ...]) -> None:
        self._fields = tuple(fields)

    def fields(self) -> tuple[Field, ...]:
        return self._fields

    def project(self, rec: "Record") -> Key:
        return Key(tuple((f.name, rec.get(f.name)) for f in self._fields))

    def project_values(self, rec: "Record") -> list[Key]:
        """One key per unit reported by rec, in record order.

        Without a .unit field this is just [project(rec)].
        """
        if not any(f.name == UNIT_FIELD_NAME for f in self._fields):
            return [self.project(rec)]
        keys = []
        for unit in rec.values:
            pairs = tuple(
                (f.name, unit if f.name == UNIT_FIELD_NAME else rec.get(f.name))
                for f in self._fields
            )
            keys.append(Key(pairs))
        return keys

    def __str__(self) -> str:
        return ",".join(str(f) for f in self._fields)

    def __repr__(self) -> str:
        return f"FieldProjection({self})"


class ResidueProjection:
    """Projection onto every record field not claimed by another projection."""

    def __init__(self, exclude: frozenset[str]) -> None:
        self.exclude = frozenset(exclude)
        self._field = Field(RESIDUE_NAME, is_tuple=True)

    def fields(self) -> tuple[Field, ...]:
        return (self._field,)

    def project(self, rec: "Record") -> Key:
        return Key(tuple((k, v) for k, v in rec.fields.items() if k not in self.exclude))

    def project_values(self, rec: "Record") -> list[Key]:
        return [self.project(rec)]

    def __str__(self) -> str:
        return RESIDUE_NAME

    def __repr__(self) -> str:
        return f"ResidueProjection(exclude={sorted(self.exclude)})"


class ProjectionParser:
    """Parses field expressions and remembers every field they mention.

    The residue projection covers all fields not mentioned by any expression
    parsed before residue() is called.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def parse(self, expr: str) -> Optional[FieldProjection]:
        """Parse a comma-separated field list. Returns None for an empty expression.

        Raises:
            ConfigError: On empty components, duplicate fields or unknown special names.
        """
        expr = expr.strip()
        if not expr:
            return None
        fields = []
        names: set[str] = set()
        for part in expr.split(","):
            name = part.strip()
            if not name:
                raise ConfigError(f"empty field name in projection {expr!r}")
            if name.startswith(".") and name != UNIT_FIELD_NAME:
                raise ConfigError(f"{name} cannot be combined with other fields in {expr!r}")
            if name in names:
                raise ConfigError(f"field {name} appears twice in {expr!r}")
            names.add(name)
            fields.append(Field(name))
        self._seen.update(n for n in names if n != UNIT_FIELD_NAME)
        return FieldProjection(tuple(fields))

    def residue(self) -> ResidueProjection:
        return ResidueProjection(frozenset(self._seen))


@dataclass(frozen=True)
class Projection:
    """How one aesthetic is computed from a record.

    The zero value (no iv, not dv) maps every record to the empty Value.
    """
    iv: Optional[FieldExpr] = None
    # Set if iv has exactly one non-composite field.
    iv_field: Optional[Field] = field(default=None, compare=False)
    # Set if iv has a .unit field.
    unit_field: Optional[Field] = field(default=None, compare=False)
    dv: bool = False

    @classmethod
    def for_iv(cls, iv: Optional[FieldExpr]) -> "Projection":
        if iv is None:
            return cls()
        fields = iv.fields()
        iv_field = fields[0] if len(fields) == 1 and not fields[0].is_tuple else None
        unit_field = next((f for f in fields if f.name == UNIT_FIELD_NAME), None)
        return cls(iv=iv, iv_field=iv_field, unit_field=unit_field)

    @classmethod
    def for_dv(cls) -> "Projection":
        return cls(dv=True)

    def project(self, rec: "Record") -> list[Value]:
        """Project rec to one or more values for this aesthetic."""
        if self.dv:
            raise InvariantError("cannot project the dependent variable")
        if self.iv is None:
            return [Value()]

        if self.unit_field is not None:
            values = [Value(kinds=ValueKind.DISCRETE, key=key) for key in self.iv.project_values(rec)]
        else:
            values = [Value(kinds=ValueKind.DISCRETE, key=self.iv.project(rec))]

        # A single plain field may also be numeric.
        if self.iv_field is not None:
            for i, v in enumerate(values):
                num = parse_float(v.key.get(self.iv_field))
                if num is not None:
                    values[i] = v.with_continuous(num)
        return values

    def __str__(self) -> str:
        if self.dv:
            return VALUE_NAME
        if self.iv is not None:
            return ",".join(str(f) for f in self.iv.fields())
        return "<nil>"


def parse_float(s: str) -> Optional[float]:
    """float(s), or None if s is not a number. NaN is not a number here.

    Digit separators and surrounding whitespace, which float() tolerates, make
    s a label rather than a number.
    """
    if "_" in s or s != s.strip():
        return None
    try:
        num = float(s)
    except ValueError:
        return None
    if math.isnan(num):
        return None
    return num
