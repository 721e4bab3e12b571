"""Benchmark records and loading them from tidy tables.

A Record is one benchmark result: a set of named configuration fields
(strings) and one or more metrics keyed by unit.

Tables are in long format: one row per metric, with a unit column, a value
column and any number of field columns. A record spans consecutive rows that
share every field value and do not repeat a unit, so a benchmark line that
reports both sec/op and B/op becomes a single record.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import pandas as pd

from benchplot.errors import ConfigError
from benchplot.utils.logging import get_logger

logger = get_logger(__name__)

# Sentinel value meaning "no filter" for a field in filter selections.
FILTER_NONE = "(none)"

DEFAULT_UNIT_COL = "unit"
DEFAULT_VALUE_COL = "value"


@dataclass
class Record:
    """One benchmark result.

    Attributes:
        fields: Field name -> value, in table column order.
        values: Unit -> measured value, in the order the units were reported.
    """
    fields: dict[str, str] = field(default_factory=dict)
    values: dict[str, float] = field(default_factory=dict)

    def get(self, name: str) -> str:
        """Value of field name, or "" if the record lacks it."""
        return self.fields.get(name, "")

    def value(self, unit: str) -> Optional[float]:
        """Measured value for unit, or None if this record did not report it."""
        return self.values.get(unit)


def records_from_dataframe(
    df: pd.DataFrame,
    *,
    unit_col: str = DEFAULT_UNIT_COL,
    value_col: str = DEFAULT_VALUE_COL,
) -> list[Record]:
    """Group the rows of a long-format table into records.

    Args:
        df: Table with unit_col, value_col and field columns.
        unit_col: Column holding unit names.
        value_col: Column holding measured values.

    Returns:
        Records in table order.

    Raises:
        ConfigError: If unit_col or value_col is missing.
    """
    for col in (unit_col, value_col):
        if col not in df.columns:
            raise ConfigError(f"records table must contain required column {col!r}")

    field_cols = [c for c in df.columns if c not in (unit_col, value_col)]
    fields_df = df[field_cols].fillna("").astype(str)
    units = df[unit_col].fillna("").astype(str).tolist()
    values = pd.to_numeric(df[value_col], errors="coerce").tolist()

    records: list[Record] = []
    cur: Optional[Record] = None
    cur_key: Optional[tuple] = None
    n_dropped = 0
    if field_cols:
        field_rows = list(fields_df.itertuples(index=False, name=None))
    else:
        field_rows = [()] * len(df)
    for row_fields, unit, val in zip(field_rows, units, values):
        if pd.isna(val) or not unit:
            n_dropped += 1
            continue
        if cur is None or row_fields != cur_key or unit in cur.values:
            cur = Record(fields=dict(zip(field_cols, row_fields)))
            cur_key = row_fields
            records.append(cur)
        cur.values[unit] = float(val)

    if n_dropped:
        logger.warning(f"Dropped {n_dropped} rows without a unit or a numeric {value_col!r}")
    logger.debug(f"records_from_dataframe: rows={len(df)}, records={len(records)}")
    return records


def _separator_for(path: Path) -> str:
    return "\t" if path.suffix.lower() in (".tsv", ".txt") else ","


def load_records(
    paths: Iterable[Union[str, Path]],
    *,
    unit_col: str = DEFAULT_UNIT_COL,
    value_col: str = DEFAULT_VALUE_COL,
) -> list[Record]:
    """Load records from CSV/TSV files; "-" reads CSV from stdin.

    All columns are read as strings; the value column is parsed afterwards.
    An empty input contributes no records.

    Raises:
        ConfigError: If an input is not a parsable table or lacks required columns.
    """
    records: list[Record] = []
    for p in paths:
        if str(p) == "-":
            source, handle, sep = "<stdin>", sys.stdin, ","
        else:
            path = Path(p)
            source, handle, sep = str(path), path, _separator_for(path)
        try:
            df = pd.read_csv(handle, sep=sep, dtype=str, keep_default_na=False)
        except pd.errors.EmptyDataError:
            logger.warning(f"{source} is empty")
            continue
        except pd.errors.ParserError as e:
            raise ConfigError(f"{source}: {e}") from e
        recs = records_from_dataframe(df, unit_col=unit_col, value_col=value_col)
        logger.info(f"Loaded {len(recs)} records from {source}")
        records.extend(recs)
    return records


def filter_records(records: Iterable[Record], selections: dict[str, Any]) -> list[Record]:
    """Keep records whose fields match every selection.

    Values are compared as strings, so a selection of 2 matches the field "2".
    FILTER_NONE (or None) means no filter for that field.
    """
    active = {k: str(v) for k, v in selections.items() if v is not None and v != FILTER_NONE}
    return [r for r in records if all(r.get(k) == v for k, v in active.items())]


def keep_units(records: Iterable[Record], units: Iterable[str]) -> tuple[list[Record], int]:
    """Restrict every record to the given units.

    Returns:
        (kept_records, n_removed) where n_removed counts records left with no units.
    """
    wanted = set(units)
    kept: list[Record] = []
    n_removed = 0
    for r in records:
        values = {u: v for u, v in r.values.items() if u in wanted}
        if not values:
            n_removed += 1
            continue
        kept.append(Record(fields=dict(r.fields), values=values))
    return kept, n_removed
