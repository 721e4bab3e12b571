# tests/conftest.py
"""Pytest configuration and shared fixtures for benchplot tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest


def pytest_configure() -> None:
    # Ensure benchplot package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def bench_df() -> pd.DataFrame:
    """Long-format results: two benchmarks x two sizes x two runs, sec/op and B/op."""
    rows = []
    for name in ("Encode", "Decode"):
        for n in ("8", "64"):
            for run in range(2):
                base = 10.0 if name == "Encode" else 20.0
                rows.append({"name": name, "n": n, "goos": "linux", "unit": "sec/op",
                             "value": str(base * int(n) + run)})
                rows.append({"name": name, "n": n, "goos": "linux", "unit": "B/op",
                             "value": str(1024 * int(n))})
    return pd.DataFrame(rows)


@pytest.fixture
def bench_records(bench_df):
    """Records built from bench_df (8 records, each with sec/op and B/op)."""
    from benchplot.plot.records import records_from_dataframe

    return records_from_dataframe(bench_df)


@pytest.fixture
def make_record():
    """Factory: make_record({"name": "A"}, {"sec/op": 1.0})."""
    from benchplot.plot.records import Record

    def _make(fields: dict, values: dict):
        return Record(fields=dict(fields), values=dict(values))

    return _make
