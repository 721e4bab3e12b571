"""Tests for loading, filtering and unit selection of records."""

import pandas as pd
import pytest

from benchplot.errors import ConfigError
from benchplot.plot.records import FILTER_NONE, Record, filter_records, keep_units, load_records, records_from_dataframe


def test_records_group_consecutive_units(bench_df):
    """Rows sharing fields form one record until a unit repeats."""
    records = records_from_dataframe(bench_df)
    assert len(records) == 8
    r = records[0]
    assert r.fields == {"name": "Encode", "n": "8", "goos": "linux"}
    assert list(r.values) == ["sec/op", "B/op"]
    assert r.value("sec/op") == 80.0
    assert r.value("allocs/op") is None
    assert records[1].value("sec/op") == 81.0


def test_records_drop_unparsable_rows():
    """Rows without a numeric value or a unit are dropped."""
    df = pd.DataFrame({
        "name": ["A", "A", "B"],
        "unit": ["sec/op", "", "sec/op"],
        "value": ["x", "1", "2"],
    })
    records = records_from_dataframe(df)
    assert len(records) == 1
    assert records[0].fields == {"name": "B"}


def test_records_without_field_columns():
    """A table of only unit and value still yields records."""
    df = pd.DataFrame({"unit": ["sec/op", "sec/op"], "value": ["1", "2"]})
    records = records_from_dataframe(df)
    assert [r.value("sec/op") for r in records] == [1.0, 2.0]


def test_records_missing_column():
    """The unit and value columns are required."""
    with pytest.raises(ConfigError, match="unit"):
        records_from_dataframe(pd.DataFrame({"name": ["A"], "value": ["1"]}))


def test_load_records_csv_and_tsv(tmp_path, bench_df):
    """CSV and TSV files load to the same records."""
    csv_path = tmp_path / "bench.csv"
    tsv_path = tmp_path / "bench.tsv"
    bench_df.to_csv(csv_path, index=False)
    bench_df.to_csv(tsv_path, index=False, sep="\t")
    from_csv = load_records([csv_path])
    from_tsv = load_records([str(tsv_path)])
    assert from_csv == from_tsv
    assert len(from_csv) == 8


def test_load_records_empty_file(tmp_path):
    """An empty file contributes nothing."""
    p = tmp_path / "empty.csv"
    p.write_text("")
    assert load_records([p]) == []


def test_filter_records():
    """Selections match by string equality; FILTER_NONE disables a field."""
    recs = [
        Record({"goos": "linux", "n": "8"}, {"u": 1.0}),
        Record({"goos": "darwin", "n": "8"}, {"u": 1.0}),
    ]
    assert filter_records(recs, {"goos": "linux"}) == recs[:1]
    assert filter_records(recs, {"n": 8}) == recs
    assert filter_records(recs, {"goos": FILTER_NONE}) == recs
    assert filter_records(recs, {"missing": "x"}) == []


def test_keep_units():
    """Only the named units are kept; emptied records are counted and removed."""
    recs = [
        Record({"name": "A"}, {"sec/op": 1.0, "B/op": 2.0}),
        Record({"name": "B"}, {"B/op": 3.0}),
    ]
    kept, n_removed = keep_units(recs, ["sec/op"])
    assert n_removed == 1
    assert len(kept) == 1
    assert kept[0].values == {"sec/op": 1.0}
    # Input records are not modified.
    assert recs[0].values == {"sec/op": 1.0, "B/op": 2.0}
