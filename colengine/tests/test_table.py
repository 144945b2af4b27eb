# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

import pandas as pd
import pyarrow as pa
import pytest

import colengine
from colengine import Table
from colengine.core.column import as_column
from colengine.errors import ShapeMismatchError, UseAfterDisposeError
from colengine.testing import assert_column_equal, assert_table_equal


@pytest.fixture
def table():
    return Table(
        {
            "a": as_column([1, 2, None, 4]),
            "b": as_column(["w", None, "y", "z"]),
            "c": as_column([0.5, 1.5, 2.5, None]),
        }
    )


def test_table_mapping(table):
    assert len(table) == 3
    assert table.num_columns == 3
    assert table.num_rows == 4
    assert list(table) == ["a", "b", "c"]
    assert table.column_names == ("a", "b", "c")
    assert "b" in table
    assert "d" not in table
    assert table["b"].dtype == colengine.string
    assert dict(table.items())["a"] is table.get_column("a")


def test_table_construction_from_pairs():
    col = as_column([1])
    table = Table([("y", col), ("x", col)])
    assert table.column_names == ("y", "x")
    assert Table().num_rows == 0
    assert Table(table).column_names == ("y", "x")


def test_table_construction_errors():
    with pytest.raises(ShapeMismatchError):
        Table({"a": as_column([1]), "b": as_column([1, 2])})
    with pytest.raises(ValueError):
        Table([("a", as_column([1])), ("a", as_column([2]))])
    with pytest.raises(TypeError):
        Table({"a": [1, 2]})


def test_table_missing_column(table):
    with pytest.raises(KeyError):
        table["missing"]


def test_select(table):
    got = table[["c", "a"]]
    assert got.column_names == ("c", "a")
    assert got["a"] is table["a"]
    assert table.select([]).num_columns == 0


def test_gather(table):
    got = table.gather([3, 0, -2])
    assert got.to_pylist() == [
        {"a": 4, "b": "z", "c": None},
        {"a": 1, "b": "w", "c": 0.5},
        {"a": None, "b": "y", "c": 2.5},
    ]
    for name in table:
        assert got[name].dtype == table[name].dtype


def test_gather_nullify(table):
    got = table.gather(as_column([1, 10]), nullify_out_of_bounds=True)
    assert list(got.iterrows()) == [(2, None, 1.5), (None, None, None)]


def test_apply_boolean_mask(table):
    got = table.apply_boolean_mask([True, False, False, True])
    assert got["b"].to_pylist() == ["w", "z"]


@pytest.mark.parametrize(
    "subset, how, thresh, expect",
    [
        (None, "any", None, [0]),
        (["a", "b"], "any", None, [0, 3]),
        (["b", "c"], "all", None, [0, 1, 2, 3]),
        (None, "any", 3, [0]),
        (None, "any", 2, [0, 1, 2, 3]),
        (["a"], "all", None, [0, 1, 3]),
    ],
)
def test_drop_nulls(table, subset, how, thresh, expect):
    got = table.drop_nulls(subset=subset, how=how, thresh=thresh)
    assert_table_equal(got, table.gather(expect))


def test_drop_nulls_bad_how(table):
    with pytest.raises(ValueError):
        table.drop_nulls(how="some")


def test_concatenate():
    table = Table(
        {
            "first": as_column(["a", "b", None]),
            "second": as_column(["x", None, "z"]),
        }
    )
    got = table.concatenate(" ", null_repr="-")
    assert got.to_pylist() == ["a x", "b-", "-z"]
    got = table.concatenate(" ")
    assert got.to_pylist() == ["a x", None, None]


def test_concatenate_non_strings(table):
    with pytest.raises(TypeError):
        table.concatenate()


def test_arrow_roundtrip(table):
    arrow_table = table.to_arrow()
    assert arrow_table.column_names == ["a", "b", "c"]
    assert arrow_table.column("a").to_pylist() == [1, 2, None, 4]
    assert_table_equal(Table.from_arrow(arrow_table), table)
    with pytest.raises(TypeError):
        Table.from_arrow(pa.array([1]))


def test_to_pandas(table):
    df = table.to_pandas()
    expect = pd.DataFrame(
        {
            "a": pd.array([1, 2, None, 4], dtype="Int64"),
            "b": pd.array(["w", None, "y", "z"], dtype="string"),
            "c": pd.array([0.5, 1.5, 2.5, None], dtype="Float64"),
        }
    )
    pd.testing.assert_frame_equal(df, expect)


def test_repr(table):
    text = repr(table)
    assert "num_rows=4" in text
    assert "b: string" in text


def test_dispose(table):
    col = table["a"]
    with table:
        pass
    assert col.disposed
    with pytest.raises(UseAfterDisposeError):
        col.to_pylist()


def test_gather_leaves_source(table):
    expect = as_column([1, 2, None, 4])
    table.gather([0])
    assert_column_equal(table["a"], expect)
