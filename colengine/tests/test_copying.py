# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

import numpy as np
import pytest

import colengine
from colengine.core.column import ColumnBase, as_column
from colengine.errors import RangeError, ShapeMismatchError
from colengine.testing import assert_column_equal


@pytest.mark.parametrize(
    "data",
    [
        [1, 2, None, 4],
        [1.5, None, np.nan],
        ["a", None, "ccc", ""],
        [[1, 2], None, []],
    ],
)
def test_gather_sequence_is_identity(data):
    col = as_column(data)
    got = col.gather(ColumnBase.sequence(len(col), 0))
    assert_column_equal(got, col)


def test_gather_negative_indices():
    col = as_column([10, 20, 30])
    got = col.gather([2, -1], nullify_out_of_bounds=True)
    assert got.to_pylist() == [30, 30]
    assert not got.has_nulls


def test_gather_nullify_out_of_bounds():
    col = as_column(["a", "b", "c"])
    got = col.gather([0, 3, -4, 1], nullify_out_of_bounds=True)
    assert got.to_pylist() == ["a", None, None, "b"]


def test_gather_null_selection():
    col = as_column([10, 20, 30])
    got = col.gather(as_column([None, 1], dtype="int32"))
    assert got.to_pylist() == [None, 20]


def test_gather_keeps_source_nulls():
    col = as_column([None, 2.0])
    assert col.gather([1, 0, 0]).to_pylist() == [2.0, None, None]


def test_gather_out_of_bounds_wraps():
    col = as_column([10, 20, 30])
    got = col.gather([4])
    assert len(got) == 1
    assert got.to_pylist()[0] in {10, 20, 30}


def test_gather_bounds_check(bounds_check):
    col = as_column([10, 20, 30])
    with pytest.raises(RangeError):
        col.gather([0, 3])
    # nulls in the map and nullify mode are never out of contract
    assert col.gather(as_column([None], dtype="int64")).to_pylist() == [
        None
    ]
    assert col.gather([5], nullify_out_of_bounds=True).to_pylist() == [None]


def test_gather_empty_source():
    col = as_column([], dtype="int64")
    got = col.gather([0, 1], nullify_out_of_bounds=True)
    assert got.to_pylist() == [None, None]


def test_gather_selection_type():
    col = as_column([1, 2])
    with pytest.raises(TypeError):
        col.gather([True, False])
    with pytest.raises(TypeError):
        col.gather(as_column([0.0]))


def test_gather_memory_resource():
    mr = colengine.TrackingMemoryResource()
    col = as_column([1, 2, 3])
    got = col.gather([0, 1], memory_resource=mr)
    assert got.to_pylist() == [1, 2]
    assert mr.live_allocations == 1
    assert mr.current_bytes == 16
    got.dispose()
    assert mr.live_allocations == 0
    assert mr.current_bytes == 0


def test_gather_does_not_modify_source():
    col = as_column([1, 2, 3])
    col.gather([2, 1, 0])
    assert col.to_pylist() == [1, 2, 3]


@pytest.mark.parametrize(
    "source, scatter_map, expect",
    [
        (as_column([7, 8]), [0, -1], [7, 2, 3, 8]),
        (9, [1, 2], [1, 9, 9, 4]),
        (colengine.Scalar(None, dtype="int64"), [0], [None, 2, 3, 4]),
        (as_column([None, 5]), [3, 1], [1, 5, 3, None]),
    ],
)
def test_scatter(source, scatter_map, expect):
    target = as_column([1, 2, 3, 4])
    got = target.scatter(source, scatter_map)
    assert got.to_pylist() == expect
    assert target.to_pylist() == [1, 2, 3, 4]


def test_scatter_strings():
    target = as_column(["a", "b", None])
    got = target.scatter(as_column(["x", "y"]), [2, 0])
    assert got.to_pylist() == ["y", "b", "x"]


def test_scatter_errors():
    target = as_column([1, 2, 3])
    with pytest.raises(RangeError):
        target.scatter(0, [3])
    with pytest.raises(ShapeMismatchError):
        target.scatter(as_column([1, 2]), [0])
    with pytest.raises(ValueError):
        target.scatter(0, as_column([None], dtype="int32"))
    with pytest.raises(TypeError):
        target.scatter(as_column([1.0]), [0])


def test_apply_boolean_mask():
    col = as_column(["a", "b", "c", None])
    got = col.apply_boolean_mask(as_column([True, None, True, True]))
    assert got.to_pylist() == ["a", "c", None]


def test_apply_boolean_mask_errors():
    col = as_column([1, 2])
    with pytest.raises(ShapeMismatchError):
        col.apply_boolean_mask([True])
    with pytest.raises(TypeError):
        col.apply_boolean_mask(as_column([1, 0]))


@pytest.mark.parametrize(
    "init, step, expect",
    [
        (0, None, [0, 1, 2, 3]),
        (5, -2, [5, 3, 1, -1]),
        (0.5, 0.25, [0.5, 0.75, 1.0, 1.25]),
    ],
)
def test_sequence(init, step, expect):
    got = ColumnBase.sequence(4, init, step)
    assert got.to_pylist() == expect
    assert got.dtype == colengine.Scalar(init).dtype


def test_sequence_errors():
    with pytest.raises(TypeError):
        ColumnBase.sequence(2, "a")
    with pytest.raises(TypeError):
        ColumnBase.sequence(2, True)
    with pytest.raises(ValueError):
        ColumnBase.sequence(2, colengine.Scalar(None, dtype="int32"))
