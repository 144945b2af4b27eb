# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

import numpy as np
import pytest

import colengine
from colengine.core.column import as_column
from colengine.testing import assert_column_equal

_numpy_scans = {
    "cumulative_sum": np.cumsum,
    "cumulative_product": np.cumprod,
    "cumulative_min": np.minimum.accumulate,
    "cumulative_max": np.maximum.accumulate,
}


@pytest.mark.parametrize("op", list(_numpy_scans))
def test_scan_matches_numpy(op, numeric_type):
    data = np.array([3, 1, 4, 1, 5], dtype=numeric_type)
    col = as_column(data)
    got = getattr(col, op)()
    expect = as_column(_numpy_scans[op](data).astype(numeric_type))
    assert_column_equal(got, expect)


@pytest.mark.parametrize(
    "op, expect",
    [
        ("cumulative_sum", [1, None, 4, 8, None]),
        ("cumulative_product", [1, None, 3, 12, None]),
        ("cumulative_min", [1, None, 1, 1, None]),
        ("cumulative_max", [1, None, 3, 4, None]),
    ],
)
def test_scan_skips_nulls(op, expect):
    col = as_column([1, None, 3, 4, None])
    got = getattr(col, op)()
    assert got.to_pylist() == expect
    assert got.null_count == 2


def test_scan_bool():
    col = as_column([True, False, True, None])
    got = col.cumulative_sum()
    assert got.dtype == colengine.int64
    assert got.to_pylist() == [1, 1, 2, None]
    got = col.cumulative_max()
    assert got.dtype == colengine.bool8
    assert got.to_pylist() == [True, True, True, None]


def test_scan_empty():
    got = as_column([], dtype="float32").cumulative_sum()
    assert got.dtype == colengine.float32
    assert len(got) == 0


def test_scan_strings():
    with pytest.raises(TypeError):
        as_column(["a"]).cumulative_sum()
