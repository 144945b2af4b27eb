# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

import math

import numpy as np
import pytest

from colengine import Interpolation
from colengine.core.column import as_column
from colengine.errors import DomainError, RangeError

params_dtype = ["int8", "int32", "uint64", "float32", "float64"]


@pytest.mark.parametrize("dtype", params_dtype)
@pytest.mark.parametrize("nelem", [1, 7, 100])
def test_sum(dtype, nelem):
    rng = np.random.default_rng(nelem)
    data = rng.integers(0, 10, nelem).astype(dtype)
    col = as_column(data)
    got = col.sum()
    assert got == pytest.approx(float(data.astype("float64").sum()))
    assert type(got) is (float if data.dtype.kind == "f" else int)


@pytest.mark.parametrize("dtype", params_dtype)
def test_product(dtype):
    data = np.array([1, 2, 3, 4], dtype=dtype)
    assert as_column(data).product() == 24


def test_sum_widens_integers():
    col = as_column(np.array([100, 100], dtype="int8"))
    assert col.sum() == 200
    assert col.sum_of_squares() == 20000
    col = as_column(np.array([2**63, 2**63 - 1], dtype="uint64"))
    assert col.max() == 2**63


def test_bool_reductions():
    col = as_column([True, True, False, None])
    assert col.sum() == 2
    assert col.any() is True
    assert col.all() is False
    assert as_column([True, None]).all() is True


@pytest.mark.parametrize(
    "op, expect",
    [
        ("sum", 10),
        ("product", 24),
        ("min", 1),
        ("max", 4),
        ("minmax", (1, 4)),
        ("sum_of_squares", 30),
        ("mean", 2.5),
        ("median", 2.5),
        ("any", True),
        ("all", True),
    ],
)
def test_reductions_skip_nulls(op, expect):
    col = as_column([1, None, 2, 3, None, 4])
    assert getattr(col, op)() == expect


def test_var_std():
    col = as_column([1.0, 2.0, 3.0, 4.0, None])
    assert col.var() == pytest.approx(np.var([1, 2, 3, 4], ddof=1))
    assert col.var(ddof=0) == pytest.approx(1.25)
    assert col.std() == pytest.approx(np.std([1, 2, 3, 4], ddof=1))


@pytest.mark.parametrize("data, ddof", [([1.0], 1), ([1.0, 2.0], 2)])
def test_var_domain_error(data, ddof):
    col = as_column(data)
    with pytest.raises(DomainError):
        col.var(ddof=ddof)
    with pytest.raises(DomainError):
        col.std(ddof=ddof)


@pytest.mark.parametrize(
    "op, expect",
    [
        ("sum", None),
        ("product", None),
        ("min", None),
        ("max", None),
        ("minmax", (None, None)),
        ("sum_of_squares", None),
        ("median", None),
        ("any", False),
        ("all", True),
    ],
)
@pytest.mark.parametrize("data", [[], [None, None]])
def test_empty_reductions(op, expect, data):
    col = as_column(data, dtype="int32")
    assert getattr(col, op)() == expect


@pytest.mark.parametrize("op", ["mean", "var", "std"])
def test_empty_moments_are_nan(op):
    assert math.isnan(getattr(as_column([], dtype="float64"), op)())


def test_min_max_ignore_nan():
    col = as_column([np.nan, 2.0, 1.0, np.nan])
    assert col.min() == 1.0
    assert col.max() == 2.0
    assert math.isnan(as_column([np.nan]).max())


@pytest.mark.parametrize(
    "interpolation, expect",
    [
        ("linear", 2.5),
        ("lower", 2),
        ("higher", 3),
        ("nearest", 3),
        ("midpoint", 2.5),
        (Interpolation.LINEAR, 2.5),
    ],
)
def test_quantile_interpolation(interpolation, expect):
    col = as_column([4, 1, None, 3, 2])
    assert col.quantile(0.5, interpolation) == expect


@pytest.mark.parametrize(
    "q, expect", [(0.0, 1.0), (0.25, 1.75), (1.0, 4.0), (0.1, 1.3)]
)
def test_quantile_linear(q, expect):
    col = as_column([1.0, 2.0, 3.0, 4.0])
    assert col.quantile(q) == pytest.approx(expect)


@pytest.mark.parametrize("q", [-0.1, 1.5])
def test_quantile_range(q):
    with pytest.raises(RangeError):
        as_column([1, 2]).quantile(q)


def test_quantile_bad_interpolation():
    with pytest.raises(ValueError):
        as_column([1, 2]).quantile(0.5, "cubic")


def test_quantile_skips_nan():
    col = as_column([np.nan, 1.0, 3.0])
    assert col.quantile(0.5) == 2.0
    assert as_column([np.nan]).median() is None


@pytest.mark.parametrize(
    "data, dropna, expect",
    [
        ([1, 2, 2, None, None], True, 2),
        ([1, 2, 2, None, None], False, 3),
        ([1.0, np.nan, np.nan], True, 2),
        (["a", "b", "a", None], True, 2),
        (["a", "b", "a", None], False, 3),
        ([], True, 0),
    ],
)
def test_nunique(data, dropna, expect):
    col = as_column(data, dtype=None if data else "int64")
    assert col.nunique(dropna=dropna) == expect


def test_string_reductions():
    col = as_column(["pear", None, "apple", "zoo"])
    assert col.min() == "apple"
    assert col.max() == "zoo"
    assert col.minmax() == ("apple", "zoo")
    with pytest.raises(TypeError):
        col.sum()
    with pytest.raises(TypeError):
        col.mean()
