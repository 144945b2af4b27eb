# SPDX-FileCopyrightText: Copyright (c) 2018-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

import operator

import numpy as np
import pytest

import colengine
from colengine.core.column import as_column
from colengine.errors import MixedTypeError, ShapeMismatchError
from colengine.testing import assert_column_equal
from colengine.utils.dtypes import find_common_type


def test_add_sub_roundtrip(integer_type):
    a = as_column(np.arange(10).astype(integer_type))
    b = as_column(np.arange(10, 20).astype(integer_type))
    assert_column_equal(a.add(b).sub(b), a, check_exact=True)


def test_add_sub_roundtrip_float(float_type):
    rng = np.random.default_rng(0)
    a = as_column(rng.random(20).astype(float_type))
    b = as_column(rng.random(20).astype(float_type))
    assert_column_equal(a.add(b).sub(b), a, rtol=1e-4)


@pytest.mark.parametrize("lhs_type", ["int8", "uint16", "int32", "float32"])
@pytest.mark.parametrize("rhs_type", ["int8", "uint32", "int64", "float64"])
def test_binop_output_type(lhs_type, rhs_type, arithmetic_op):
    lhs = as_column(np.array([1, 2, 3], dtype=lhs_type))
    rhs = as_column(np.array([1, 1, 2], dtype=rhs_type))
    got = getattr(lhs, arithmetic_op)(rhs)
    assert got.dtype == find_common_type(lhs_type, rhs_type)


def test_comparison_output_type(numeric_type, comparison_op):
    lhs = as_column(np.array([1, 2, 3], dtype=numeric_type))
    rhs = as_column(np.array([3, 2, 1], dtype=numeric_type))
    got = getattr(lhs, comparison_op)(rhs)
    expect = getattr(operator, comparison_op)(
        np.array([1, 2, 3]), np.array([3, 2, 1])
    )
    assert got.dtype == colengine.bool8
    assert got.to_pylist() == expect.tolist()


def test_host_literal_types():
    col = as_column(np.array([1, 2, 3, 4], dtype="int32"))
    got = col.mul(2)
    assert got.dtype == colengine.float64
    assert got.to_pylist() == [2.0, 4.0, 6.0, 8.0]
    assert col.mul(2.0).dtype == colengine.float64
    assert col.add(2**62).dtype == colengine.float64
    assert col.mul(np.int64(2)).dtype == colengine.int64
    assert col.mul(colengine.Scalar(2, dtype="int64")).to_pylist() == [
        2,
        4,
        6,
        8,
    ]
    assert col.mul(np.int8(2)).dtype == colengine.int32
    assert col.mul(True).dtype == colengine.int32
    assert col.mul(colengine.Scalar(2, dtype="uint32")).dtype == (
        colengine.uint32
    )


@pytest.mark.parametrize(
    "op, expect",
    [
        ("eq", [False, True, False]),
        ("lt", [True, False, False]),
        ("null_equals", [False, True, False]),
    ],
)
def test_host_literal_comparison(op, expect):
    col = as_column(np.array([1, 2, 3], dtype="int16"))
    got = getattr(col, op)(2)
    assert got.dtype == colengine.bool8
    assert got.to_pylist() == expect


@pytest.mark.parametrize(
    "op, expect",
    [
        ("bitwise_and", [0, 2, 2]),
        ("bitwise_or", [11, 10, 11]),
        ("shift_left", [2, 4, 6]),
        ("shift_right_unsigned", [0, 1, 1]),
    ],
)
def test_host_literal_bitwise_keeps_column_type(op, expect):
    col = as_column(np.array([1, 2, 3], dtype="uint8"))
    rhs = 1 if op.startswith("shift") else 10
    got = getattr(col, op)(rhs)
    assert got.dtype == colengine.uint8
    assert got.to_pylist() == expect


@pytest.mark.parametrize(
    "op, expect",
    [
        (operator.add, [11, 12, 13]),
        (operator.sub, [-9, -8, -7]),
        (operator.mul, [10, 20, 30]),
        (operator.truediv, [0.1, 0.2, 0.3]),
        (operator.floordiv, [0, 0, 0]),
        (operator.mod, [1, 2, 3]),
        (operator.pow, [1, 1024, 59049]),
        (operator.and_, [0, 2, 2]),
        (operator.or_, [11, 10, 11]),
        (operator.xor, [11, 8, 9]),
        (operator.lshift, [1024, 2048, 3072]),
        (operator.rshift, [0, 0, 0]),
    ],
)
def test_python_operators(op, expect):
    col = as_column([1, 2, 3])
    got = op(col, 10)
    assert got.to_pylist() == pytest.approx(expect)


@pytest.mark.parametrize(
    "op, expect",
    [
        (operator.add, [11, 12, 13]),
        (operator.sub, [9, 8, 7]),
        (operator.floordiv, [10, 5, 3]),
        (operator.mod, [0, 0, 1]),
        (operator.pow, [10, 100, 1000]),
    ],
)
def test_reflected_operators(op, expect):
    col = as_column([1, 2, 3])
    assert op(10, col).to_pylist() == expect


@pytest.mark.parametrize(
    "lhs, rhs, expect",
    [
        ([7, -7, 7, -7], [2, 2, -2, -2], [3, -3, -3, 3]),
        ([1, 0], [0, 0], None),
    ],
)
def test_div_truncates_toward_zero(lhs, rhs, expect):
    got = as_column(lhs).div(as_column(rhs))
    assert got.dtype == colengine.int64
    if expect is not None:
        assert got.to_pylist() == expect


def test_mod_takes_sign_of_dividend():
    got = as_column([7, -7, 7, -7]).mod(as_column([3, 3, -3, -3]))
    assert got.to_pylist() == [1, -1, 1, -1]


def test_floor_div():
    got = as_column([7, -7]).floor_div(2)
    assert got.to_pylist() == [3, -4]
    got = as_column([7.0, -7.0]).floor_div(2.0)
    assert got.to_pylist() == [3.0, -4.0]


def test_float_division_by_zero():
    got = as_column([1.0, -1.0, 0.0]).true_div(0.0)
    values = got.to_pylist()
    assert values[0] == np.inf
    assert values[1] == -np.inf
    assert np.isnan(values[2])


def test_true_div_integers():
    got = as_column(np.array([1, 3], dtype="int32")).true_div(
        as_column(np.array([2, 2], dtype="int32"))
    )
    assert got.dtype == colengine.int32
    assert got.to_pylist() == [0, 1]


def test_logical_ops():
    a = as_column([1, 0, 5, 0], dtype="int16")
    b = as_column([1, 1, 0, 0], dtype="int16")
    assert a.logical_and(b).to_pylist() == [1, 0, 0, 0]
    assert a.logical_or(b).to_pylist() == [1, 1, 1, 0]
    assert a.logical_and(b).dtype == colengine.int16
    p = as_column([True, False])
    assert p.logical_or(as_column([False, False])).to_pylist() == [
        True,
        False,
    ]


def test_bool_arithmetic():
    a = as_column([True, True, False])
    assert a.add(as_column([True, False, False])).to_pylist() == [
        True,
        True,
        False,
    ]
    assert (a & as_column([True, False, True])).to_pylist() == [
        True,
        False,
        False,
    ]


def test_shifts():
    col = as_column(np.array([-8, 8], dtype="int8"))
    assert col.shift_left(1).to_pylist() == [-16, 16]
    assert col.shift_right(1).to_pylist() == [-4, 4]
    got = col.shift_right_unsigned(as_column(np.array([1, 1], "int8")))
    assert got.to_pylist() == [124, 4]


def test_log_base_and_atan2():
    col = as_column([8.0, 100.0])
    got = col.log_base(as_column([2.0, 10.0]))
    assert got.to_pylist() == pytest.approx([3.0, 2.0])
    got = as_column([1.0, -1.0]).atan2(as_column([1.0, 1.0]))
    assert got.to_pylist() == pytest.approx([np.pi / 4, -np.pi / 4])


def test_bitwise_on_floats(bitwise_op):
    col = as_column([1.0, 2.0])
    with pytest.raises(TypeError):
        getattr(col, bitwise_op)(col)


def test_nulls_propagate(arithmetic_op):
    lhs = as_column([1, None, 3, None])
    rhs = as_column([None, 2, 3, None])
    got = getattr(lhs, arithmetic_op)(rhs)
    assert got.null_count == 3
    assert got.to_pylist()[:2] == [None, None]
    assert got.to_pylist()[3] is None


def test_null_scalar_nulls_every_row():
    col = as_column([1, 2, 3])
    got = col.add(colengine.Scalar(None, dtype="int64"))
    assert got.null_count == 3
    got = col.eq(colengine.Scalar(None, dtype="int64"))
    assert got.to_pylist() == [None, None, None]


def test_null_equals():
    lhs = as_column([1, None, 3, None])
    rhs = as_column([1, 2, None, None])
    got = lhs.null_equals(rhs)
    assert got.to_pylist() == [True, False, False, True]
    assert not got.nullable


@pytest.mark.parametrize(
    "op, expect",
    [("null_max", [5, 2, 3, None]), ("null_min", [1, 2, 3, None])],
)
def test_null_max_min(op, expect):
    lhs = as_column([1, None, 3, None])
    rhs = as_column([5, 2, None, None])
    assert getattr(lhs, op)(rhs).to_pylist() == expect


def test_operator_eq_returns_column():
    col = as_column([1, 2, 3])
    got = col == 2
    assert got.to_pylist() == [False, True, False]
    assert (col != as_column([1, 0, 3])).to_pylist() == [False, True, False]


def test_shape_mismatch():
    with pytest.raises(ShapeMismatchError):
        as_column([1, 2]).add(as_column([1, 2, 3]))


def test_mixed_types():
    with pytest.raises(MixedTypeError):
        as_column([1, 2]).add(as_column(["a", "b"]))
    with pytest.raises(TypeError):
        as_column([1, 2]) + "a"
    with pytest.raises(TypeError):
        as_column([1, 2]) + object()


def test_string_comparisons(comparison_op):
    lhs = as_column(["a", "b", None, "d"])
    rhs = as_column(["b", "b", "c", "c"])
    got = getattr(lhs, comparison_op)(rhs)
    expect = [
        getattr(operator, comparison_op)(lv, rv)
        for lv, rv in zip(["a", "b", "", "d"], ["b", "b", "c", "c"])
    ]
    expect[2] = None
    assert got.dtype == colengine.bool8
    assert got.to_pylist() == expect


def test_string_comparison_operands():
    col = as_column(["apple", "kiwi"])
    assert (col < "b").to_pylist() == [True, False]
    assert ("b" < col).to_pylist() == [False, True]
    assert col.eq(colengine.Scalar("kiwi")).to_pylist() == [False, True]
    assert col.null_equals(as_column([None, "kiwi"])).to_pylist() == [
        False,
        True,
    ]
    with pytest.raises(MixedTypeError):
        col.eq(as_column([1, 2]))
    with pytest.raises(TypeError):
        col.add(col)
    with pytest.raises(TypeError):
        col + "a"
