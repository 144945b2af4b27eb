# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

import numpy as np
import pyarrow as pa
import pytest

import colengine
from colengine import Scalar
from colengine.errors import RangeError


@pytest.mark.parametrize(
    "value, dtype",
    [
        (1, colengine.int64),
        (1.5, colengine.float64),
        (True, colengine.bool8),
        ("a", colengine.string),
        (np.int16(3), colengine.int16),
        (np.float32(0.5), colengine.float32),
        (None, colengine.float64),
        (2**63, colengine.uint64),
        ([1, 2], colengine.ListType(colengine.int64)),
    ],
)
def test_scalar_inferred_type(value, dtype):
    s = Scalar(value)
    assert s.dtype == dtype
    assert s.is_valid() is (value is not None)


@pytest.mark.parametrize(
    "value, dtype, expect",
    [
        (300, "int8", 44),
        (-1, "uint16", 65535),
        (2, "float32", 2.0),
        (0, "bool8", False),
        (np.int64(7), "int32", 7),
        (2**64 - 1, "int64", -1),
        (2**63, "uint64", 2**63),
    ],
)
def test_scalar_cast_value(value, dtype, expect):
    s = Scalar(value, dtype=dtype)
    assert s.value == expect
    assert type(s.value) is type(expect)


def test_null_scalar():
    s = Scalar(None, dtype="int32")
    assert not s.is_valid()
    assert s.value is None
    assert s.to_arrow() == pa.scalar(None, type=pa.int32())


def test_scalar_from_scalar():
    s = Scalar(5, dtype="int16")
    assert Scalar(s) == s
    assert Scalar(s, dtype="float64") == Scalar(5.0)


def test_scalar_from_arrow():
    s = Scalar(pa.scalar(3, type=pa.uint8()))
    assert s.dtype == colengine.uint8
    assert s.value == 3
    assert s.to_arrow() == pa.scalar(3, type=pa.uint8())


def test_scalar_errors():
    with pytest.raises(TypeError):
        Scalar("a", dtype="int32")
    with pytest.raises(TypeError):
        Scalar(1, dtype="string")
    with pytest.raises(TypeError):
        Scalar(object())


@pytest.mark.parametrize(
    "value, dtype", [(2**64, None), (2**64, "int64"), (-(2**63) - 1, "int8")]
)
def test_scalar_integer_out_of_range(value, dtype):
    with pytest.raises(RangeError):
        Scalar(value, dtype=dtype)


def test_scalar_equality_and_hash():
    assert Scalar(1) == Scalar(1)
    assert Scalar(1) != Scalar(1, dtype="int32")
    assert Scalar(None, dtype="int8") == Scalar(None, dtype="int8")
    assert Scalar(1) != 1
    assert len({Scalar(1), Scalar(1), Scalar([1, 2])}) == 2


def test_scalar_repr():
    assert repr(Scalar(1, dtype="int8")) == "Scalar(1, dtype=int8)"
