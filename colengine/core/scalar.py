# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np
import pyarrow as pa

from colengine.core import dtypes
from colengine.errors import RangeError
from colengine.utils.dtypes import (
    host_integer_bits,
    host_literal_dtype,
    infer_dtype_from_values,
)

if TYPE_CHECKING:
    from colengine._typing import Dtype
    from colengine.core.dtypes import DataType


def _preprocess_host_value(value, dtype) -> tuple[Any, DataType]:
    if isinstance(value, pa.Scalar):
        if dtype is None:
            dtype = dtypes.dtype(value.type)
        value = value.as_py()

    if dtype is None:
        if value is None:
            dtype = dtypes.float64
        elif isinstance(value, (list, tuple)):
            dtype = dtypes.ListType(infer_dtype_from_values(value))
        else:
            dtype = host_literal_dtype(value)
    else:
        dtype = dtypes.dtype(dtype)

    if value is None:
        return None, dtype
    if isinstance(value, np.generic):
        value = value.item()

    if dtype.is_dictionary:
        dtype_for_value = dtype.key_type
    else:
        dtype_for_value = dtype
    if dtype_for_value.is_string:
        if not isinstance(value, str):
            raise TypeError(
                f"Cannot create a {dtype} scalar from "
                f"{type(value).__name__}"
            )
        return value, dtype
    if dtype_for_value.is_nested:
        return list(value), dtype
    if isinstance(value, str):
        raise TypeError(f"Cannot create a {dtype} scalar from a string")
    if dtype_for_value.is_boolean:
        return bool(value), dtype
    if isinstance(value, int) and dtype_for_value.is_integer:
        # wraps like a C cast when the value does not fit
        value = host_integer_bits(value, dtype_for_value.is_unsigned)
    try:
        narrowed = np.array(value).astype(dtype_for_value.numpy_dtype)
    except OverflowError as err:
        raise RangeError(
            f"{value} does not fit a {dtype} scalar"
        ) from err
    return dtype_for_value.host_type(narrowed.item()), dtype


class Scalar:
    """
    A single nullable value of a given type.

    Scalars are immutable and are used as operands of column operations.

    Parameters
    ----------
    value : Python scalar, NumPy scalar, pyarrow scalar or None
        The value. ``None`` creates a null scalar.
    dtype : DataType or type-like, optional
        The type. Inferred from ``value`` when omitted: Python ``int`` is
        ``int64`` (``uint64`` above the signed range), ``float`` is
        ``float64``, ``bool`` is ``bool8``, ``str`` is ``string`` and NumPy
        scalars keep their type. A null scalar without a type is
        ``float64``. Integers outside both 64-bit ranges raise
        ``RangeError``.
    """

    __slots__ = ("_value", "_dtype")

    def __init__(self, value: Any = None, dtype: Dtype | None = None):
        if isinstance(value, Scalar):
            if dtype is None or dtypes.dtype(dtype) == value.dtype:
                self._value, self._dtype = value._value, value._dtype
                return
            value = value.value
        self._value, self._dtype = _preprocess_host_value(value, dtype)

    @property
    def value(self) -> Any:
        return self._value

    @property
    def dtype(self) -> DataType:
        return self._dtype

    def is_valid(self) -> bool:
        return self._value is not None

    def _to_numpy(self) -> np.ndarray:
        """A 0-d array of the value; nulls are stored as zero."""
        if self._dtype.is_string:
            value = "" if self._value is None else self._value
            return np.array(value, dtype=object)
        return np.asarray(
            0 if self._value is None else self._value,
            dtype=self._dtype.numpy_dtype,
        )

    def to_arrow(self) -> pa.Scalar:
        return pa.scalar(self._value, type=self._dtype.to_arrow())

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        return self._dtype == other._dtype and self._value == other._value

    def __hash__(self) -> int:
        value = tuple(self._value) if self._dtype.is_nested else self._value
        return hash((self._dtype, value))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self._value!r}, dtype={self._dtype})"
        )
