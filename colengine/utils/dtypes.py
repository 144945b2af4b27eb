# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from colengine.core import dtypes
from colengine.core.dtypes import DataType, TypeId
from colengine.errors import MixedTypeError, RangeError

if TYPE_CHECKING:
    from colengine._typing import Dtype

SIZE_TYPE = dtypes.int32

_pandas_nullable_dtypes = {
    TypeId.UINT8: pd.UInt8Dtype(),
    TypeId.UINT16: pd.UInt16Dtype(),
    TypeId.UINT32: pd.UInt32Dtype(),
    TypeId.UINT64: pd.UInt64Dtype(),
    TypeId.INT8: pd.Int8Dtype(),
    TypeId.INT16: pd.Int16Dtype(),
    TypeId.INT32: pd.Int32Dtype(),
    TypeId.INT64: pd.Int64Dtype(),
    TypeId.BOOL8: pd.BooleanDtype(),
    TypeId.STRING: pd.StringDtype(),
    TypeId.FLOAT32: pd.Float32Dtype(),
    TypeId.FLOAT64: pd.Float64Dtype(),
}


def to_pandas_dtype(dtype: Dtype):
    """The pandas nullable extension dtype matching ``dtype``.

    Nested types have no nullable extension counterpart and map to
    ``object``.
    """
    dtype = dtypes.dtype(dtype)
    if isinstance(dtype, dtypes.DictionaryType):
        return pd.CategoricalDtype()
    return _pandas_nullable_dtypes.get(dtype.id, np.dtype("object"))


def find_common_type(lhs: Dtype, rhs: Dtype) -> DataType:
    """
    Type used to evaluate a binary operation between ``lhs`` and ``rhs``.

    The promotion table:

    * identical types promote to themselves
    * ``bool8`` with a numeric type promotes to the numeric type
    * integers of different widths promote to the wider operand's type
    * integers of equal width but different signedness promote to the
      unsigned type
    * an integer with a float promotes to a float at least as wide as the
      float operand and at least 32 (integers up to 32 bits) or 64 bits
    * floats promote to the wider float

    Parameters
    ----------
    lhs, rhs : DataType or type-like
        The operand types.

    Returns
    -------
    DataType

    Raises
    ------
    MixedTypeError
        If the types cannot be promoted, e.g. a string with a number or any
        nested or dictionary type with a different type.
    """
    lhs = dtypes.dtype(lhs)
    rhs = dtypes.dtype(rhs)
    if lhs == rhs:
        return lhs
    if not (lhs.is_numeric and rhs.is_numeric):
        raise MixedTypeError(
            f"Cannot find a common type between {lhs} and {rhs}"
        )
    if lhs.is_boolean:
        return rhs
    if rhs.is_boolean:
        return lhs
    if lhs.is_floating and rhs.is_floating:
        return lhs if lhs.bit_width >= rhs.bit_width else rhs
    if lhs.is_floating or rhs.is_floating:
        flt, integer = (lhs, rhs) if lhs.is_floating else (rhs, lhs)
        width = max(flt.bit_width, 32 if integer.bit_width <= 32 else 64)
        return dtypes.float32 if width == 32 else dtypes.float64
    if lhs.bit_width != rhs.bit_width:
        return lhs if lhs.bit_width > rhs.bit_width else rhs
    return lhs if lhs.is_unsigned else rhs


def find_common_type_all(types) -> DataType | None:
    """Fold ``find_common_type`` over an iterable of types."""
    result = None
    for t in types:
        result = dtypes.dtype(t) if result is None else find_common_type(
            result, t
        )
    return result


_INT64_MIN = -(2**63)
_UINT64_LIMIT = 2**64


def host_integer_bits(value: int, unsigned: bool) -> int:
    """
    The 64-bit pattern of a Python int, read as a signed or unsigned value.

    Narrowing the result with NumPy then wraps the way a C cast does.

    Raises
    ------
    RangeError
        If ``value`` fits neither a signed nor an unsigned 64-bit integer.
    """
    if not _INT64_MIN <= value < _UINT64_LIMIT:
        raise RangeError(f"{value} does not fit a 64-bit integer")
    if unsigned:
        return value + _UINT64_LIMIT if value < 0 else value
    return value - _UINT64_LIMIT if value > np.iinfo(np.int64).max else value


def host_literal_dtype(value: Any) -> DataType:
    """
    Column type of a host value.

    Python ``int`` is ``int64``, or ``uint64`` once it exceeds the signed
    range; Python ``float`` is ``float64``. NumPy scalars keep their own
    type.

    Raises
    ------
    RangeError
        If a Python ``int`` fits no 64-bit integer type.
    TypeError
        If the value has no column type.
    """
    if isinstance(value, (bool, np.bool_)):
        return dtypes.bool8
    if isinstance(value, np.generic):
        return dtypes.dtype(value.dtype)
    if isinstance(value, int):
        if value > np.iinfo(np.int64).max:
            host_integer_bits(value, unsigned=True)
            return dtypes.uint64
        host_integer_bits(value, unsigned=False)
        return dtypes.int64
    if isinstance(value, float):
        return dtypes.float64
    if isinstance(value, str):
        return dtypes.string
    raise TypeError(
        f"Cannot use a {type(value).__name__} as an operand of a column "
        "operation"
    )


def binop_operand_dtype(
    value: Any, column_dtype: DataType, bitwise: bool = False
) -> DataType:
    """
    Operand type of a host literal in a binary operation with a column.

    Python ``int`` and ``float`` literals are ``float64`` operands, whatever
    the value, and then promote with the column type as usual: an
    ``int32`` column times ``2`` is a ``float64`` column. Bitwise and shift
    operations (``bitwise=True``) take the literal in the column's own
    type instead. An integer operand is spelled explicitly, e.g.
    ``np.int64(2)`` or ``Scalar(2, dtype="int64")``.
    """
    if isinstance(value, (int, float)) and not isinstance(
        value, (bool, np.generic)
    ):
        return column_dtype if bitwise else dtypes.float64
    return host_literal_dtype(value)


def infer_dtype_from_values(values) -> DataType:
    """Infer the column type of a host sequence (``None`` is ignored)."""
    seen = None
    seen_untyped_list = False
    seen_negative = False
    for v in values:
        if v is None:
            continue
        if isinstance(v, (list, tuple)):
            if all(element is None for element in v):
                # empty lists take the element type of their siblings
                seen_untyped_list = True
                continue
            child = infer_dtype_from_values(v)
            t = dtypes.ListType(child)
        else:
            t = host_literal_dtype(v)
            if isinstance(v, (int, float, np.number)) and v < 0:
                seen_negative = True
        if seen is None:
            seen = t
        elif seen != t:
            if seen.is_nested or t.is_nested:
                raise MixedTypeError(
                    f"Cannot mix {seen} and {t} values in a column"
                )
            seen = find_common_type(seen, t)
    if seen_untyped_list:
        if seen is None:
            return dtypes.ListType(dtypes.float64)
        if not seen.is_nested:
            raise MixedTypeError(f"Cannot mix {seen} and list values")
    if seen == dtypes.uint64 and seen_negative:
        raise RangeError(
            "Cannot store negative values and values above the int64 "
            "range in one integer column"
        )
    return dtypes.float64 if seen is None else seen
