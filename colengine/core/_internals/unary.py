# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from colengine.errors import UnsupportedCastError

if TYPE_CHECKING:
    from colengine.core.dtypes import DataType

MATH_OPERATIONS = {
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "asin": np.arcsin,
    "acos": np.arccos,
    "atan": np.arctan,
    "sinh": np.sinh,
    "cosh": np.cosh,
    "tanh": np.tanh,
    "asinh": np.arcsinh,
    "acosh": np.arccosh,
    "atanh": np.arctanh,
    "exp": np.exp,
    "log": np.log,
    "sqrt": np.sqrt,
    "cbrt": np.cbrt,
    "ceil": np.ceil,
    "floor": np.floor,
    "abs": np.abs,
    "rint": np.rint,
}


def unary_operation(
    values: np.ndarray, op: str, dtype: DataType
) -> np.ndarray:
    """
    Apply the math function ``op`` to every element.

    The result keeps ``dtype``. Integer inputs are evaluated through
    float64, except ``abs`` which is exact.
    """
    np_dtype = dtype.numpy_dtype
    with np.errstate(all="ignore"):
        if op == "bit_invert":
            if dtype.is_floating:
                raise TypeError(f"bit_invert is not supported for {dtype}")
            return np.invert(values)
        if op == "not":
            return np.logical_not(values)
        try:
            func = MATH_OPERATIONS[op]
        except KeyError:
            raise ValueError(f"Unknown unary operation {op}")
        if dtype.is_floating:
            return func(values)
        if op == "abs":
            return np.abs(values)
        return func(values.astype(np.float64)).astype(np_dtype)


def cast(values: np.ndarray, source: DataType, target: DataType) -> np.ndarray:
    """
    Convert fixed-width numeric or boolean ``values`` to ``target``.

    Casting to a boolean yields ``value != 0``. Conversion of NaN, infinite
    or out-of-range floats to integers is unspecified.
    """
    for t in (source, target):
        if not (t.is_numeric and t.is_fixed_width):
            raise UnsupportedCastError(
                f"Cannot cast {source} to {target}; use the string "
                "conversion functions for strings"
            )
    if target.is_boolean:
        return values != 0
    with np.errstate(all="ignore"):
        return values.astype(target.numpy_dtype)
