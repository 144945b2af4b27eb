# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from colengine.core import dtypes
from colengine.core.mixins.binops import (
    BITWISE_OPERATIONS,
    COMPARISON_OPERATIONS,
)

if TYPE_CHECKING:
    from colengine.core.dtypes import DataType

_COMPARATORS = {
    "eq": np.equal,
    "ne": np.not_equal,
    "lt": np.less,
    "le": np.less_equal,
    "gt": np.greater,
    "ge": np.greater_equal,
    "null_equals": np.equal,
}


def _c_divide(lhs: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    # Integer quotient truncated toward zero.
    quotient = np.floor_divide(lhs, rhs)
    remainder = np.fmod(lhs, rhs)
    adjust = (remainder != 0) & ((lhs < 0) != (rhs < 0))
    return np.where(adjust, quotient + 1, quotient).astype(lhs.dtype)


def _evaluate(
    lhs: np.ndarray, rhs: np.ndarray, op: str, common: DataType
) -> np.ndarray:
    if op in COMPARISON_OPERATIONS:
        return _COMPARATORS[op](lhs, rhs)
    np_dtype = common.numpy_dtype

    if common.is_boolean and op not in BITWISE_OPERATIONS:
        # Booleans are evaluated as integers and narrowed back to 0/1.
        result = _evaluate(
            lhs.astype(np.int64), rhs.astype(np.int64), op, dtypes.int64
        )
        return result != 0

    if op in BITWISE_OPERATIONS and common.is_floating:
        raise TypeError(f"{op} is not supported for {common} operands")

    is_int = common.is_integer or common.is_boolean
    if op == "add":
        return np.add(lhs, rhs, dtype=np_dtype)
    if op == "sub":
        return np.subtract(lhs, rhs, dtype=np_dtype)
    if op == "mul":
        return np.multiply(lhs, rhs, dtype=np_dtype)
    if op == "div":
        if is_int:
            return _c_divide(lhs, rhs)
        return np.divide(lhs, rhs, dtype=np_dtype)
    if op == "true_div":
        return np.divide(
            lhs.astype(np.float64), rhs.astype(np.float64)
        ).astype(np_dtype)
    if op == "floor_div":
        if is_int:
            return np.floor_divide(lhs, rhs, dtype=np_dtype)
        return np.floor(np.divide(lhs, rhs, dtype=np_dtype))
    if op == "mod":
        return np.fmod(lhs, rhs, dtype=np_dtype)
    if op == "pow":
        if is_int:
            return np.power(
                lhs.astype(np.float64), rhs.astype(np.float64)
            ).astype(np_dtype)
        return np.power(lhs, rhs, dtype=np_dtype)
    if op == "log_base":
        return (
            np.log(lhs.astype(np.float64)) / np.log(rhs.astype(np.float64))
        ).astype(np_dtype)
    if op == "atan2":
        return np.arctan2(
            lhs.astype(np.float64), rhs.astype(np.float64)
        ).astype(np_dtype)
    if op == "logical_and":
        return np.logical_and(lhs, rhs).astype(np_dtype)
    if op == "logical_or":
        return np.logical_or(lhs, rhs).astype(np_dtype)
    if op == "bitwise_and":
        return np.bitwise_and(lhs, rhs).astype(np_dtype)
    if op == "bitwise_or":
        return np.bitwise_or(lhs, rhs).astype(np_dtype)
    if op == "bitwise_xor":
        return np.bitwise_xor(lhs, rhs).astype(np_dtype)
    if op == "shift_left":
        return np.left_shift(lhs, rhs.astype(np_dtype)).astype(np_dtype)
    if op == "shift_right":
        return np.right_shift(lhs, rhs.astype(np_dtype)).astype(np_dtype)
    if op == "shift_right_unsigned":
        unsigned = np.dtype(f"uint{np_dtype.itemsize * 8}")
        return np.right_shift(
            lhs.astype(np_dtype).view(unsigned), rhs.astype(unsigned)
        ).view(np_dtype)
    if op in {"null_max", "null_min"}:
        func = np.maximum if op == "null_max" else np.minimum
        return func(lhs, rhs, dtype=np_dtype)
    raise NotImplementedError(f"Unknown binary operation {op}")


def binaryop(
    lhs: np.ndarray,
    lhs_valid: np.ndarray | None,
    rhs: np.ndarray,
    rhs_valid: np.ndarray | None,
    op: str,
    common: DataType,
) -> tuple[np.ndarray, np.ndarray | None]:
    """
    Evaluate ``lhs <op> rhs`` element-wise.

    Operands are host arrays already converted to the common type (``rhs``
    may be a 0-d array for scalar operands) with their per-row validity
    (``None`` when every row is valid).

    Standard operations produce a null row wherever either operand is null.
    ``null_max`` and ``null_min`` take the valid operand when only one row is
    null and ``null_equals`` treats two nulls as equal and never produces
    nulls.

    Returns
    -------
    tuple of (values, validity)
        ``validity`` is ``None`` if the result has no nulls.
    """
    size = len(lhs)
    rhs = np.broadcast_to(rhs, (size,))
    if rhs_valid is not None:
        rhs_valid = np.broadcast_to(rhs_valid, (size,))
    with np.errstate(all="ignore"):
        values = _evaluate(lhs, rhs, op, common)
    if op in COMPARISON_OPERATIONS:
        values = values.astype(np.bool_)

    if op == "null_equals":
        lv = np.ones(size, np.bool_) if lhs_valid is None else lhs_valid
        rv = np.ones(size, np.bool_) if rhs_valid is None else rhs_valid
        values = np.where(lv & rv, values, ~(lv | rv))
        return values, None
    if op in {"null_max", "null_min"}:
        if lhs_valid is None and rhs_valid is None:
            return values, None
        lv = np.ones(size, np.bool_) if lhs_valid is None else lhs_valid
        rv = np.ones(size, np.bool_) if rhs_valid is None else rhs_valid
        values = np.where(lv & ~rv, lhs, np.where(~lv & rv, rhs, values))
        return values, lv | rv

    if lhs_valid is None:
        return values, None if rhs_valid is None else rhs_valid.copy()
    if rhs_valid is None:
        return values, lhs_valid.copy()
    return values, lhs_valid & rhs_valid
