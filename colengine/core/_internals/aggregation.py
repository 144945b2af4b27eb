# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np

from colengine.core import dtypes
from colengine.core._internals.stream_compaction import distinct_count
from colengine.errors import DomainError, RangeError

if TYPE_CHECKING:
    from colengine.core.dtypes import DataType


class Interpolation(Enum):
    """How a quantile falling between two ranks is resolved."""

    LINEAR = "linear"
    LOWER = "lower"
    HIGHER = "higher"
    NEAREST = "nearest"
    MIDPOINT = "midpoint"

    @classmethod
    def from_any(cls, value: Interpolation | str) -> Interpolation:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown interpolation {value!r}, expected one of "
                f"{[m.value for m in cls]}"
            )


# Reductions whose result is None when there is nothing to reduce.
_NULL_WHEN_EMPTY = {
    "min",
    "max",
    "sum",
    "product",
    "sum_of_squares",
    "median",
    "quantile",
}
STRING_REDUCTIONS = {"min", "max", "minmax", "nunique"}


def _accumulator_dtype(dtype: DataType) -> np.dtype:
    if dtype.is_unsigned:
        return np.dtype("uint64")
    if dtype.is_integer or dtype.is_boolean:
        return np.dtype("int64")
    return np.dtype("float64")


def _host_value(value: Any, dtype: DataType) -> Any:
    if isinstance(value, np.generic):
        value = value.item()
    if dtype.is_string:
        return value
    return dtype.host_type(value)


def _extremum(present: np.ndarray, op: str, dtype: DataType) -> Any:
    if dtype.is_string:
        items = present.tolist()
        return min(items) if op == "min" else max(items)
    if dtype.is_floating:
        # NaN only wins when every value is NaN.
        func = np.fmin if op == "min" else np.fmax
        return _host_value(func.reduce(present), dtype)
    func = np.min if op == "min" else np.max
    return _host_value(func(present), dtype)


def quantile(
    present: np.ndarray,
    q: float,
    interpolation: Interpolation | str,
    dtype: DataType,
) -> Any:
    """
    The ``q``-th quantile of the non-null values; NaN values are ignored.

    ``linear`` and ``midpoint`` return a float, ``lower``, ``higher`` and
    ``nearest`` return one of the values. ``nearest`` rounds half to even.
    """
    interpolation = Interpolation.from_any(interpolation)
    if not 0 <= q <= 1:
        raise RangeError(f"Quantile {q} is outside of [0, 1]")
    if dtype.is_floating:
        present = present[~np.isnan(present)]
    if len(present) == 0:
        return None
    ordered = np.sort(present)
    position = q * (len(ordered) - 1)
    lo = int(math.floor(position))
    hi = int(math.ceil(position))
    if interpolation is Interpolation.LOWER:
        return _host_value(ordered[lo], dtype)
    if interpolation is Interpolation.HIGHER:
        return _host_value(ordered[hi], dtype)
    if interpolation is Interpolation.NEAREST:
        return _host_value(ordered[int(np.rint(position))], dtype)
    lo_value = float(ordered[lo])
    hi_value = float(ordered[hi])
    if interpolation is Interpolation.MIDPOINT:
        return (lo_value + hi_value) / 2
    return lo_value + (hi_value - lo_value) * (position - lo)


def reduce(
    values: np.ndarray,
    valid: np.ndarray | None,
    op: str,
    dtype: DataType,
    **kwargs,
) -> Any:
    """
    Reduce the non-null rows of a column to a host value.

    Parameters
    ----------
    values : numpy.ndarray
        Element values of every row; values of null rows are ignored.
    valid : numpy.ndarray or None
        Per-row validity, ``None`` if every row is valid.
    op : str
        The reduction name.
    dtype : DataType
        The column type.
    **kwargs
        ``ddof`` for ``var``/``std``, ``q`` and ``interpolation`` for
        ``quantile`` and ``dropna`` for ``nunique``.
    """
    if dtype.is_string and op not in STRING_REDUCTIONS:
        raise TypeError(f"{op} is not supported for {dtype} columns")
    if op == "nunique":
        return distinct_count(values, valid, dropna=kwargs.get("dropna", True))
    if op == "quantile":
        present = values if valid is None else values[valid]
        return quantile(
            present,
            kwargs.get("q", 0.5),
            kwargs.get("interpolation", Interpolation.LINEAR),
            dtype,
        )
    if op == "median":
        present = values if valid is None else values[valid]
        return quantile(present, 0.5, Interpolation.LINEAR, dtype)

    present = values if valid is None else values[valid]
    n = len(present)
    if n == 0:
        if op in _NULL_WHEN_EMPTY:
            return None
        if op == "minmax":
            return (None, None)
        if op == "all":
            return True
        if op == "any":
            return False
        if op in {"mean", "var", "std"}:
            return math.nan
        raise ValueError(f"Unknown reduction {op}")

    if op in {"min", "max"}:
        return _extremum(present, op, dtype)
    if op == "minmax":
        return (
            _extremum(present, "min", dtype),
            _extremum(present, "max", dtype),
        )
    if op == "all":
        return bool(np.all(present))
    if op == "any":
        return bool(np.any(present))

    acc = _accumulator_dtype(dtype)
    host = float if acc.kind == "f" else int
    with np.errstate(all="ignore"):
        if op == "sum":
            return host(np.sum(present, dtype=acc))
        if op == "product":
            return host(np.prod(present, dtype=acc))
        if op == "sum_of_squares":
            widened = present.astype(acc)
            return host(np.sum(np.multiply(widened, widened), dtype=acc))
        as_float = present.astype(np.float64)
        if op == "mean":
            return float(np.mean(as_float))
        if op in {"var", "std"}:
            ddof = kwargs.get("ddof", 1)
            if n - ddof <= 0:
                raise DomainError(
                    f"{op} with ddof={ddof} is undefined for {n} values"
                )
            variance = float(np.var(as_float, ddof=ddof))
            return variance if op == "var" else math.sqrt(variance)
    raise ValueError(f"Unknown reduction {op}")


def scan_dtype(op: str, dtype: DataType) -> DataType:
    """Result type of a cumulative operation."""
    if dtype.is_boolean and op in {"cumulative_sum", "cumulative_product"}:
        return dtypes.int64
    return dtype


def scan(
    values: np.ndarray, valid: np.ndarray | None, op: str, dtype: DataType
) -> np.ndarray:
    """
    Inclusive scan over the valid rows.

    Null rows do not contribute to the running value; their output value is
    unspecified and the caller keeps them null.
    """
    if dtype.is_string:
        raise TypeError(f"{op} is not supported for {dtype} columns")
    out_dtype = scan_dtype(op, dtype).numpy_dtype
    present = values if valid is None else values[valid]
    with np.errstate(all="ignore"):
        if op == "cumulative_sum":
            result = np.cumsum(present, dtype=out_dtype)
        elif op == "cumulative_product":
            result = np.cumprod(present, dtype=out_dtype)
        elif op == "cumulative_min":
            result = np.minimum.accumulate(present.astype(out_dtype))
        elif op == "cumulative_max":
            result = np.maximum.accumulate(present.astype(out_dtype))
        else:
            raise ValueError(f"Unknown scan {op}")
    if valid is None:
        return result
    out = np.zeros(len(values), dtype=out_dtype)
    out[valid] = result
    return out
