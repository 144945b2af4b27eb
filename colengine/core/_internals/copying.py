# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from colengine.errors import RangeError
from colengine.options import get_option

if TYPE_CHECKING:
    from colengine.core.dtypes import DataType

logger = logging.getLogger(__name__)


def gather_map(
    indices: np.ndarray,
    indices_valid: np.ndarray | None,
    size: int,
    nullify: bool = False,
) -> tuple[np.ndarray, np.ndarray | None]:
    """
    Resolve a gather map against a source of ``size`` rows.

    Negative indices count from the end. With ``nullify`` indices outside
    ``[-size, size)`` select a null row. Without it out of range indices are
    undefined behavior: no bounds check is performed and they are wrapped
    onto arbitrary rows, unless the ``gather.bounds_check`` option is set in
    which case a RangeError is raised. Null map entries always select a null
    row.

    Returns
    -------
    tuple of (positions, validity)
        In-range int64 source positions and the per-row validity of the
        output, ``None`` if every output row is valid.
    """
    indices = indices.astype(np.int64, copy=False)
    in_bounds = (indices >= -size) & (indices < size)
    positions = np.where(indices < 0, indices + size, indices)
    valid = indices_valid
    if nullify:
        if not in_bounds.all():
            valid = in_bounds if valid is None else valid & in_bounds
        positions = np.where(in_bounds, positions, 0)
    elif not in_bounds.all():
        out_of_bounds = ~in_bounds
        if indices_valid is not None:
            out_of_bounds &= indices_valid
        if out_of_bounds.any() and get_option("gather.bounds_check"):
            raise RangeError(
                f"Gather index {indices[out_of_bounds][0]} is out of bounds "
                f"for {size} rows"
            )
        logger.debug(
            "Gather map holds %d out of bounds indices; wrapping them",
            int(out_of_bounds.sum()),
        )
        positions = np.mod(positions, size) if size else np.zeros_like(
            positions
        )
    if indices_valid is not None:
        positions = np.where(indices_valid, positions, 0)
    if size == 0 and len(positions):
        # Every row is null or out of contract; nothing can be read.
        valid = np.zeros(len(positions), dtype=np.bool_)
    return positions, valid


def take(values: np.ndarray, positions: np.ndarray) -> np.ndarray:
    """Rows of ``values`` at ``positions``; safe on empty sources."""
    if len(values) == 0:
        return np.zeros(len(positions), dtype=values.dtype)
    return values.take(positions)


def scatter_map(
    indices: np.ndarray, indices_valid: np.ndarray | None, size: int
) -> np.ndarray:
    """
    Validate a scatter map against a target of ``size`` rows.

    Negative indices wrap once. Null or out of range entries raise.
    """
    if indices_valid is not None and not indices_valid.all():
        raise ValueError("Scatter map cannot contain nulls")
    indices = indices.astype(np.int64, copy=False)
    if len(indices) and not (
        (indices >= -size) & (indices < size)
    ).all():
        raise RangeError(f"Scatter map index out of bounds for {size} rows")
    return np.where(indices < 0, indices + size, indices)


def check_range(begin: int, end: int, size: int) -> None:
    if not (0 <= begin <= size and 0 <= end <= size):
        raise RangeError(
            f"Range [{begin}, {end}) is outside of [0, {size}]"
        )
    if begin > end:
        raise RangeError(f"begin ({begin}) cannot be greater than end ({end})")


def sequence(size: int, init, step, dtype: DataType) -> np.ndarray:
    """``init, init + step, ...`` evaluated in ``dtype``."""
    if size < 0:
        raise ValueError("size cannot be negative")
    np_dtype = dtype.numpy_dtype
    with np.errstate(over="ignore"):
        steps = np.arange(size, dtype=np_dtype)
        return (
            np.asarray(init, dtype=np_dtype)
            + np.asarray(step, dtype=np_dtype) * steps
        ).astype(np_dtype)
