# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence


def keep_rows(
    validities: Sequence[np.ndarray | None],
    size: int,
    how: Literal["any", "all"] = "any",
    thresh: int | None = None,
) -> np.ndarray:
    """
    Positions of the rows surviving a null filter over several columns.

    Parameters
    ----------
    validities : sequence of bool arrays or None
        Per-row validity of each key column, ``None`` if it has no nulls.
    size : int
        Number of rows.
    how : "any" or "all"
        Drop rows with any null key or only rows whose keys are all null.
    thresh : int, optional
        Minimum number of valid keys required to keep a row. Takes
        precedence over ``how``.

    Returns
    -------
    numpy.ndarray
        Sorted int64 positions of the kept rows.
    """
    if how not in {"any", "all"}:
        raise ValueError("how must be 'any' or 'all'")
    if thresh is not None:
        keep_threshold = thresh
    elif how == "all":
        keep_threshold = 1
    else:
        keep_threshold = len(validities)
    counts = np.zeros(size, dtype=np.int64)
    for valid in validities:
        counts += 1 if valid is None else valid
    return np.flatnonzero(counts >= keep_threshold)


def boolean_mask_positions(
    selection: np.ndarray, selection_valid: np.ndarray | None
) -> np.ndarray:
    """Positions of the rows selected by a boolean column; nulls are false."""
    keep = selection.astype(np.bool_)
    if selection_valid is not None:
        keep = keep & selection_valid
    return np.flatnonzero(keep)


def distinct_count(
    values: np.ndarray,
    valid: np.ndarray | None,
    dropna: bool = True,
) -> int:
    """
    Number of distinct values; NaN is a value of its own.

    With ``dropna=False`` nulls count as one extra value if any exist.
    """
    present = values if valid is None else values[valid]
    if present.dtype == object:
        count = len(set(present.tolist()))
    else:
        uniques = np.unique(present)
        if uniques.dtype.kind == "f":
            # np.unique keeps every NaN separately
            nans = np.isnan(uniques)
            count = int(uniques.size - nans.sum() + (1 if nans.any() else 0))
        else:
            count = int(uniques.size)
    if not dropna and valid is not None and not valid.all():
        count += 1
    return count
