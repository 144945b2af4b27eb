# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import Literal

import numpy as np


def replace_nulls_policy(
    values: np.ndarray,
    valid: np.ndarray,
    method: Literal["ffill", "bfill"],
) -> tuple[np.ndarray, np.ndarray]:
    """
    Fill null rows from the nearest valid row.

    ``ffill`` copies the preceding valid value forward and ``bfill`` copies
    the following valid value backward. Nulls without such a neighbour stay
    null.
    """
    if method not in {"ffill", "bfill"}:
        raise ValueError(f"Unknown replacement policy {method!r}")
    size = len(values)
    if method == "bfill":
        filled, filled_valid = replace_nulls_policy(
            values[::-1], valid[::-1], "ffill"
        )
        return filled[::-1].copy(), filled_valid[::-1].copy()
    source = np.where(valid, np.arange(size), -1)
    np.maximum.accumulate(source, out=source)
    out_valid = source >= 0
    positions = np.where(out_valid, source, 0)
    if size == 0:
        return values.copy(), out_valid
    return values.take(positions), out_valid


def replace_where(
    values: np.ndarray,
    replace: np.ndarray,
    replacement: np.ndarray,
) -> np.ndarray:
    """``replacement`` (array or 0-d) where ``replace`` is set."""
    return np.where(replace, replacement, values).astype(values.dtype)
