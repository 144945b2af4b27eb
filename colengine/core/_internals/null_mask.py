# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
"""Validity bitmasks.

Bit ``i`` of a mask describes row ``i`` counted from the start of the
buffer, not from the start of a column view. A set bit marks a valid row.
Bits are stored least significant first: row ``i`` lives in
``(mask[i // 8] >> (i % 8)) & 1``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from colengine.core.buffer import Buffer, allocate_buffer, as_buffer

if TYPE_CHECKING:
    from collections.abc import Iterable

    from colengine.core.buffer import MemoryResource


class MaskState(Enum):
    """
    Initial state of a newly created null mask.
    """

    UNINITIALIZED = "uninitialized"
    ALL_VALID = "all_valid"
    ALL_NULL = "all_null"


def bitmask_allocation_size_bytes(
    num_bits: int, padding_boundary: int = 64
) -> int:
    """
    Number of bytes allocated for a mask of ``num_bits`` bits.

    The allocation is rounded up to a multiple of ``padding_boundary``.
    """
    if num_bits < 0:
        raise ValueError("num_bits cannot be negative")
    nbytes = (num_bits + 7) // 8
    return (
        (nbytes + padding_boundary - 1) // padding_boundary
    ) * padding_boundary


def create_null_mask(
    size: int,
    state: MaskState = MaskState.ALL_VALID,
    memory_resource: MemoryResource | None = None,
) -> Buffer:
    """
    Given a size and a mask state, allocate a mask that can properly
    represent the given size with the given mask state

    Parameters
    ----------
    size : int
        Number of elements the mask needs to be able to represent
    state : ``MaskState``, default ``MaskState.ALL_VALID``
        State the null mask should be created in
    """
    buf = allocate_buffer(
        bitmask_allocation_size_bytes(size), memory_resource
    )
    if state is MaskState.ALL_VALID:
        buf.view(mode="write")[:] = 0xFF
    return buf


def pack_bools(bools: np.ndarray) -> np.ndarray:
    """Pack per-row validity into padded mask bytes."""
    packed = np.packbits(
        np.asarray(bools, dtype=np.bool_), bitorder="little"
    )
    out = np.zeros(bitmask_allocation_size_bytes(len(bools)), dtype=np.uint8)
    out[: packed.size] = packed
    return out


def bools_to_mask(
    bools, memory_resource: MemoryResource | None = None
) -> Buffer:
    """Convert per-row validity into a new mask buffer."""
    return as_buffer(pack_bools(bools), memory_resource=memory_resource)


def mask_to_bools(
    mask: Buffer | np.ndarray, begin: int, end: int
) -> np.ndarray:
    """
    Per-row validity of bits ``[begin, end)`` of ``mask`` as a bool array.
    """
    raw = mask.view() if isinstance(mask, Buffer) else mask
    if end <= begin:
        return np.zeros(0, dtype=np.bool_)
    first_byte = begin // 8
    last_byte = (end + 7) // 8
    if last_byte > raw.size:
        raise ValueError(
            f"Mask of {raw.size} bytes cannot describe {end} rows"
        )
    bits = np.unpackbits(raw[first_byte:last_byte], bitorder="little")
    start = begin - first_byte * 8
    return bits[start : start + (end - begin)].astype(np.bool_)


def count_unset_bits(mask: Buffer | np.ndarray, begin: int, end: int) -> int:
    """Number of null rows among bits ``[begin, end)``."""
    valid = mask_to_bools(mask, begin, end)
    return int(valid.size - np.count_nonzero(valid))


def copy_bitmask(
    mask: Buffer,
    begin: int,
    end: int,
    memory_resource: MemoryResource | None = None,
) -> Buffer:
    """Copy bits ``[begin, end)`` of ``mask`` into a mask starting at bit 0."""
    return bools_to_mask(mask_to_bools(mask, begin, end), memory_resource)


def bitmask_and(
    masks: Iterable[tuple[Buffer | None, int]], size: int
) -> tuple[Buffer | None, int]:
    """
    Combine the validity of several views.

    Parameters
    ----------
    masks : iterable of (mask, offset)
        Each mask with the bit offset of the view it describes. ``None``
        masks are all valid.
    size : int
        Number of rows in every view.

    Returns
    -------
    tuple of (mask, null_count)
        The mask is ``None`` if none of the inputs had one.
    """
    combined = None
    for mask, offset in masks:
        if mask is None:
            continue
        bools = mask_to_bools(mask, offset, offset + size)
        combined = bools if combined is None else combined & bools
    if combined is None:
        return None, 0
    return bools_to_mask(combined), int(size - np.count_nonzero(combined))


def set_bits(
    raw: np.ndarray, begin: int, end: int, valid: bool
) -> None:
    """Set bits ``[begin, end)`` of a writeable mask array in place."""
    if end <= begin:
        return
    first_byte = begin // 8
    last_byte = (end + 7) // 8
    bits = np.unpackbits(raw[first_byte:last_byte], bitorder="little")
    start = begin - first_byte * 8
    bits[start : start + (end - begin)] = 1 if valid else 0
    raw[first_byte:last_byte] = np.packbits(bits, bitorder="little")


def as_mask(mask, offset: int, size: int) -> Buffer:
    """
    Coerce ``mask`` into a mask buffer for a view of ``size`` rows starting
    at bit ``offset``.

    ``mask`` may be a Buffer or raw mask bytes (``bytes``, ``bytearray``,
    ``memoryview`` or a uint8 array), which are used as is, or a sequence of
    per-row booleans (or 0/1 integers) describing the rows of the view,
    which are packed.
    """
    num_bits = offset + size
    if isinstance(mask, Buffer):
        buf = mask.copy(deep=False)
    elif isinstance(mask, (bytes, bytearray, memoryview)):
        buf = as_buffer(mask)
    else:
        ary = np.asarray(mask)
        if ary.dtype == np.uint8:
            buf = as_buffer(ary)
        elif ary.dtype == np.bool_ or ary.dtype.kind == "i":
            if ary.size != size:
                raise ValueError(
                    f"Expected {size} validity values, got {ary.size}"
                )
            return bools_to_mask(
                np.concatenate(
                    [np.ones(offset, dtype=np.bool_), ary.astype(np.bool_)]
                )
            )
        else:
            raise TypeError(
                f"Cannot interpret a {ary.dtype} array as a null mask"
            )
    if buf.size * 8 < num_bits:
        raise ValueError(
            f"Mask of {buf.size} bytes cannot describe {num_bits} rows"
        )
    return buf
