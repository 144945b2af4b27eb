# SPDX-FileCopyrightText: Copyright (c) 2022-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from colengine.core.buffer.buffer import Buffer, BufferOwner

if TYPE_CHECKING:
    from colengine.core.buffer.memory_resource import MemoryResource


def get_buffer_owner(data: Any) -> BufferOwner | None:
    """Get the owner of `data`, if one exists

    Search through the stack of data owners in order to find an
    owner BufferOwner (incl. subclasses).

    Parameters
    ----------
    data
        The data object to search for a BufferOwner instance

    Return
    ------
    BufferOwner or None
        The owner of `data` if found otherwise None.
    """

    if isinstance(data, BufferOwner):
        return data
    if hasattr(data, "owner"):
        return get_buffer_owner(data.owner)
    return None


def as_buffer(
    data: Any,
    *,
    memory_resource: MemoryResource | None = None,
) -> Buffer:
    """Factory function to wrap `data` in a Buffer object.

    If `data` is a Buffer already, a new handle onto the same memory is
    returned and no data is copied. Otherwise `data` must be convertible to
    a C-contiguous NumPy array (or support the buffer protocol) and is copied
    into a new allocation from `memory_resource`.

    Raises ValueError if `data` isn't C-contiguous.

    Parameters
    ----------
    data : buffer-like or array-like
        A buffer-like or array-like object.
    memory_resource : MemoryResource, optional
        The resource used for the new allocation.

    Return
    ------
    Buffer
        A buffer handle.
    """
    if isinstance(data, Buffer):
        return data.copy(deep=False)
    owner = BufferOwner.from_host_memory(data, memory_resource)
    return Buffer(owner=owner)


def allocate_buffer(
    nbytes: int, memory_resource: MemoryResource | None = None
) -> Buffer:
    """A new zero-filled buffer of `nbytes`."""
    return Buffer(owner=BufferOwner.allocate(nbytes, memory_resource))
