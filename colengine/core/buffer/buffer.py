# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import threading
import weakref
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Literal

import numpy as np
from typing_extensions import Self

from colengine.core.buffer.memory_resource import (
    MemoryResource,
    get_current_memory_resource,
)
from colengine.core.buffer.string import format_bytes
from colengine.errors import AliasingError, UseAfterDisposeError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class BufferOwner:
    """An owning buffer that represents host memory.

    This class isn't meant to be used throughout colengine. Instead, it
    standardizes data owning by wrapping one allocation. Multiple `Buffer`
    instances, which are the ones used throughout colengine, can then refer
    to the same `BufferOwner` instance.

    Every `Buffer` referring to an owner is a counted handle. The owner
    releases its allocation once the last handle has been released, either
    explicitly through `Buffer.release` or by garbage collection. Write
    access through a handle requires it to be the only live handle.

    Use `from_host_memory` to create a new instance holding a copy of
    existing host memory and `allocate` for a new zero-filled allocation.

    Parameters
    ----------
    data
        A one dimensional, C-contiguous uint8 NumPy array.
    memory_resource
        The resource `data` was allocated from.
    """

    _data: np.ndarray | None
    _size: int
    _handles: int

    def __init__(
        self,
        *,
        data: np.ndarray,
        memory_resource: MemoryResource | None = None,
    ):
        if data.dtype != np.uint8 or data.ndim != 1:
            raise ValueError("data must be a one dimensional uint8 array")
        if not data.flags["C_CONTIGUOUS"]:
            raise ValueError("Buffer data must be C-contiguous")
        self._data = data
        self._size = data.size
        self._memory_resource = memory_resource
        self._handles = 0
        self._lock = threading.RLock()

    @classmethod
    def allocate(
        cls, nbytes: int, memory_resource: MemoryResource | None = None
    ) -> Self:
        """Create an owner of a new zero-filled allocation of `nbytes`."""
        mr = (
            get_current_memory_resource()
            if memory_resource is None
            else memory_resource
        )
        return cls(data=mr.allocate(nbytes), memory_resource=mr)

    @classmethod
    def from_host_memory(
        cls, data: Any, memory_resource: MemoryResource | None = None
    ) -> Self:
        """Create an owner from a buffer or array like object

        Data must implement `__array_interface__`, the buffer protocol, and/or
        be convertible to a buffer object using `numpy.asanyarray()`

        The host memory is copied to a new allocation.

        Parameters
        ----------
        data : Any
            An object that represents host memory.

        Returns
        -------
        BufferOwner
            BufferOwner wrapping a copy of `data`.
        """
        if isinstance(data, (bytes, bytearray, memoryview)):
            ary = np.frombuffer(data, dtype=np.uint8)
        else:
            ary = np.asanyarray(data)
            if not ary.flags["C_CONTIGUOUS"]:
                raise ValueError("Buffer data must be C-contiguous")
            ary = ary.reshape(-1).view(np.uint8)
        owner = cls.allocate(ary.size, memory_resource)
        owner._data[:] = ary
        return owner

    @property
    def size(self) -> int:
        """Size of the buffer in bytes."""
        return self._size

    @property
    def nbytes(self) -> int:
        """Size of the buffer in bytes."""
        return self._size

    @property
    def handle_count(self) -> int:
        """Number of live `Buffer` handles referring to this owner."""
        return self._handles

    @property
    def released(self) -> bool:
        return self._data is None

    def _acquire_handle(self) -> None:
        with self._lock:
            if self._data is None:
                raise UseAfterDisposeError(
                    "Cannot create a handle to a released buffer"
                )
            self._handles += 1

    def _release_handle(self) -> None:
        with self._lock:
            self._handles -= 1
            if self._handles > 0 or self._data is None:
                return
            self._data = None
        if self._memory_resource is not None:
            self._memory_resource.deallocate(self._size)
        logger.debug("Released %s host allocation", format_bytes(self._size))

    def view(self, offset: int, size: int) -> np.ndarray:
        data = self._data
        if data is None:
            raise UseAfterDisposeError("Buffer memory has been released")
        return data[offset : offset + size]

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} size={format_bytes(self._size)} "
            f"handles={self._handles}>"
        )


class Buffer:
    """A counted handle onto a slice of a `BufferOwner`.

    Use the factory function `as_buffer` to create a Buffer instance.

    Note
    ----
    This buffer is untyped, so all indexing and sizes are in bytes.

    Parameters
    ----------
    owner
        The owner this refers to.
    offset
        The offset relative to the start memory of owner (in bytes).
    size
        The size of the buffer (in bytes). If None, use the size of owner.
    """

    def __init__(
        self,
        *,
        owner: BufferOwner,
        offset: int = 0,
        size: int | None = None,
    ) -> None:
        size = owner.size - offset if size is None else size
        if size < 0:
            raise ValueError("size cannot be negative")
        if offset < 0:
            raise ValueError("offset cannot be negative")
        if offset + size > owner.size:
            raise ValueError(
                "offset+size cannot be greater than the size of owner"
            )
        owner._acquire_handle()
        self._owner = owner
        self._offset = offset
        self._size = size
        self._finalizer = weakref.finalize(self, owner._release_handle)

    @property
    def size(self) -> int:
        """Size of the buffer in bytes."""
        return self._size

    @property
    def nbytes(self) -> int:
        """Size of the buffer in bytes."""
        return self._size

    @property
    def owner(self) -> BufferOwner:
        """Object owning the memory of the buffer."""
        return self._owner

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def released(self) -> bool:
        return not self._finalizer.alive

    @property
    def exclusive(self) -> bool:
        """Whether this is the only live handle onto the owner."""
        return not self.released and self._owner.handle_count == 1

    def release(self) -> None:
        """Drop this handle. Calling it more than once is a no-op."""
        self._finalizer()

    def __getitem__(self, key: slice) -> Self:
        """Create a new handle onto a slice of the buffer."""
        if not isinstance(key, slice):
            raise TypeError(
                "Argument 'key' has incorrect type "
                f"(expected slice, got {key.__class__.__name__})"
            )
        self._check_alive()
        start, stop, step = key.indices(self.size)
        if step != 1:
            raise ValueError("slice must be C-contiguous")
        return self.__class__(
            owner=self._owner,
            offset=self._offset + start,
            size=max(stop - start, 0),
        )

    def _check_alive(self) -> None:
        if self.released:
            raise UseAfterDisposeError("Buffer handle has been released")

    def _check_writable(self) -> None:
        if self._owner.handle_count != 1:
            raise AliasingError(
                "Cannot write to a buffer shared by "
                f"{self._owner.handle_count} handles"
            )

    def view(
        self, mode: Literal["read", "write"] = "read"
    ) -> np.ndarray:
        """Access the bytes of the buffer as a uint8 NumPy array.

        Parameters
        ----------
        mode : str
            Supported values are {"read", "write"}. "read" returns a
            read-only view. "write" returns a writeable view and requires
            this handle to be the only live handle onto the owner when it
            is called; use `write_access` to keep that guarantee for the
            duration of the writes.

        Raises
        ------
        UseAfterDisposeError
            If the handle or its owner has been released.
        AliasingError
            If write access is requested on shared memory.
        """
        self._check_alive()
        with self._owner._lock:
            if mode == "write":
                self._check_writable()
            ary = self._owner.view(self._offset, self._size)
        if mode == "read":
            ary = ary.view()
            ary.flags.writeable = False
        return ary

    @contextmanager
    def write_access(self) -> Iterator[np.ndarray]:
        """Hold exclusive write access to the bytes of the buffer.

        Yields a writeable uint8 view. The owner stays locked until the
        block exits, so no other handle onto it can be created while the
        view is written.

        Raises
        ------
        UseAfterDisposeError
            If the handle or its owner has been released.
        AliasingError
            If another live handle refers to the owner.
        """
        self._check_alive()
        with self._owner._lock:
            self._check_writable()
            yield self._owner.view(self._offset, self._size)

    def copy(
        self, deep: bool = True, memory_resource: MemoryResource | None = None
    ) -> Self:
        """Return a copy of Buffer.

        Parameters
        ----------
        deep : bool, default True
            - If deep=True, returns a deep copy of the underlying data.
            - If deep=False, returns a new `Buffer` handle that refers
              to the same `BufferOwner` as this one. Thus, no data
              are being copied.

        Returns
        -------
        Buffer
            A new buffer that either refers to either a new or an existing
            `BufferOwner` depending on the `deep` argument (see above).
        """
        self._check_alive()
        if not deep:
            return self.__class__(
                owner=self._owner, offset=self._offset, size=self._size
            )
        owner = BufferOwner.from_host_memory(self.view(), memory_resource)
        return self.__class__(owner=owner, offset=0, size=owner.size)

    def tobytes(self) -> bytes:
        return self.view().tobytes()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(owner={self._owner!r}, "
            f"offset={self._offset!r}, size={self._size!r})"
        )

    def __str__(self) -> str:
        return (
            f"<{self.__class__.__name__} size={format_bytes(self._size)} "
            f"offset={format_bytes(self._offset)} of {self._owner}>"
        )
