# SPDX-FileCopyrightText: Copyright (c) 2022-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
"""Host memory resources used to allocate buffer storage."""

from __future__ import annotations

import threading

import numpy as np

from colengine.core.buffer.string import format_bytes
from colengine.options import get_option


class MemoryResource:
    """Allocates zero-initialized host memory as uint8 NumPy arrays."""

    def allocate(self, nbytes: int) -> np.ndarray:
        if nbytes < 0:
            raise ValueError("nbytes cannot be negative")
        return np.zeros(nbytes, dtype=np.uint8)

    def deallocate(self, nbytes: int) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class TrackingMemoryResource(MemoryResource):
    """A memory resource recording live and peak allocation statistics.

    Parameters
    ----------
    upstream : MemoryResource, optional
        The resource performing the actual allocations.
    """

    def __init__(self, upstream: MemoryResource | None = None) -> None:
        self._upstream = MemoryResource() if upstream is None else upstream
        self._lock = threading.Lock()
        self._current_bytes = 0
        self._peak_bytes = 0
        self._total_allocations = 0
        self._live_allocations = 0

    @property
    def upstream(self) -> MemoryResource:
        return self._upstream

    @property
    def current_bytes(self) -> int:
        return self._current_bytes

    @property
    def peak_bytes(self) -> int:
        return self._peak_bytes

    @property
    def total_allocations(self) -> int:
        return self._total_allocations

    @property
    def live_allocations(self) -> int:
        return self._live_allocations

    def allocate(self, nbytes: int) -> np.ndarray:
        ary = self._upstream.allocate(nbytes)
        with self._lock:
            self._current_bytes += nbytes
            self._peak_bytes = max(self._peak_bytes, self._current_bytes)
            self._total_allocations += 1
            self._live_allocations += 1
        return ary

    def deallocate(self, nbytes: int) -> None:
        self._upstream.deallocate(nbytes)
        with self._lock:
            self._current_bytes -= nbytes
            self._live_allocations -= 1

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"current={format_bytes(self._current_bytes)}, "
            f"peak={format_bytes(self._peak_bytes)}, "
            f"live_allocations={self._live_allocations})"
        )


_current_resource: MemoryResource | None = None


def _default_memory_resource() -> MemoryResource:
    if get_option("memory.track_allocations"):
        return TrackingMemoryResource()
    return MemoryResource()


def get_current_memory_resource() -> MemoryResource:
    """The resource used when an operation is not given one explicitly."""
    global _current_resource
    if _current_resource is None:
        _current_resource = _default_memory_resource()
    return _current_resource


def set_current_memory_resource(mr: MemoryResource) -> None:
    global _current_resource
    if not isinstance(mr, MemoryResource):
        raise TypeError(
            f"Expected a MemoryResource, got {type(mr).__name__}"
        )
    _current_resource = mr


def reset_current_memory_resource() -> None:
    global _current_resource
    _current_resource = None
