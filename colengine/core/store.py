# SPDX-FileCopyrightText: Copyright (c) 2018-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

import collections
import logging
import threading

logger = logging.getLogger(__name__)


class TableStore:
    """
    A reference counted registry of named Tables.

    ``set`` registers a table under a key or, if the key is already
    registered, adds a reference to the existing table. ``drop`` removes one
    reference; the table is removed from the store (and optionally
    disposed) once its last reference is dropped. All methods are safe to
    call from several threads.

    Parameters
    ----------
    dispose_on_drop : bool, default False
        Whether a table is disposed when its last reference is dropped.
    """

    def __init__(self, dispose_on_drop=False):
        self._dct = {}
        self._refct = collections.defaultdict(int)
        self._lock = threading.Lock()
        self._dispose_on_drop = dispose_on_drop

    def set(self, key, value):
        """Register ``value`` under ``key`` and return its reference count."""
        with self._lock:
            self._refct[key] += 1
            if self._refct[key] == 1:
                self._dct[key] = value
            return self._refct[key]

    def get(self, key):
        with self._lock:
            try:
                return self._dct[key]
            except KeyError:
                raise KeyError(f"No table registered as {key!r}") from None

    def refcount(self, key):
        with self._lock:
            return self._refct.get(key, 0)

    def drop(self, key):
        """Remove one reference to ``key``; returns the remaining count."""
        with self._lock:
            if key not in self._dct:
                raise KeyError(f"No table registered as {key!r}")
            self._refct[key] -= 1
            refct = self._refct[key]
            table = None
            if refct == 0:
                del self._refct[key]
                table = self._dct.pop(key)
        if table is not None:
            logger.debug("Dropped last reference to table %r", key)
            if self._dispose_on_drop:
                table.dispose()
        return refct

    def keys(self):
        with self._lock:
            return list(self._dct)

    def __contains__(self, key):
        with self._lock:
            return key in self._dct

    def __len__(self):
        with self._lock:
            return len(self._dct)
