# SPDX-FileCopyrightText: Copyright (c) 2018-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np
import pyarrow as pa

from colengine.core import dtypes
from colengine.core._internals import aggregation, copying, null_mask
from colengine.core.buffer import as_buffer
from colengine.core.column.column import (
    ColumnBase,
    column_from_host,
    object_array,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from typing_extensions import Self

    from colengine._typing import Dtype
    from colengine.core.buffer import Buffer, MemoryResource
    from colengine.core.column.numerical import NumericalColumn
    from colengine.core.dtypes import DataType


class DictionaryColumn(ColumnBase):
    """
    A dictionary encoded Column.

    ``base_data`` holds one int32 index per row into the ``keys`` child,
    which stores each distinct value once. Operations that rebuild a
    dictionary column keep every key of the source, including keys no
    longer referenced by any row.
    """

    def __init__(
        self,
        data: Buffer | None,
        size: int,
        dtype: DataType,
        mask: Buffer | None = None,
        offset: int = 0,
        null_count: int | None = None,
        children: tuple[ColumnBase, ...] = (),
    ):
        if not dtype.is_dictionary:
            raise ValueError(f"dtype must be a dictionary type, got {dtype}")
        if len(children) != 1:
            raise ValueError("DictionaryColumn requires a (keys,) child")
        if children[0].dtype != dtype.key_type:
            raise TypeError(
                f"Dictionary keys must be {dtype.key_type}, "
                f"got {children[0].dtype}"
            )
        super().__init__(
            data=data,
            size=size,
            dtype=dtype,
            mask=mask,
            offset=offset,
            null_count=null_count,
            children=children,
        )

    @classmethod
    def _encode(
        cls,
        values: Sequence[Any],
        valid: np.ndarray | None,
        dtype: DataType,
        memory_resource: MemoryResource | None = None,
        keys: Sequence[Any] = (),
    ) -> DictionaryColumn:
        """
        Dictionary encode host values.

        Keys start with ``keys`` and are extended with the distinct values
        of the valid rows in order of first appearance.
        """
        key_list = list(keys)
        positions = {key: i for i, key in enumerate(key_list)}
        indices = np.zeros(len(values), dtype=np.int32)
        for i, value in enumerate(values):
            if valid is not None and not valid[i]:
                continue
            if isinstance(value, np.generic):
                value = value.item()
            index = positions.get(value)
            if index is None:
                index = positions[value] = len(key_list)
                key_list.append(value)
            indices[i] = index
        key_type = dtype.key_type
        if key_type.is_fixed_width:
            key_values = np.array(key_list, dtype=key_type.numpy_dtype)
        else:
            key_values = object_array(key_list)
        mask = None
        null_count = 0
        if valid is not None:
            mask = null_mask.bools_to_mask(valid, memory_resource)
            null_count = int(len(values) - np.count_nonzero(valid))
        return cls(
            data=as_buffer(indices, memory_resource=memory_resource),
            size=len(values),
            dtype=dtype,
            mask=mask,
            null_count=null_count,
            children=(
                column_from_host(
                    key_values,
                    None,
                    key_type,
                    memory_resource=memory_resource,
                ),
            ),
        )

    @property
    def keys(self) -> ColumnBase:
        return self.get_child(0)

    @property
    def indices(self) -> NumericalColumn:
        """A copy of the int32 index of each row; null rows stay null."""
        return column_from_host(
            self._data_view(), self._validity(), dtypes.int32
        )

    def _host_values(self) -> np.ndarray:
        return copying.take(self.keys._host_values(), self._data_view())

    def _element(self, i: int) -> Any:
        return self.keys.get_value(int(self._data_view()[i]))

    def _null_placeholder(self) -> Any:
        return "" if self.dtype.key_type.is_string else 0

    def _with_host_values(
        self,
        values: np.ndarray,
        valid: np.ndarray | None,
        memory_resource: MemoryResource | None = None,
    ) -> Self:
        return self._encode(
            values,
            valid,
            self.dtype,
            memory_resource=memory_resource,
            keys=self.keys._host_values().tolist(),
        )

    def decode(self) -> ColumnBase:
        """A column of the key type holding the value of every row."""
        self._check_alive()
        return column_from_host(
            self._host_values(), self._validity(), self.dtype.key_type
        )

    def cast(self, dtype: Dtype) -> ColumnBase:
        """Decode into a column of the key type; other types are
        unsupported."""
        dtype = dtypes.dtype(dtype)
        if dtype == self.dtype:
            return self.copy()
        if dtype == self.dtype.key_type:
            return self.decode()
        return super().cast(dtype)

    def _reduce(self, op: str, **kwargs) -> Any:
        self._check_alive()
        return aggregation.reduce(
            self._host_values(),
            self._validity(),
            op,
            self.dtype.key_type,
            **kwargs,
        )

    def _scan(self, op: str) -> ColumnBase:
        with self.decode() as decoded:
            return decoded._scan(op)

    def to_arrow(self) -> pa.Array:
        valid = self._validity()
        indices = pa.array(
            self._data_view(),
            type=pa.int32(),
            mask=None if valid is None else ~valid,
        )
        return pa.DictionaryArray.from_arrays(indices, self.keys.to_arrow())
