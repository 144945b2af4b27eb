# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from colengine.core import dtypes
from colengine.core._internals import null_mask
from colengine.core.column.column import (
    ColumnBase,
    _fill_nulls,
    column_from_host,
    object_array,
)
from colengine.utils.dtypes import SIZE_TYPE

if TYPE_CHECKING:
    from collections.abc import Sequence

    from typing_extensions import Self

    from colengine.core.buffer import Buffer, MemoryResource
    from colengine.core.column.numerical import NumericalColumn
    from colengine.core.dtypes import DataType


class ListColumn(ColumnBase):
    """
    A Column of variable length lists.

    Row ``i`` holds the elements ``[offsets[i], offsets[i + 1])`` of the
    ``values`` child.
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
        if not dtype.is_nested:
            raise ValueError(f"dtype must be a list type, got {dtype}")
        if data is not None:
            raise ValueError("ListColumn stores its data in children")
        if children:
            if len(children) != 2:
                raise ValueError(
                    "ListColumn requires (offsets, values) children"
                )
            if children[0].dtype != SIZE_TYPE:
                raise TypeError(
                    f"List offsets must be {SIZE_TYPE}, "
                    f"got {children[0].dtype}"
                )
            if children[1].dtype != dtype.element_type:
                raise TypeError(
                    f"List values must be {dtype.element_type}, "
                    f"got {children[1].dtype}"
                )
        elif size != 0:
            raise ValueError("A non-empty ListColumn requires children")
        super().__init__(
            data=None,
            size=size,
            dtype=dtype,
            mask=mask,
            offset=offset,
            null_count=null_count,
            children=children,
        )

    @classmethod
    def _base_size_of(
        cls,
        data: Buffer | None,
        dtype: DataType,
        children: tuple[ColumnBase, ...],
    ) -> int:
        if not children:
            return 0
        return max(len(children[0]) - 1, 0)

    @classmethod
    def _from_rows(
        cls,
        rows: Sequence[list],
        valid: np.ndarray | None,
        dtype: DataType,
        memory_resource: MemoryResource | None = None,
    ) -> ListColumn:
        size = len(rows)
        if valid is not None:
            rows = [row if ok else [] for row, ok in zip(rows, valid)]
        lengths = [len(row) for row in rows]
        offsets = np.zeros(size + 1, dtype=np.int32)
        np.cumsum(lengths, out=offsets[1:])
        flat = [element for row in rows for element in row]
        element_type = dtype.element_type
        flat_valid = None
        if any(element is None for element in flat):
            flat_valid = np.array([element is not None for element in flat])
        mask = None
        null_count = 0
        if valid is not None:
            mask = null_mask.bools_to_mask(valid, memory_resource)
            null_count = int(size - np.count_nonzero(valid))
        return cls(
            data=None,
            size=size,
            dtype=dtype,
            mask=mask,
            null_count=null_count,
            children=(
                column_from_host(
                    offsets, None, SIZE_TYPE, memory_resource=memory_resource
                ),
                column_from_host(
                    _fill_nulls(flat, element_type),
                    flat_valid,
                    element_type,
                    memory_resource=memory_resource,
                ),
            ),
        )

    @property
    def offsets(self) -> NumericalColumn:
        return self.get_child(0)

    @property
    def elements(self) -> ColumnBase:
        """The child column holding the elements of every list."""
        return self.get_child(1)

    def _host_values(self) -> np.ndarray:
        if len(self) == 0:
            return object_array([])
        offsets = self.offsets._data_view()[
            self.offset : self.offset + len(self) + 1
        ]
        flat = self.elements.to_pylist()
        return object_array(
            [flat[begin:end] for begin, end in zip(offsets[:-1], offsets[1:])]
        )

    def _element(self, i: int) -> list:
        offsets = self.offsets._data_view()
        begin = int(offsets[self.offset + i])
        end = int(offsets[self.offset + i + 1])
        with self.elements.slice(begin, end) as part:
            return part.to_pylist()

    def _null_placeholder(self) -> list:
        return []

    @property
    def memory_usage(self) -> int:
        n = (len(self) + 1) * SIZE_TYPE.itemsize
        if self.nullable:
            n += null_mask.bitmask_allocation_size_bytes(len(self))
        if self.base_children:
            n += self.elements.memory_usage
        return n

    def count_elements(self) -> NumericalColumn:
        """Number of elements of each list; null rows stay null."""
        offsets = self.offsets._data_view()[
            self.offset : self.offset + len(self) + 1
        ]
        return column_from_host(
            np.diff(offsets).astype(np.int32), self._validity(), SIZE_TYPE
        )

    def _reduce(self, op: str, **kwargs) -> Any:
        raise TypeError(f"{op} is not supported for {self.dtype} columns")

    def _scan(self, op: str) -> Self:
        raise TypeError(f"{op} is not supported for {self.dtype} columns")

    def cast(self, dtype) -> ColumnBase:
        dtype = dtypes.dtype(dtype)
        if dtype == self.dtype:
            return self.copy()
        return super().cast(dtype)
