# SPDX-FileCopyrightText: Copyright (c) 2018-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd
import pyarrow as pa
from typing_extensions import Self

import colengine
from colengine.core import dtypes
from colengine.core._internals import (
    aggregation,
    copying,
    null_mask,
    replace,
    stream_compaction,
)
from colengine.core.buffer import Buffer, as_buffer
from colengine.core.dtypes import DataType
from colengine.core.mixins import (
    BinaryOperand,
    Reducible,
    Scannable,
    UnaryOperand,
)
from colengine.core.scalar import Scalar
from colengine.errors import (
    AliasingError,
    RangeError,
    ShapeMismatchError,
    UnsupportedCastError,
    UseAfterDisposeError,
)
from colengine.options import get_option
from colengine.utils.dtypes import (
    host_integer_bits,
    infer_dtype_from_values,
    to_pandas_dtype,
)

if TYPE_CHECKING:
    from colengine._typing import ColumnLike, Dtype, ScalarLike
    from colengine.core.buffer import MemoryResource
    from colengine.core.column.numerical import NumericalColumn

logger = logging.getLogger(__name__)


def _type_specific(name: str, kind: str):
    def method(self, *args, **kwargs):
        raise TypeError(
            f"{name} is only supported for {kind} columns, "
            f"not {self.dtype}"
        )

    method.__name__ = name
    method.__doc__ = f"Only supported by {kind} columns."
    return method


class ColumnBase(BinaryOperand, Reducible, Scannable, UnaryOperand):
    """
    A typed, nullable view onto columnar data in host memory.

    A ColumnBase may be composed of:

    * A *data* Buffer of fixed-width elements
    * One or more (optional) *children* Columns
    * An (optional) *mask* Buffer representing the nullmask

    The *dtype* indicates the ColumnBase's element type. ``offset`` and
    ``size`` select the rows of the underlying buffers this column views;
    slicing shares buffers while every transforming operation returns a
    column with new buffers.

    Columns must be released with ``dispose`` (or used as a context
    manager) to give back their buffer handles deterministically. Any use
    of a disposed column raises ``UseAfterDisposeError``.
    """

    _VALID_BINARY_OPERATIONS = BinaryOperand._SUPPORTED_BINARY_OPERATIONS
    _VALID_REDUCTIONS = Reducible._SUPPORTED_REDUCTIONS
    _VALID_SCANS = Scannable._SUPPORTED_SCANS
    _VALID_UNARY_OPERATIONS = UnaryOperand._SUPPORTED_UNARY_OPERATIONS

    def __init__(
        self,
        data: Buffer | None,
        size: int,
        dtype: DataType,
        mask: Buffer | None = None,
        offset: int = 0,
        null_count: int | None = None,
        children: tuple[ColumnBase, ...] = (),
    ) -> None:
        if size < 0:
            raise ValueError("size must be >=0")
        if offset < 0:
            raise ValueError("offset must be >=0")
        if null_count is not None and not 0 <= null_count <= size:
            raise ValueError(
                f"null_count must be in [0, {size}], got {null_count}"
            )
        if data is not None and not isinstance(data, Buffer):
            raise TypeError(
                "Expected a Buffer or None for data, "
                f"got {type(data).__name__}"
            )
        if mask is not None and not isinstance(mask, Buffer):
            raise TypeError(
                "Expected a Buffer or None for mask, "
                f"got {type(mask).__name__}"
            )
        if not isinstance(children, tuple) or any(
            not isinstance(child, ColumnBase) for child in children
        ):
            raise TypeError("children must be a tuple of Columns")
        self._disposed = False
        self._dtype = dtype
        self._size = size
        self._offset = offset
        self._base_data = data
        self._base_children = children
        self._base_mask = None
        self._null_count = None
        if offset + size > self.base_size:
            raise RangeError(
                f"offset ({offset}) + size ({size}) exceeds the "
                f"{self.base_size} rows of the underlying data"
            )
        if mask is not None:
            if mask.size * 8 < offset + size:
                raise ValueError(
                    f"The Buffer for mask is smaller than expected, got "
                    f"{mask.size} bytes for {offset + size} rows"
                )
            self._base_mask = mask
        self._null_count = null_count

    # Attributes

    def _check_alive(self) -> None:
        if self._disposed:
            raise UseAfterDisposeError(
                f"{type(self).__name__} has been disposed"
            )

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def dtype(self) -> DataType:
        return self._dtype

    @property
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    @property
    def offset(self) -> int:
        return self._offset

    @classmethod
    def _base_size_of(
        cls,
        data: Buffer | None,
        dtype: DataType,
        children: tuple[ColumnBase, ...],
    ) -> int:
        if data is None:
            return 0
        return data.size // dtype.itemsize

    @property
    def base_size(self) -> int:
        """Number of rows held by the underlying buffers."""
        return self._base_size_of(
            self._base_data, self._dtype, self._base_children
        )

    @property
    def base_data(self) -> Buffer | None:
        self._check_alive()
        return self._base_data

    @property
    def base_mask(self) -> Buffer | None:
        self._check_alive()
        return self._base_mask

    @property
    def base_children(self) -> tuple[ColumnBase, ...]:
        self._check_alive()
        return self._base_children

    @property
    def children(self) -> tuple[ColumnBase, ...]:
        return self.base_children

    def get_child(self, i: int) -> ColumnBase:
        children = self.base_children
        if not 0 <= i < len(children):
            raise RangeError(
                f"Child index {i} out of range for {len(children)} children"
            )
        return children[i]

    @property
    def nullable(self) -> bool:
        return self.base_mask is not None

    @property
    def has_nulls(self) -> bool:
        return self.null_count != 0

    @property
    def null_count(self) -> int:
        self._check_alive()
        if self._null_count is None:
            if self._base_mask is None or self._size == 0:
                self._null_count = 0
            else:
                self._null_count = null_mask.count_unset_bits(
                    self._base_mask, self._offset, self._offset + self._size
                )
        return self._null_count

    @property
    def memory_usage(self) -> int:
        """Bytes of the buffers referenced by the rows of this view."""
        n = 0
        if self.base_data is not None:
            n += self._size * self._dtype.itemsize
        if self.nullable:
            n += null_mask.bitmask_allocation_size_bytes(self._size)
        return n + sum(child.memory_usage for child in self._view_children())

    def _view_children(self) -> tuple[ColumnBase, ...]:
        return self.base_children

    # Ownership

    def _buffers(self) -> list[Buffer]:
        bufs = [b for b in (self._base_data, self._base_mask) if b is not None]
        for child in self._base_children:
            bufs.extend(child._buffers())
        return bufs

    def _is_exclusive(self) -> bool:
        self._check_alive()
        return all(buf.exclusive for buf in self._buffers())

    def _require_exclusive(self, operation: str) -> None:
        if not self._is_exclusive():
            raise AliasingError(
                f"Cannot {operation} a column whose buffers are shared "
                "with other live views"
            )

    def dispose(self) -> None:
        """
        Release this column's handles on its data, mask and children.

        Storage is freed once no other view refers to it. Calling dispose
        more than once has no effect.
        """
        if self._disposed:
            return
        for buf in (self._base_data, self._base_mask):
            if buf is not None:
                buf.release()
        for child in self._base_children:
            child.dispose()
        self._disposed = True
        logger.debug(
            "Disposed %s column of %d rows", self._dtype, self._size
        )

    def __enter__(self) -> Self:
        self._check_alive()
        return self

    def __exit__(self, *args) -> None:
        self.dispose()

    # Validity

    def _validity(self) -> np.ndarray | None:
        """Per-row validity of this view, ``None`` without a mask."""
        mask = self.base_mask
        if mask is None:
            return None
        return null_mask.mask_to_bools(
            mask, self._offset, self._offset + self._size
        )

    def _valid_or_true(self) -> np.ndarray:
        valid = self._validity()
        return np.ones(self._size, dtype=np.bool_) if valid is None else valid

    def set_null_count(self, null_count: int | None) -> None:
        """
        Replace the cached null count. ``None`` recomputes it lazily.

        Requires exclusive ownership of the column's buffers.
        """
        self._require_exclusive("set the null count of")
        if null_count is not None and not 0 <= null_count <= self._size:
            raise ValueError(
                f"null_count must be in [0, {self._size}], got {null_count}"
            )
        self._null_count = null_count

    def set_null_mask(self, mask: Any, null_count: int | None = None) -> None:
        """
        Replace the null mask in place.

        Parameters
        ----------
        mask : Buffer, bytes-like, sequence of bool or None
            A raw bitmask covering ``offset + size`` bits, per-row validity
            of this view, or ``None`` to make the column non-nullable.
        null_count : int, optional
            The number of nulls in the view. Scanned from the mask if not
            given.

        Raises
        ------
        AliasingError
            If the column's buffers are shared with other live views.
        """
        self._require_exclusive("set the null mask of")
        new_mask = (
            None
            if mask is None
            else null_mask.as_mask(mask, self._offset, self._size)
        )
        if new_mask is None and null_count:
            raise ValueError("A column without a mask cannot have nulls")
        if self._base_mask is not None:
            self._base_mask.release()
        self._base_mask = new_mask
        self._null_count = 0 if new_mask is None else null_count

    # Host access

    def _data_view(self) -> np.ndarray:
        """Read-only element values of this view."""
        data = self.base_data
        return data.view().view(self._dtype.numpy_dtype)[
            self._offset : self._offset + self._size
        ]

    def _host_values(self) -> np.ndarray:
        """Element values of every row; values of null rows are unspecified."""
        return self._data_view()

    def _element(self, i: int) -> Any:
        return self._data_view()[i].item()

    def _with_host_values(
        self,
        values: np.ndarray,
        valid: np.ndarray | None,
        memory_resource: MemoryResource | None = None,
    ) -> Self:
        """A new column of this type holding ``values`` with ``valid``."""
        return column_from_host(
            values, valid, self._dtype, memory_resource=memory_resource
        )

    def get_value(self, i: int) -> Any:
        """
        The host value of row ``i`` or ``None`` for a null row.

        Negative ``i`` counts from the end.
        """
        self._check_alive()
        if i < 0:
            i += self._size
        if not 0 <= i < self._size:
            raise RangeError(
                f"Row {i} is out of bounds for {self._size} rows"
            )
        if self._base_mask is not None and not null_mask.mask_to_bools(
            self._base_mask, self._offset + i, self._offset + i + 1
        )[0]:
            return None
        return self._element(i)

    def __getitem__(self, key: int | slice) -> Any:
        if isinstance(key, slice):
            start, stop, step = key.indices(self._size)
            if step != 1:
                raise ValueError("Column slices must have a step of 1")
            return self.slice(start, stop)
        if isinstance(key, (int, np.integer)):
            return self.get_value(int(key))
        raise TypeError(
            f"Column indices must be integers or slices, not "
            f"{type(key).__name__}"
        )

    def to_pylist(self) -> list:
        """Host values of every row, ``None`` for nulls."""
        values = self._host_values().tolist()
        valid = self._validity()
        if valid is None:
            return values
        return [v if ok else None for v, ok in zip(values, valid)]

    def to_numpy(self) -> np.ndarray:
        """
        Copy the values into a NumPy array.

        Null rows of floating columns become NaN; other columns with nulls
        cannot be converted.
        """
        values = np.array(self._host_values())
        if self.has_nulls:
            if not self._dtype.is_floating:
                raise ValueError(
                    f"Cannot convert a {self._dtype} column with nulls to "
                    "numpy; fill the nulls first"
                )
            values[~self._validity()] = np.nan
        return values

    def to_arrow(self) -> pa.Array:
        if not self._dtype.is_fixed_width:
            return pa.array(self.to_pylist(), type=self._dtype.to_arrow())
        valid = self._validity()
        return pa.array(
            self._host_values(),
            type=self._dtype.to_arrow(),
            mask=None if valid is None else ~valid,
        )

    def to_pandas(self) -> pd.Series:
        """Convert to a pandas Series of the matching nullable dtype."""
        pandas_dtype = to_pandas_dtype(self._dtype)
        arrow_array = self.to_arrow()
        if isinstance(pandas_dtype, pd.api.extensions.ExtensionDtype) and not (
            isinstance(pandas_dtype, pd.CategoricalDtype)
        ):
            return pd.Series(
                pandas_dtype.__from_arrow__(arrow_array), copy=False
            )
        return arrow_array.to_pandas()

    @classmethod
    def from_arrow(cls, array: pa.Array | pa.ChunkedArray) -> ColumnBase:
        """Convert a pyarrow array into a Column."""
        if isinstance(array, pa.ChunkedArray):
            array = array.combine_chunks()
        if not isinstance(array, pa.Array):
            raise TypeError(
                f"Expected a pyarrow Array, got {type(array).__name__}"
            )
        dtype = dtypes.dtype(array.type)
        if not dtype.is_fixed_width:
            return as_column(array.to_pylist(), dtype=dtype)
        valid = None
        if array.null_count:
            valid = array.is_valid().to_numpy(zero_copy_only=False)
            array = array.fill_null(False if dtype.is_boolean else 0)
        values = array.to_numpy(zero_copy_only=False)
        return column_from_host(values, valid, dtype)

    def __repr__(self) -> str:
        max_rows = get_option("display.max_rows")
        if self._disposed:
            return f"<{type(self).__name__} (disposed) dtype={self._dtype}>"
        with self.slice(0, max_rows) as head_column:
            head = head_column.to_pylist()
        rows = ", ".join("null" if v is None else repr(v) for v in head)
        if self._size > max_rows:
            rows += ", ..."
        return (
            f"{object.__repr__(self)}\n"
            f"[{rows}]\n"
            f"dtype: {self._dtype}, size: {self._size}, "
            f"null_count: {self.null_count}"
        )

    # Views and copies

    def _shallow_copy(
        self, offset: int | None = None, size: int | None = None
    ) -> Self:
        return type(self)(
            data=None
            if self.base_data is None
            else self.base_data.copy(deep=False),
            size=self._size if size is None else size,
            dtype=self._dtype,
            mask=None
            if self.base_mask is None
            else self.base_mask.copy(deep=False),
            offset=self._offset if offset is None else offset,
            null_count=self._null_count if size is None else None,
            children=tuple(
                child._shallow_copy() for child in self.base_children
            ),
        )

    def slice(self, start: int, stop: int) -> Self:
        """
        A zero-copy view of rows ``[start, stop)``.

        Bounds follow Python slice semantics: negative values count from the
        end and out of range values are clamped.
        """
        self._check_alive()
        start, stop, _ = slice(start, stop).indices(self._size)
        stop = max(start, stop)
        return self._shallow_copy(
            offset=self._offset + start, size=stop - start
        )

    def copy(self, deep: bool = True) -> Self:
        """
        Makes a copy of the Column.

        Parameters
        ----------
        deep : bool, default True
            If True, the data and mask are copied into new buffers and the
            mask is re-based to start at the first row. If False, a new view
            sharing the buffers of this column is returned.
        """
        if not deep:
            self._check_alive()
            return self._shallow_copy()
        return self._with_host_values(self._host_values(), self._validity())

    # Row selection

    def _as_index_column(self, selection: Any, name: str) -> ColumnBase:
        if not isinstance(selection, ColumnBase):
            selection = as_column(selection)
        if selection.dtype.is_boolean or not selection.dtype.is_integer:
            raise TypeError(
                f"{name} must be an integer column, got {selection.dtype}"
            )
        return selection

    def gather(
        self,
        selection: ColumnLike,
        nullify_out_of_bounds: bool = False,
        memory_resource: MemoryResource | None = None,
    ) -> Self:
        """
        Select rows by position.

        Output row ``i`` is input row ``selection[i]``; negative positions
        count from the end.

        Parameters
        ----------
        selection : integer Column or sequence of int
            The row positions. Null entries select a null row.
        nullify_out_of_bounds : bool, default False
            If True, positions outside ``[-size, size)`` select a null row.
            If False, such positions are **undefined behavior**: no bounds
            check is made and an arbitrary row is returned. Set the
            ``gather.bounds_check`` option to raise a ``RangeError``
            instead while debugging.
        memory_resource : MemoryResource, optional
            Allocates the buffers of the result.
        """
        self._check_alive()
        selection = self._as_index_column(selection, "selection")
        positions, valid = copying.gather_map(
            selection._host_values(),
            selection._validity(),
            self._size,
            nullify=nullify_out_of_bounds,
        )
        own_valid = self._validity()
        if own_valid is not None:
            picked = copying.take(own_valid, positions)
            valid = picked if valid is None else valid & picked
        return self._with_host_values(
            copying.take(self._host_values(), positions),
            valid,
            memory_resource=memory_resource,
        )

    def apply_boolean_mask(self, selection: ColumnLike) -> Self:
        """Keep the rows where ``selection`` is true; nulls count as false."""
        self._check_alive()
        if not isinstance(selection, ColumnBase):
            selection = as_column(selection, dtype=dtypes.bool8)
        if not selection.dtype.is_boolean:
            raise TypeError(
                f"selection must be a bool8 column, got {selection.dtype}"
            )
        if len(selection) != self._size:
            raise ShapeMismatchError(
                f"selection has {len(selection)} rows, expected {self._size}"
            )
        return self._take_positions(
            stream_compaction.boolean_mask_positions(
                selection._host_values(), selection._validity()
            )
        )

    def _take_positions(self, positions: np.ndarray) -> Self:
        valid = self._validity()
        return self._with_host_values(
            copying.take(self._host_values(), positions),
            None if valid is None else copying.take(valid, positions),
        )

    def _normalize_source(
        self, value: Any
    ) -> tuple[np.ndarray, np.ndarray | None]:
        """Host values and validity of a Scalar, host literal or Column."""
        if isinstance(value, ColumnBase):
            if value.dtype != self._dtype:
                raise TypeError(
                    f"Expected a {self._dtype} column, got {value.dtype}"
                )
            return value._host_values(), value._valid_or_true()
        scalar = value if isinstance(value, Scalar) else Scalar(
            value, dtype=self._dtype
        )
        if scalar.dtype != self._dtype:
            scalar = Scalar(scalar.value, dtype=self._dtype)
        valid = np.array(scalar.is_valid())
        return self._scalar_to_host(scalar), valid

    def _scalar_to_host(self, scalar: Scalar) -> np.ndarray:
        if self._dtype.is_fixed_width:
            return scalar._to_numpy()
        out = np.empty((), dtype=object)
        out[()] = (
            scalar.value if scalar.is_valid() else self._null_placeholder()
        )
        return out

    def _null_placeholder(self) -> Any:
        """Host value stored in the null rows of object-backed columns."""
        return None

    def scatter(self, source: Any, scatter_map: ColumnLike) -> Self:
        """
        A copy of this column with rows ``scatter_map[i]`` replaced.

        ``source`` is a Column with one row per map entry or a Scalar (or
        host literal) written to every mapped row. Negative positions wrap
        once; positions out of range raise ``RangeError``.
        """
        self._check_alive()
        scatter_map = self._as_index_column(scatter_map, "scatter_map")
        positions = copying.scatter_map(
            scatter_map._host_values(), scatter_map._validity(), self._size
        )
        if isinstance(source, ColumnBase) and len(source) != len(positions):
            raise ShapeMismatchError(
                f"source has {len(source)} rows but the scatter map has "
                f"{len(positions)}"
            )
        src_values, src_valid = self._normalize_source(source)
        values = np.array(self._host_values())
        values[positions] = src_values
        valid = self._validity()
        if valid is not None or not src_valid.all():
            valid = self._valid_or_true()
            valid[positions] = src_valid
        return self._with_host_values(values, valid)

    def concat(self, other: ColumnBase) -> Self:
        """A new column with the rows of ``other`` appended."""
        return concat_columns([self, other])

    @classmethod
    def _concat(cls, objs: list[ColumnBase]) -> ColumnBase:
        values = np.concatenate([obj._host_values() for obj in objs])
        valid = None
        if any(obj.nullable for obj in objs):
            valid = np.concatenate([obj._valid_or_true() for obj in objs])
        return objs[0]._with_host_values(values, valid)

    @classmethod
    def sequence(
        cls, size: int, init: ScalarLike, step: ScalarLike | None = None
    ) -> NumericalColumn:
        """
        An arithmetic sequence ``init, init + step, ...`` of ``size`` rows.

        The column has the type of ``init``; ``step`` defaults to 1.
        """
        init = init if isinstance(init, Scalar) else Scalar(init)
        dtype = init.dtype
        if not dtype.is_numeric or dtype.is_boolean:
            raise TypeError(f"Cannot create a sequence of {dtype}")
        if not init.is_valid():
            raise ValueError("init cannot be null")
        step_value = 1 if step is None else Scalar(step, dtype=dtype).value
        return column_from_host(
            copying.sequence(size, init.value, step_value, dtype),
            None,
            dtype,
        )

    # Fill and replace

    def fill(
        self, value: ScalarLike, begin: int = 0, end: int | None = None
    ) -> Self:
        """
        A copy with rows ``[begin, end)`` set to ``value``.

        ``end`` defaults to the size of the column. A null value nulls the
        range.
        """
        self._check_alive()
        end = self._size if end is None else end
        copying.check_range(begin, end, self._size)
        fill_value, fill_valid = self._normalize_source(value)
        values = np.array(self._host_values())
        values[begin:end] = fill_value
        valid = self._validity()
        if valid is not None or not fill_valid:
            valid = self._valid_or_true()
            valid[begin:end] = fill_valid
        return self._with_host_values(values, valid)

    fill_in_place = _type_specific("fill_in_place", "fixed-width")

    def replace_nulls(self, value: Any) -> Self:
        """
        Replace null rows.

        Parameters
        ----------
        value : Column, Scalar, host literal or bool
            A Column of the same size supplies the value of each row; a
            Scalar or host literal replaces every null. ``True`` fills each
            null with the preceding valid value (forward fill) and ``False``
            with the following valid value (backward fill); nulls without
            such a neighbour stay null.
        """
        self._check_alive()
        valid = self._validity()
        if valid is None or valid.all():
            return self.copy()
        values = self._host_values()
        if isinstance(value, bool) and not self._dtype.is_boolean:
            out, out_valid = replace.replace_nulls_policy(
                values, valid, "ffill" if value else "bfill"
            )
        else:
            if isinstance(value, ColumnBase) and len(value) != self._size:
                raise ShapeMismatchError(
                    f"replacement has {len(value)} rows, "
                    f"expected {self._size}"
                )
            repl_values, repl_valid = self._normalize_source(value)
            out = replace.replace_where(values, ~valid, repl_values)
            out_valid = valid | repl_valid
        return self._with_host_values(
            out, None if out_valid.all() else out_valid
        )

    # Null predicates

    def is_null(self) -> NumericalColumn:
        """Bool8 column, true for null rows. Never nullable."""
        return column_from_host(~self._valid_or_true(), None, dtypes.bool8)

    def is_valid(self) -> NumericalColumn:
        """Bool8 column, true for valid rows. Never nullable."""
        return column_from_host(
            self._valid_or_true().copy(), None, dtypes.bool8
        )

    def drop_nulls(self) -> Self:
        valid = self._validity()
        if valid is None:
            return self.copy()
        return self._with_host_values(
            self._host_values()[valid], None
        )

    # Reductions and scans

    def _reduce(self, op: str, **kwargs) -> Any:
        """Compute the {op} of the non-null rows.

        Null rows are excluded. Returns a host value.
        """
        self._check_alive()
        return aggregation.reduce(
            self._host_values(), self._validity(), op, self._dtype, **kwargs
        )

    def var(self, ddof: int = 1) -> float:
        """Variance of the non-null rows with divisor ``N - ddof``."""
        return self._reduce("var", ddof=ddof)

    def std(self, ddof: int = 1) -> float:
        """Standard deviation of the non-null rows with divisor
        ``N - ddof``."""
        return self._reduce("std", ddof=ddof)

    def quantile(
        self,
        q: float = 0.5,
        interpolation: aggregation.Interpolation | str = "linear",
    ) -> Any:
        """
        The ``q``-th quantile of the non-null rows.

        Parameters
        ----------
        q : float, default 0.5
            The quantile, in ``[0, 1]``.
        interpolation : Interpolation or str, default "linear"
            How a quantile between two values is resolved: ``linear``,
            ``lower``, ``higher``, ``nearest`` or ``midpoint``.

        Raises
        ------
        RangeError
            If ``q`` is outside of ``[0, 1]``.
        """
        return self._reduce("quantile", q=q, interpolation=interpolation)

    def nunique(self, dropna: bool = True) -> int:
        """Number of distinct values; nulls count as one value unless
        ``dropna``."""
        return self._reduce("nunique", dropna=dropna)

    def _scan(self, op: str) -> Self:
        """Compute the {op} of the column.

        Null rows stay null and are skipped by the running value.
        """
        self._check_alive()
        valid = self._validity()
        values = aggregation.scan(self._host_values(), valid, op, self._dtype)
        return column_from_host(
            values, valid, aggregation.scan_dtype(op, self._dtype)
        )

    def _binaryop(self, other: Any, op: str) -> ColumnBase:
        raise TypeError(f"{op} is not supported for {self._dtype} columns")

    def _unaryop(self, op: str) -> ColumnBase:
        raise TypeError(f"{op} is not supported for {self._dtype} columns")

    def cast(self, dtype: Dtype) -> ColumnBase:
        if dtypes.dtype(dtype) == self._dtype:
            return self.copy()
        raise UnsupportedCastError(
            f"Cannot cast {self._dtype} to {dtypes.dtype(dtype)}"
        )

    # Operations only numeric or string columns implement

    is_nan = _type_specific("is_nan", "numeric")
    is_not_nan = _type_specific("is_not_nan", "numeric")
    drop_nans = _type_specific("drop_nans", "numeric")
    nans_to_nulls = _type_specific("nans_to_nulls", "numeric")
    replace_nans = _type_specific("replace_nans", "numeric")
    bools_to_mask = _type_specific("bools_to_mask", "numeric")
    strings_from_integers = _type_specific("strings_from_integers", "numeric")
    strings_from_floats = _type_specific("strings_from_floats", "numeric")
    strings_from_booleans = _type_specific("strings_from_booleans", "numeric")
    hex_from_integers = _type_specific("hex_from_integers", "numeric")
    ipv4_from_integers = _type_specific("ipv4_from_integers", "numeric")

    strings_to_integers = _type_specific("strings_to_integers", "string")
    strings_to_floats = _type_specific("strings_to_floats", "string")
    strings_to_booleans = _type_specific("strings_to_booleans", "string")
    hex_to_integers = _type_specific("hex_to_integers", "string")
    ipv4_to_integers = _type_specific("ipv4_to_integers", "string")
    string_is_integer = _type_specific("string_is_integer", "string")
    string_is_float = _type_specific("string_is_float", "string")
    string_is_hex = _type_specific("string_is_hex", "string")
    string_is_ipv4 = _type_specific("string_is_ipv4", "string")
    count_bytes = _type_specific("count_bytes", "string")
    count_characters = _type_specific("count_characters", "string")
    pad = _type_specific("pad", "string")
    zfill = _type_specific("zfill", "string")
    replace_slice = _type_specific("replace_slice", "string")
    split = _type_specific("split", "string")
    contains_re = _type_specific("contains_re", "string")
    matches_re = _type_specific("matches_re", "string")
    count_re = _type_specific("count_re", "string")
    get_json_object = _type_specific("get_json_object", "string")


def object_array(items) -> np.ndarray:
    """A 1-d object array of ``items``; nested lists stay elements."""
    out = np.empty(len(items), dtype=object)
    for i, item in enumerate(items):
        out[i] = item
    return out


def column_from_host(
    values: Any,
    valid: np.ndarray | None,
    dtype: DataType,
    memory_resource: MemoryResource | None = None,
) -> ColumnBase:
    """
    Build a column owning new buffers from per-row host values.

    ``values`` holds the element of every row (its value is ignored for null
    rows) and ``valid`` the per-row validity, ``None`` for no mask.
    """
    size = len(values)
    if valid is not None:
        valid = np.asarray(valid, dtype=np.bool_)
        if len(valid) != size:
            raise ShapeMismatchError(
                f"Got {len(valid)} validity values for {size} rows"
            )
    if dtype.is_string:
        return colengine.core.column.StringColumn._from_strings(
            values, valid, memory_resource=memory_resource
        )
    if dtype.is_nested:
        return colengine.core.column.ListColumn._from_rows(
            values, valid, dtype, memory_resource=memory_resource
        )
    if dtype.is_dictionary:
        return colengine.core.column.DictionaryColumn._encode(
            values, valid, dtype, memory_resource=memory_resource
        )
    data = np.ascontiguousarray(values, dtype=dtype.numpy_dtype)
    mask = None
    null_count = 0
    if valid is not None:
        mask = null_mask.bools_to_mask(valid, memory_resource)
        null_count = int(size - np.count_nonzero(valid))
    return colengine.core.column.NumericalColumn(
        data=as_buffer(data, memory_resource=memory_resource),
        size=size,
        dtype=dtype,
        mask=mask,
        null_count=null_count,
    )


def column_empty(size: int, dtype: Dtype) -> ColumnBase:
    """
    Allocate a new column with the given size and dtype.

    * Passing size == 0 creates a size 0 column without a mask buffer.
    * Passing size > 0 creates an all null column with a mask buffer.
    """
    dtype = dtypes.dtype(dtype)
    if size < 0:
        raise ValueError("size cannot be negative")
    if dtype.is_string:
        values = object_array([""] * size)
    elif dtype.is_nested:
        values = object_array([[] for _ in range(size)])
    elif dtype.is_dictionary:
        values = object_array([None] * size)
    else:
        values = np.zeros(size, dtype=dtype.numpy_dtype)
    valid = np.zeros(size, dtype=np.bool_) if size else None
    return column_from_host(values, valid, dtype)


def build_column(
    dtype: Dtype,
    data: Any = None,
    *,
    mask: Any = None,
    offset: int = 0,
    size: int | None = None,
    null_count: int | None = None,
    children: Sequence[ColumnBase] = (),
) -> ColumnBase:
    """
    Build a Column of the appropriate type from raw buffers.

    Parameters
    ----------
    dtype : DataType or type-like
        The element type.
    data : Buffer or buffer-like, optional
        The element storage of fixed-width and dictionary columns. A Buffer
        is shared, anything else is copied into a new Buffer.
    mask : Buffer, bytes-like or sequence of bool, optional
        A bitmask covering ``offset + size`` bits or per-row validity.
    offset : int, default 0
        The first row of the underlying data viewed by the column.
    size : int, optional
        The number of rows; defaults to every row after ``offset``.
    null_count : int, optional
        The number of nulls, computed from the mask if not given.
    children : sequence of Column
        ``(offsets, chars)`` for strings, ``(offsets, values)`` for lists
        and ``(keys,)`` for dictionaries.

    Raises
    ------
    RangeError
        If ``offset + size`` exceeds the rows of the data.
    """
    dtype = dtypes.dtype(dtype)
    children = tuple(children)
    if isinstance(data, Buffer):
        data = data.copy(deep=False)
    elif isinstance(data, (bytes, bytearray, memoryview)):
        data = as_buffer(data)
    elif data is not None:
        ary = np.ascontiguousarray(data)
        if (
            ary.dtype != np.uint8
            and (dtype.is_fixed_width or dtype.is_dictionary)
            and ary.dtype != dtype.numpy_dtype
        ):
            ary = ary.astype(dtype.numpy_dtype)
        data = as_buffer(ary)

    if dtype.is_string:
        cls = colengine.core.column.StringColumn
    elif dtype.is_nested:
        cls = colengine.core.column.ListColumn
    elif dtype.is_dictionary:
        cls = colengine.core.column.DictionaryColumn
    elif dtype.is_fixed_width:
        cls = colengine.core.column.NumericalColumn
    else:
        raise TypeError(f"Unrecognized dtype: {dtype}")

    base_size = cls._base_size_of(data, dtype, children)
    if size is None:
        size = max(base_size - offset, 0)
    if offset + size > base_size:
        raise RangeError(
            f"offset ({offset}) + size ({size}) exceeds the {base_size} "
            "rows of the underlying data"
        )
    if mask is not None:
        mask = null_mask.as_mask(mask, offset, size)
    return cls(
        data=data,
        size=size,
        dtype=dtype,
        mask=mask,
        offset=offset,
        null_count=null_count,
        children=children,
    )


def as_column(
    arbitrary: Any, dtype: Dtype | None = None, mask: Any = None
) -> ColumnBase:
    """Create a Column from an arbitrary object

    Parameters
    ----------
    arbitrary : object
        Object to construct the Column from. Can be

        * A Column (returned as is, or cast to ``dtype``)
        * A pyarrow Array or ChunkedArray
        * A pandas Series or array
        * A NumPy array
        * A sequence of host values where ``None`` marks a null row
    dtype : DataType or type-like, optional
        The column type. Inferred from the values if omitted.
    mask : optional
        Per-row validity or a raw bitmask. Cannot be combined with ``None``
        values, which already mark nulls.
    """
    target = None if dtype is None else dtypes.dtype(dtype)
    if isinstance(arbitrary, ColumnBase):
        if target is None or arbitrary.dtype == target:
            return arbitrary
        return arbitrary.cast(target)
    if isinstance(arbitrary, (pa.Array, pa.ChunkedArray)):
        col = ColumnBase.from_arrow(arbitrary)
        return col if target is None else as_column(col, dtype=target)
    if isinstance(
        arbitrary, (pd.Series, pd.Index, pd.api.extensions.ExtensionArray)
    ):
        return as_column(
            pa.array(arbitrary, from_pandas=True), dtype=target
        )
    if isinstance(arbitrary, np.ndarray) and arbitrary.dtype.kind not in "OUS":
        if arbitrary.ndim != 1:
            raise ValueError("Data must be 1-dimensional")
        source = dtypes.dtype(arbitrary.dtype)
        col = column_from_host(arbitrary, None, source)
        if mask is not None:
            col.set_null_mask(mask)
        if target is not None and target != source:
            return col.cast(target)
        return col
    if not isinstance(arbitrary, (Sequence, np.ndarray, range)) or isinstance(
        arbitrary, (str, bytes)
    ):
        raise TypeError(
            f"Cannot create a column from {type(arbitrary).__name__}"
        )

    values = list(arbitrary)
    has_none = any(v is None for v in values)
    if has_none and mask is not None:
        raise ValueError(
            "Cannot combine None values with an explicit mask; None already "
            "marks a null row"
        )
    if target is None:
        target = infer_dtype_from_values(values)
    valid = None
    if has_none:
        valid = np.array([v is not None for v in values], dtype=np.bool_)
    col = column_from_host(_fill_nulls(values, target), valid, target)
    if mask is not None:
        col.set_null_mask(mask)
    return col


def _fill_nulls(values: list, dtype: DataType) -> Any:
    """Replace ``None`` with a placeholder of ``dtype``."""
    if dtype.is_dictionary or dtype.is_string or dtype.is_nested:
        if dtype.is_nested:
            return object_array([[] if v is None else v for v in values])
        filler = "" if dtype.is_string else None
        return object_array([filler if v is None else v for v in values])
    np_dtype = dtype.numpy_dtype
    if any(isinstance(v, str) for v in values):
        raise TypeError(
            f"Cannot create a {dtype} column from string values"
        )
    if not values:
        return np.zeros(0, dtype=np_dtype)
    if dtype.is_integer or dtype.is_boolean:
        # Python ints wrap like C casts when they do not fit the target type
        unsigned = dtype.is_unsigned
        values = [
            host_integer_bits(v, unsigned)
            if isinstance(v, int) and not isinstance(v, bool)
            else v
            for v in values
        ]
    try:
        return np.array([0 if v is None else v for v in values]).astype(
            np_dtype
        )
    except OverflowError as err:
        raise RangeError(
            f"Values do not fit a {dtype} column: {err}"
        ) from err


def concat_columns(objs: Sequence[ColumnBase]) -> ColumnBase:
    """Concatenate a sequence of columns of the same type."""
    if len(objs) == 0:
        return column_empty(0, dtypes.float64)
    head = objs[0]
    for obj in objs:
        obj._check_alive()
        if obj.dtype != head.dtype:
            raise TypeError(
                f"All columns must be the same type, got {head.dtype} and "
                f"{obj.dtype}"
            )
    return type(head)._concat(list(objs))
