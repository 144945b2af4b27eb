# SPDX-FileCopyrightText: Copyright (c) 2019-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Literal

import numpy as np

import colengine
from colengine.core import dtypes
from colengine.core._internals import (
    binaryop,
    null_mask,
    strings_convert,
    strings_json,
    strings_transform,
)
from colengine.core.column.column import (
    ColumnBase,
    column_from_host,
    object_array,
)
from colengine.core.mixins.binops import COMPARISON_OPERATIONS
from colengine.core.scalar import Scalar
from colengine.errors import MixedTypeError, ShapeMismatchError
from colengine.utils.dtypes import SIZE_TYPE

if TYPE_CHECKING:
    from colengine._typing import ColumnBinaryOperand, Dtype
    from colengine.core.buffer import Buffer, MemoryResource
    from colengine.core.column.numerical import NumericalColumn
    from colengine.core.dtypes import DataType
    from colengine.core.table import Table


class StringColumn(ColumnBase):
    """
    Implements operations for Columns of String type

    Parameters
    ----------
    mask : Buffer
        The validity mask
    offset : int
        Data offset
    children : Tuple[Column]
        Two non-null columns containing the string data and offsets
        respectively
    """

    def __init__(
        self,
        data: Buffer | None = None,
        size: int = 0,
        dtype: DataType = dtypes.string,
        mask: Buffer | None = None,
        offset: int = 0,
        null_count: int | None = None,
        children: tuple[ColumnBase, ...] = (),
    ):
        if not dtype.is_string:
            raise ValueError(f"dtype must be string, got {dtype}")
        if data is not None:
            raise ValueError("StringColumn stores its data in children")
        if len(children) == 0 and size != 0:
            # all nulls-column:
            offsets = column_from_host(
                np.zeros(size + 1, dtype=np.int32), None, SIZE_TYPE
            )
            chars = column_from_host(
                np.zeros(0, dtype=np.uint8), None, dtypes.uint8
            )
            children = (offsets, chars)
        if children:
            if len(children) != 2:
                raise ValueError(
                    "StringColumn requires (offsets, chars) children"
                )
            if children[0].dtype != SIZE_TYPE:
                raise TypeError(
                    f"String offsets must be {SIZE_TYPE}, "
                    f"got {children[0].dtype}"
                )
            if children[1].dtype != dtypes.uint8:
                raise TypeError(
                    f"String chars must be uint8, got {children[1].dtype}"
                )
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
    def _from_strings(
        cls,
        strings: Sequence[str],
        valid: np.ndarray | None,
        memory_resource: MemoryResource | None = None,
    ) -> StringColumn:
        size = len(strings)
        if valid is not None:
            strings = [s if ok else "" for s, ok in zip(strings, valid)]
        encoded = [s.encode("utf-8") for s in strings]
        offsets = np.zeros(size + 1, dtype=np.int32)
        np.cumsum([len(b) for b in encoded], out=offsets[1:])
        chars = np.frombuffer(b"".join(encoded), dtype=np.uint8)
        mask = None
        null_count = 0
        if valid is not None:
            mask = null_mask.bools_to_mask(valid, memory_resource)
            null_count = int(size - np.count_nonzero(valid))
        return cls(
            size=size,
            mask=mask,
            null_count=null_count,
            children=(
                column_from_host(
                    offsets, None, SIZE_TYPE, memory_resource=memory_resource
                ),
                column_from_host(
                    chars, None, dtypes.uint8, memory_resource=memory_resource
                ),
            ),
        )

    @property
    def offsets(self) -> NumericalColumn:
        return self.get_child(0)

    @property
    def chars(self) -> NumericalColumn:
        return self.get_child(1)

    @property
    def memory_usage(self) -> int:
        if not self.base_children:
            return 0
        offsets = self.offsets._data_view()
        n = (len(self) + 1) * SIZE_TYPE.itemsize
        n += int(offsets[self.offset + len(self)] - offsets[self.offset])
        if self.nullable:
            n += null_mask.bitmask_allocation_size_bytes(len(self))
        return n

    def _row_bounds(self) -> tuple[np.ndarray, bytes]:
        offsets = self.offsets._data_view()[
            self.offset : self.offset + len(self) + 1
        ]
        return offsets, self.chars._data_view().tobytes()

    def _host_values(self) -> np.ndarray:
        if len(self) == 0:
            return object_array([])
        offsets, chars = self._row_bounds()
        return object_array(
            [
                chars[begin:end].decode("utf-8")
                for begin, end in zip(offsets[:-1], offsets[1:])
            ]
        )

    def _element(self, i: int) -> str:
        offsets = self.offsets._data_view()
        begin, end = offsets[self.offset + i], offsets[self.offset + i + 1]
        return self.chars._data_view()[begin:end].tobytes().decode("utf-8")

    def _strings(self) -> list[str]:
        """Host strings of every row, ``""`` for null rows."""
        return self._host_values().tolist()

    def _null_placeholder(self) -> str:
        return ""

    # Binary operations

    def _binaryop(self, other: ColumnBinaryOperand, op: str) -> ColumnBase:
        """Compare each row with ``other`` using {op}.

        ``other`` is a string Column of the same length, a string Scalar or
        a Python ``str``.
        """
        self._check_alive()
        is_operator = op.startswith("__")
        reflect, op = self._check_reflected_op(op)
        if op not in COMPARISON_OPERATIONS:
            raise TypeError(f"{op} is not supported for string columns")
        if isinstance(other, ColumnBase):
            if len(other) != len(self):
                raise ShapeMismatchError(
                    f"Cannot apply {op} to columns of {len(self)} and "
                    f"{len(other)} rows"
                )
        elif isinstance(other, str):
            other = Scalar(other)
        elif not isinstance(other, Scalar):
            if is_operator:
                return NotImplemented
            raise TypeError(
                f"Cannot compare a string column with "
                f"{type(other).__name__}"
            )
        if not other.dtype.is_string:
            raise MixedTypeError(
                f"Cannot compare a string column with {other.dtype}"
            )

        if isinstance(other, ColumnBase):
            rhs, rhs_valid = other._host_values(), other._validity()
        else:
            rhs = self._scalar_to_host(other)
            rhs_valid = None if other.is_valid() else np.zeros(
                len(self), dtype=np.bool_
            )
        lhs, lhs_valid = self._host_values(), self._validity()
        if reflect:
            rhs = np.broadcast_to(rhs, (len(self),))
            lhs, rhs = rhs, lhs
            lhs_valid, rhs_valid = rhs_valid, lhs_valid
        values, valid = binaryop.binaryop(
            lhs, lhs_valid, rhs, rhs_valid, op, dtypes.string
        )
        return column_from_host(values, valid, dtypes.bool8)

    # Conversions to fixed-width types

    def _to_fixed_width(
        self, values: np.ndarray, dtype: DataType
    ) -> NumericalColumn:
        return column_from_host(values, self._validity(), dtype)

    def strings_to_integers(
        self, dtype: Dtype = dtypes.int64
    ) -> NumericalColumn:
        """
        Parse decimal integers.

        Parsing stops at the first character that is not a digit; overflow
        wraps and is unspecified. Validate with ``string_is_integer``.
        """
        dtype = dtypes.dtype(dtype)
        return self._to_fixed_width(
            strings_convert.to_integers(self._strings(), dtype), dtype
        )

    def strings_to_floats(
        self, dtype: Dtype = dtypes.float64
    ) -> NumericalColumn:
        dtype = dtypes.dtype(dtype)
        return self._to_fixed_width(
            strings_convert.to_floats(self._strings(), dtype), dtype
        )

    def strings_to_booleans(self) -> NumericalColumn:
        """True for rows equal to ``"true"``, false for any other string."""
        return self._to_fixed_width(
            strings_convert.to_booleans(self._strings()), dtypes.bool8
        )

    def hex_to_integers(self, dtype: Dtype = dtypes.int64) -> NumericalColumn:
        """Parse hexadecimal digits, with an optional ``0x`` prefix."""
        dtype = dtypes.dtype(dtype)
        return self._to_fixed_width(
            strings_convert.hex_to_integers(self._strings(), dtype), dtype
        )

    def ipv4_to_integers(self) -> NumericalColumn:
        """
        Pack dotted-quad IPv4 addresses into int64 values.

        Malformed addresses produce an unspecified value; validate with
        ``string_is_ipv4``.
        """
        return self._to_fixed_width(
            strings_convert.ipv4_to_integers(self._strings()), dtypes.int64
        )

    def string_is_integer(self) -> NumericalColumn:
        return self._to_fixed_width(
            strings_convert.is_integer(self._strings()), dtypes.bool8
        )

    def string_is_float(self) -> NumericalColumn:
        return self._to_fixed_width(
            strings_convert.is_float(self._strings()), dtypes.bool8
        )

    def string_is_hex(self) -> NumericalColumn:
        return self._to_fixed_width(
            strings_convert.is_hex(self._strings()), dtypes.bool8
        )

    def string_is_ipv4(self) -> NumericalColumn:
        return self._to_fixed_width(
            strings_convert.is_ipv4(self._strings()), dtypes.bool8
        )

    # Transforms

    def _with_strings(self, strings: list[str]) -> StringColumn:
        return self._from_strings(strings, self._validity())

    def count_bytes(self) -> NumericalColumn:
        """Number of UTF-8 bytes of each row."""
        return self._to_fixed_width(
            strings_transform.count_bytes(self._strings()), SIZE_TYPE
        )

    def count_characters(self) -> NumericalColumn:
        """Number of characters of each row."""
        return self._to_fixed_width(
            strings_transform.count_characters(self._strings()), SIZE_TYPE
        )

    def pad(
        self,
        width: int,
        side: Literal["left", "right", "both"] = "left",
        fill_char: str = " ",
    ) -> StringColumn:
        """
        Pad each string to at least ``width`` characters.

        Parameters
        ----------
        width : int
            Minimum number of characters of each row.
        side : {"left", "right", "both"}, default "left"
            Where the fill characters are added. With ``"both"`` an odd
            amount of padding puts the extra character on the right.
        fill_char : str, default " "
            A single fill character.
        """
        return self._with_strings(
            strings_transform.pad(self._strings(), width, side, fill_char)
        )

    def zfill(self, width: int) -> StringColumn:
        """Pad each string on the left with ``"0"`` to ``width``
        characters."""
        return self.pad(width, "left", "0")

    def replace_slice(
        self, repl: str, start: int = 0, stop: int = -1
    ) -> StringColumn:
        """
        Replace characters ``[start, stop)`` of each row with ``repl``.

        A negative ``stop`` replaces up to the end of each string.
        """
        return self._with_strings(
            strings_transform.replace_slice(
                self._strings(), repl, start, stop
            )
        )

    def split(self, delimiter: str) -> StringColumn:
        """
        Split the concatenated text of the valid rows on ``delimiter``.

        Every piece but the last keeps the delimiter at its end. An empty
        delimiter joins every row into a single string. The result has no
        nulls.
        """
        strings = self._host_values()
        valid = self._validity()
        if valid is not None:
            strings = strings[valid]
        return self._from_strings(
            strings_transform.split(strings.tolist(), delimiter), None
        )

    def contains_re(self, pattern: str) -> NumericalColumn:
        """Whether ``pattern`` matches anywhere in each row."""
        return self._to_fixed_width(
            strings_transform.contains_re(self._strings(), pattern),
            dtypes.bool8,
        )

    def matches_re(self, pattern: str) -> NumericalColumn:
        """Whether ``pattern`` matches at the start of each row."""
        return self._to_fixed_width(
            strings_transform.matches_re(self._strings(), pattern),
            dtypes.bool8,
        )

    def count_re(self, pattern: str) -> NumericalColumn:
        return self._to_fixed_width(
            strings_transform.count_re(self._strings(), pattern), SIZE_TYPE
        )

    def get_json_object(
        self,
        json_path: str = "$",
        allow_single_quotes: bool = False,
        strip_quotes_from_single_strings: bool = True,
        missing_fields_as_nulls: bool = False,
    ) -> StringColumn:
        """
        Select part of the JSON document held by each row.

        Parameters
        ----------
        json_path : str, default "$"
            A JSONPath made of ``.name``, ``['name']``, ``[index]``, ``.*``
            and ``[*]`` steps after the root ``$``.
        allow_single_quotes : bool, default False
            Whether strings and names may be quoted with ``'``.
        strip_quotes_from_single_strings : bool, default True
            Whether a single string match is returned without its quotes.
        missing_fields_as_nulls : bool, default False
            Whether a missing field matches JSON ``null`` instead of nothing.

        Returns
        -------
        StringColumn
            The compact JSON text of the match of each row; a JSON array
            of every match when the path has a wildcard. Null rows, rows
            that are not valid JSON and rows without a match are null.

        Raises
        ------
        ValueError
            If ``json_path`` is not a valid JSONPath.
        """
        strings, valid = strings_json.get_json_object(
            self._strings(),
            self._valid_or_true(),
            json_path,
            allow_single_quotes=allow_single_quotes,
            strip_quotes_from_single_strings=strip_quotes_from_single_strings,
            missing_fields_as_nulls=missing_fields_as_nulls,
        )
        return self._from_strings(strings, None if valid.all() else valid)

    @classmethod
    def concatenate(
        cls,
        table: Table | Sequence[ColumnBase],
        separator: str = "",
        null_repr: str | None = None,
        separate_nulls: bool = False,
    ) -> StringColumn:
        """
        Join the strings of each row of several string columns.

        Parameters
        ----------
        table : Table or sequence of StringColumn
            The columns to join, all of the same size.
        separator : str, default ""
            Placed between the values of a row.
        null_repr : str, optional
            Replaces null values. If ``None`` any null value makes the
            output row null.
        separate_nulls : bool, default False
            Whether the separator next to a replaced null value is kept.

        Raises
        ------
        TypeError
            If any column is not a string column.
        ShapeMismatchError
            If the columns have different sizes.
        """
        if isinstance(table, colengine.core.table.Table):
            columns = table.columns
        else:
            columns = list(table)
        for col in columns:
            if not col.dtype.is_string:
                raise TypeError(
                    f"Can only concatenate string columns, got {col.dtype}"
                )
        sizes = {len(col) for col in columns}
        if len(sizes) > 1:
            raise ShapeMismatchError(
                f"Cannot concatenate columns of sizes {sorted(sizes)}"
            )
        rows = list(zip(*(col.to_pylist() for col in columns)))
        strings, valid = strings_transform.concatenate(
            rows, separator, null_repr, separate_nulls
        )
        return cls._from_strings(strings, valid)

