# SPDX-FileCopyrightText: Copyright (c) 2018-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import numpy as np

import colengine
from colengine.core import dtypes
from colengine.core._internals import (
    binaryop,
    copying,
    null_mask,
    replace,
    strings_convert,
    unary,
)
from colengine.core.column.column import ColumnBase, column_from_host
from colengine.core.mixins.binops import (
    BITWISE_OPERATIONS,
    COMPARISON_OPERATIONS,
)
from colengine.core.scalar import Scalar
from colengine.errors import ShapeMismatchError
from colengine.utils.dtypes import binop_operand_dtype, find_common_type

if TYPE_CHECKING:
    from typing_extensions import Self

    from colengine._typing import ColumnBinaryOperand, Dtype, ScalarLike
    from colengine.core.buffer import Buffer
    from colengine.core.column.string import StringColumn
    from colengine.core.dtypes import DataType

logger = logging.getLogger(__name__)


class NumericalColumn(ColumnBase):
    """
    A Column of fixed-width integer, floating point or boolean values.

    Parameters
    ----------
    data : Buffer
    size : int
    dtype : DataType
    mask : Buffer, optional
    offset : int, optional
    null_count : int, optional
    children : tuple, optional
    """

    def __init__(
        self,
        data: Buffer | None,
        size: int,
        dtype: DataType,
        mask: Buffer | None = None,
        offset: int = 0,
        null_count: int | None = None,
        children: tuple = (),
    ):
        if not (dtype.is_numeric and dtype.is_fixed_width):
            raise ValueError(f"{dtype} is not a fixed-width numeric type")
        if children:
            raise ValueError(f"{dtype} columns cannot have children")
        super().__init__(
            data=data,
            size=size,
            dtype=dtype,
            mask=mask,
            offset=offset,
            null_count=null_count,
            children=children,
        )

    def _check_floating(self, name: str) -> None:
        if not self.dtype.is_floating:
            raise TypeError(
                f"{name} is only supported for floating point columns, "
                f"not {self.dtype}"
            )

    def _check_integer(self, name: str) -> None:
        if not self.dtype.is_integer:
            raise TypeError(
                f"{name} is only supported for integer columns, "
                f"not {self.dtype}"
            )

    # Binary operations

    def _normalize_binop_operand(
        self, other: Any, op: str
    ) -> ColumnBase | Scalar:
        if isinstance(other, ColumnBase):
            if len(other) != len(self):
                raise ShapeMismatchError(
                    f"Cannot apply {op} to columns of {len(self)} and "
                    f"{len(other)} rows"
                )
            return other
        if isinstance(other, Scalar):
            return other
        return Scalar(
            other,
            dtype=binop_operand_dtype(
                other, self.dtype, bitwise=op in BITWISE_OPERATIONS
            ),
        )

    def _binaryop(self, other: ColumnBinaryOperand, op: str) -> ColumnBase:
        """Evaluate the {op} of each row and ``other``.

        ``other`` is a Column of the same length, a Scalar or a host literal.
        Both operands are converted to their common type; comparisons
        produce a bool8 column.
        """
        self._check_alive()
        is_operator = op.startswith("__")
        reflect, op = self._check_reflected_op(op)
        try:
            other = self._normalize_binop_operand(other, op)
        except TypeError:
            if is_operator:
                return NotImplemented
            raise
        common = find_common_type(self.dtype, other.dtype)

        lhs = unary.cast(self._host_values(), self.dtype, common)
        lhs_valid = self._validity()
        if isinstance(other, ColumnBase):
            rhs = unary.cast(other._host_values(), other.dtype, common)
            rhs_valid = other._validity()
        else:
            rhs = unary.cast(other._to_numpy(), other.dtype, common)
            rhs_valid = None if other.is_valid() else np.array(False)
            if rhs_valid is not None:
                rhs_valid = np.broadcast_to(rhs_valid, (len(self),))
        if reflect:
            rhs = np.broadcast_to(rhs, (len(self),))
            lhs, rhs = rhs, lhs
            lhs_valid, rhs_valid = rhs_valid, lhs_valid

        values, valid = binaryop.binaryop(
            lhs, lhs_valid, rhs, rhs_valid, op, common
        )
        out_dtype = dtypes.bool8 if op in COMPARISON_OPERATIONS else common
        return column_from_host(values, valid, out_dtype)

    # Unary operations

    def _unaryop(self, op: str) -> ColumnBase:
        """Compute the {op} of each row.

        The result has the type of the column, null rows stay null.
        """
        self._check_alive()
        if op == "not_":
            values = unary.unary_operation(
                self._host_values(), "not", self.dtype
            )
            return column_from_host(values, self._validity(), dtypes.bool8)
        if op == "bit_invert" and self.dtype.is_boolean:
            values = np.logical_not(self._host_values())
        else:
            values = unary.unary_operation(
                self._host_values(), op, self.dtype
            )
        return column_from_host(values, self._validity(), self.dtype)

    def __neg__(self) -> Self:
        if self.dtype.is_boolean:
            raise TypeError("Cannot negate a bool8 column")
        with np.errstate(over="ignore"):
            values = np.negative(self._host_values())
        return column_from_host(values, self._validity(), self.dtype)

    def __invert__(self) -> Self:
        return self.bit_invert()

    def __abs__(self) -> Self:
        return self.abs()

    def cast(self, dtype: Dtype) -> ColumnBase:
        """
        Convert the values to another fixed-width numeric type.

        Casting to bool8 yields ``value != 0``. Null rows stay null.

        Raises
        ------
        UnsupportedCastError
            If ``dtype`` is not a numeric or boolean type.
        """
        self._check_alive()
        dtype = dtypes.dtype(dtype)
        values = unary.cast(self._host_values(), self.dtype, dtype)
        return column_from_host(values, self._validity(), dtype)

    # NaN handling

    def is_nan(self) -> NumericalColumn:
        """Bool8 column, true for NaN rows; nulls stay null."""
        self._check_floating("is_nan")
        return column_from_host(
            np.isnan(self._host_values()), self._validity(), dtypes.bool8
        )

    def is_not_nan(self) -> NumericalColumn:
        self._check_floating("is_not_nan")
        return column_from_host(
            ~np.isnan(self._host_values()), self._validity(), dtypes.bool8
        )

    def nans_to_nulls(self) -> Self:
        """A copy in which NaN rows are null."""
        self._check_floating("nans_to_nulls")
        not_nan = ~np.isnan(self._host_values())
        logger.debug(
            "Converting %d NaN rows to nulls", int((~not_nan).sum())
        )
        valid = self._validity()
        valid = not_nan if valid is None else valid & not_nan
        return self._with_host_values(
            self._host_values(), None if valid.all() else valid
        )

    def drop_nans(self) -> Self:
        """A copy without the NaN rows; null rows are kept."""
        self._check_floating("drop_nans")
        return self._take_positions(
            np.flatnonzero(~np.isnan(self._host_values()))
        )

    def replace_nans(self, value: ColumnBase | ScalarLike) -> Self:
        """
        Replace NaN rows with ``value``.

        ``value`` is a Column of the same size, whose rows supply the
        replacement of each NaN row, or a Scalar (or host literal)
        replacing every NaN row.
        """
        self._check_floating("replace_nans")
        if isinstance(value, ColumnBase) and len(value) != len(self):
            raise ShapeMismatchError(
                f"replacement has {len(value)} rows, expected {len(self)}"
            )
        values = self._host_values()
        is_nan = np.isnan(values)
        repl_values, repl_valid = self._normalize_source(value)
        out = replace.replace_where(values, is_nan, repl_values)
        valid = self._validity()
        if valid is not None or not np.all(repl_valid):
            valid = self._valid_or_true() & np.where(is_nan, repl_valid, True)
        return self._with_host_values(out, valid)

    # In-place

    def fill_in_place(
        self, value: ScalarLike, begin: int = 0, end: int | None = None
    ) -> Self:
        """
        Set rows ``[begin, end)`` to ``value`` in place.

        Returns the column itself.

        Raises
        ------
        RangeError
            If the range is outside of the column.
        AliasingError
            If any buffer of the column is shared with another live view.
        """
        self._check_alive()
        end = len(self) if end is None else end
        copying.check_range(begin, end, len(self))
        fill_value, fill_valid = self._normalize_source(value)
        self._require_exclusive("fill")

        first = self.offset + begin
        last = self.offset + end
        if fill_valid:
            with self.base_data.write_access() as raw:
                raw.view(self.dtype.numpy_dtype)[first:last] = fill_value
        if self.base_mask is not None:
            with self.base_mask.write_access() as raw:
                null_mask.set_bits(raw, first, last, bool(fill_valid))
        elif not fill_valid and end > begin:
            mask = null_mask.create_null_mask(self.offset + len(self))
            null_mask.set_bits(mask.view("write"), first, last, False)
            self._base_mask = mask
        self._null_count = None
        return self

    # Masks

    def bools_to_mask(self) -> tuple[Buffer, int]:
        """
        Pack a bool8 column into a null mask.

        Rows that are true become valid bits; false and null rows become
        null bits.

        Returns
        -------
        tuple of (Buffer, int)
            The mask and the number of unset bits.
        """
        if not self.dtype.is_boolean:
            raise TypeError(
                f"bools_to_mask requires a bool8 column, not {self.dtype}"
            )
        bits = self._host_values() & self._valid_or_true()
        return (
            null_mask.bools_to_mask(bits),
            int(len(self) - np.count_nonzero(bits)),
        )

    # String conversions

    def _to_strings(self, strings: list[str]) -> StringColumn:
        return colengine.core.column.StringColumn._from_strings(
            strings, self._validity()
        )

    def strings_from_integers(self) -> StringColumn:
        """Decimal representation of each integer."""
        self._check_integer("strings_from_integers")
        return self._to_strings(
            strings_convert.from_integers(self._host_values())
        )

    def strings_from_floats(self) -> StringColumn:
        """
        Decimal representation of each float with at most 10 significant
        digits, e.g. ``"1.5"``, ``"1.0"``, ``"1.78e+15"``, ``"NaN"``.
        """
        self._check_floating("strings_from_floats")
        return self._to_strings(
            strings_convert.from_floats(self._host_values())
        )

    def strings_from_booleans(self) -> StringColumn:
        if not self.dtype.is_boolean:
            raise TypeError(
                "strings_from_booleans requires a bool8 column, not "
                f"{self.dtype}"
            )
        return self._to_strings(
            strings_convert.from_booleans(self._host_values())
        )

    def hex_from_integers(self) -> StringColumn:
        """
        Uppercase hexadecimal representation of each integer.

        Two characters are written per byte with leading zero bytes
        removed; negative values use the two's complement of the column
        width.
        """
        self._check_integer("hex_from_integers")
        return self._to_strings(
            strings_convert.hex_from_integers(self._host_values(), self.dtype)
        )

    def ipv4_from_integers(self) -> StringColumn:
        """Dotted-quad representation of the lower 32 bits of each row."""
        self._check_integer("ipv4_from_integers")
        return self._to_strings(
            strings_convert.ipv4_from_integers(self._host_values())
        )
