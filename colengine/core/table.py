# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections import abc
from typing import TYPE_CHECKING, Any

import pandas as pd
import pyarrow as pa
from typing_extensions import Self

from colengine.core import column
from colengine.core._internals import stream_compaction
from colengine.errors import ShapeMismatchError

if TYPE_CHECKING:
    from colengine._typing import ColumnLike
    from colengine.core.column import ColumnBase, StringColumn


class Table(abc.Mapping):
    """
    An ordered mapping of unique names to Columns of equal length.

    A Table owns the mapping only; the Columns keep their own buffers.
    Iterating a Table yields its column names and ``len`` is the number of
    columns, use ``num_rows`` for the number of rows.

    Parameters
    ----------
    data : mapping or iterable of (name, Column) pairs
        The columns of the table.
    verify : bool, optional
        Whether to check that every value is a Column and that all columns
        have the same length.

    Raises
    ------
    ValueError
        If a name appears more than once.
    ShapeMismatchError
        If the columns have different lengths.
    """

    _data: dict[str, ColumnBase]

    def __init__(
        self,
        data: abc.Mapping[str, ColumnBase]
        | abc.Iterable[tuple[str, ColumnBase]] = (),
        verify: bool = True,
    ) -> None:
        if isinstance(data, Table):
            self._data = dict(data._data)
            return
        items = list(data.items() if isinstance(data, abc.Mapping) else data)
        names = [name for name, _ in items]
        if len(set(names)) != len(names):
            raise ValueError(f"Column names must be unique, got {names}")
        if items and verify:
            column_length = len(items[0][1])
            for name, col in items:
                if not isinstance(col, column.ColumnBase):
                    raise TypeError(
                        f"All values must be Columns, not "
                        f"{type(col).__name__} for {name!r}"
                    )
                if len(col) != column_length:
                    raise ShapeMismatchError(
                        "All columns must be of equal length, got "
                        f"{column_length} and {len(col)} for {name!r}"
                    )
        self._data = dict(items)

    def _from_columns_like_self(
        self, columns: abc.Iterable[ColumnBase]
    ) -> Self:
        return type(self)(zip(self.column_names, columns), verify=False)

    def __iter__(self) -> abc.Iterator[str]:
        return iter(self._data)

    def __getitem__(self, key: str | list[str]) -> Any:
        if isinstance(key, list):
            return self.select(key)
        return self.get_column(key)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        column_info = "\n".join(
            f"{name}: {col.dtype}" for name, col in self._data.items()
        )
        return (
            f"{type(self).__name__}(num_rows={self.num_rows}, "
            f"num_columns={self.num_columns})\n{column_info}"
        )

    @property
    def num_rows(self) -> int:
        if not self._data:
            return 0
        return len(next(iter(self._data.values())))

    @property
    def num_columns(self) -> int:
        return len(self._data)

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(self._data)

    @property
    def columns(self) -> tuple[ColumnBase, ...]:
        return tuple(self._data.values())

    def get_column(self, name: str) -> ColumnBase:
        try:
            return self._data[name]
        except KeyError:
            raise KeyError(f"No column named {name!r}") from None

    def select(self, names: abc.Iterable[str]) -> Self:
        """A Table of the named columns, in the given order."""
        return type(self)(
            [(name, self.get_column(name)) for name in names], verify=False
        )

    # Row selection

    def gather(
        self,
        selection: ColumnLike,
        nullify_out_of_bounds: bool = False,
    ) -> Self:
        """
        Select the same rows of every column.

        See ``ColumnBase.gather`` for the meaning of the arguments;
        out of range positions are undefined behavior unless
        ``nullify_out_of_bounds`` is set.
        """
        owned = not isinstance(selection, column.ColumnBase)
        if owned:
            selection = column.as_column(selection)
        try:
            return self._from_columns_like_self(
                col.gather(selection, nullify_out_of_bounds)
                for col in self.columns
            )
        finally:
            if owned:
                selection.dispose()

    def apply_boolean_mask(self, selection: ColumnLike) -> Self:
        """Keep the rows where ``selection`` is true in every column."""
        return self._from_columns_like_self(
            col.apply_boolean_mask(selection) for col in self.columns
        )

    def drop_nulls(
        self,
        subset: abc.Iterable[str] | None = None,
        how: str = "any",
        thresh: int | None = None,
    ) -> Self:
        """
        Drop rows with null values.

        Parameters
        ----------
        subset : iterable of str, optional
            The columns checked for nulls, every column by default.
        how : {"any", "all"}, default "any"
            Drop rows with a null in any checked column or only rows null
            in all of them.
        thresh : int, optional
            Keep rows with at least this many valid checked values.
        """
        keys = self.columns if subset is None else [
            self.get_column(name) for name in subset
        ]
        positions = stream_compaction.keep_rows(
            [col._validity() for col in keys], self.num_rows, how, thresh
        )
        return self._from_columns_like_self(
            col._take_positions(positions) for col in self.columns
        )

    def concatenate(
        self,
        separator: str = "",
        null_repr: str | None = None,
        separate_nulls: bool = False,
    ) -> StringColumn:
        """Join the strings of each row; see ``StringColumn.concatenate``."""
        return column.StringColumn.concatenate(
            self,
            separator=separator,
            null_repr=null_repr,
            separate_nulls=separate_nulls,
        )

    # Materialization

    def to_pylist(self) -> list[dict[str, Any]]:
        """The rows as dictionaries of name to host value or ``None``."""
        names = self.column_names
        return [dict(zip(names, row)) for row in self.iterrows()]

    def iterrows(self) -> abc.Iterator[tuple]:
        """Iterate over the rows as tuples of host values or ``None``."""
        return zip(*(col.to_pylist() for col in self.columns))

    def to_arrow(self) -> pa.Table:
        return pa.table(
            {name: col.to_arrow() for name, col in self._data.items()}
        )

    def to_pandas(self) -> pd.DataFrame:
        """Convert to a DataFrame of nullable pandas dtypes."""
        return pd.DataFrame(
            {name: col.to_pandas() for name, col in self._data.items()}
        )

    @classmethod
    def from_arrow(cls, table: pa.Table) -> Self:
        if not isinstance(table, pa.Table):
            raise TypeError(
                f"Expected a pyarrow Table, got {type(table).__name__}"
            )
        return cls(
            [
                (name, column.ColumnBase.from_arrow(table.column(name)))
                for name in table.column_names
            ]
        )

    def dispose(self) -> None:
        """Dispose every column of the table."""
        for col in self._data.values():
            col.dispose()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args) -> None:
        self.dispose()
