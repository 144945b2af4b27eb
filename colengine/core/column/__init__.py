# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from colengine.core.column.column import (
    ColumnBase,
    as_column,
    build_column,
    column_empty,
    column_from_host,
    concat_columns,
)
from colengine.core.column.dictionary import DictionaryColumn
from colengine.core.column.lists import ListColumn
from colengine.core.column.numerical import NumericalColumn
from colengine.core.column.string import StringColumn

__all__ = [
    "ColumnBase",
    "DictionaryColumn",
    "ListColumn",
    "NumericalColumn",
    "StringColumn",
    "as_column",
    "build_column",
    "column_empty",
    "column_from_host",
    "concat_columns",
]
