# SPDX-FileCopyrightText: Copyright (c) 2018-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from colengine import core, errors, io, options, testing, utils
from colengine._version import __git_commit__, __version__
from colengine.core._internals.aggregation import Interpolation
from colengine.core.buffer import (
    MemoryResource,
    TrackingMemoryResource,
    get_current_memory_resource,
    set_current_memory_resource,
)
from colengine.core.column import (
    ColumnBase,
    DictionaryColumn,
    ListColumn,
    NumericalColumn,
    StringColumn,
    as_column,
    build_column,
    column_empty,
    concat_columns,
)
from colengine.core.dtypes import (
    DataType,
    DictionaryType,
    ListType,
    TypeId,
    bool8,
    dtype,
    float32,
    float64,
    int8,
    int16,
    int32,
    int64,
    string,
    uint8,
    uint16,
    uint32,
    uint64,
)
from colengine.core.scalar import Scalar
from colengine.core.store import TableStore
from colengine.core.table import Table
from colengine.io import read_text
from colengine.options import (
    describe_option,
    get_option,
    option_context,
    set_option,
)
from colengine.utils.dtypes import find_common_type

__all__ = [
    "ColumnBase",
    "DataType",
    "DictionaryColumn",
    "DictionaryType",
    "Interpolation",
    "ListColumn",
    "ListType",
    "MemoryResource",
    "NumericalColumn",
    "Scalar",
    "StringColumn",
    "Table",
    "TableStore",
    "TrackingMemoryResource",
    "TypeId",
    "as_column",
    "bool8",
    "build_column",
    "column_empty",
    "concat_columns",
    "core",
    "describe_option",
    "dtype",
    "errors",
    "find_common_type",
    "float32",
    "float64",
    "get_current_memory_resource",
    "get_option",
    "int8",
    "int16",
    "int32",
    "int64",
    "io",
    "option_context",
    "options",
    "read_text",
    "set_current_memory_resource",
    "set_option",
    "string",
    "testing",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "utils",
]
