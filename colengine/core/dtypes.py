# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from enum import Enum
from typing import Any

import numpy as np
import pyarrow as pa


class TypeId(Enum):
    """The closed set of element representations a column can hold."""

    BOOL8 = "bool8"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"
    LIST = "list"
    DICTIONARY32 = "dictionary32"


_SIGNED_INTEGER_IDS = {TypeId.INT8, TypeId.INT16, TypeId.INT32, TypeId.INT64}
_UNSIGNED_INTEGER_IDS = {
    TypeId.UINT8,
    TypeId.UINT16,
    TypeId.UINT32,
    TypeId.UINT64,
}
_FLOATING_IDS = {TypeId.FLOAT32, TypeId.FLOAT64}

_NUMPY_DTYPES = {
    TypeId.BOOL8: np.dtype("bool"),
    TypeId.INT8: np.dtype("int8"),
    TypeId.INT16: np.dtype("int16"),
    TypeId.INT32: np.dtype("int32"),
    TypeId.INT64: np.dtype("int64"),
    TypeId.UINT8: np.dtype("uint8"),
    TypeId.UINT16: np.dtype("uint16"),
    TypeId.UINT32: np.dtype("uint32"),
    TypeId.UINT64: np.dtype("uint64"),
    TypeId.FLOAT32: np.dtype("float32"),
    TypeId.FLOAT64: np.dtype("float64"),
}
_TYPE_IDS_BY_NUMPY = {v: k for k, v in _NUMPY_DTYPES.items()}


class DataType:
    """
    Type of the elements stored in a column.

    A DataType is immutable and compares equal to any other DataType with
    the same type id (and, for nested types, the same child types).

    Parameters
    ----------
    id : TypeId
        The representation tag.
    """

    __slots__ = ("_id",)

    def __init__(self, id: TypeId) -> None:
        if not isinstance(id, TypeId):
            raise TypeError(f"Expected a TypeId, got {type(id).__name__}")
        if id in {TypeId.LIST, TypeId.DICTIONARY32} and type(self) is DataType:
            raise ValueError(
                f"{id.value} types must be created with ListType or "
                "DictionaryType"
            )
        self._id = id

    @property
    def id(self) -> TypeId:
        return self._id

    @property
    def name(self) -> str:
        return self._id.value

    @property
    def is_boolean(self) -> bool:
        return self._id is TypeId.BOOL8

    @property
    def is_signed(self) -> bool:
        return self._id in _SIGNED_INTEGER_IDS

    @property
    def is_unsigned(self) -> bool:
        return self._id in _UNSIGNED_INTEGER_IDS

    @property
    def is_integer(self) -> bool:
        return self.is_signed or self.is_unsigned

    @property
    def is_floating(self) -> bool:
        return self._id in _FLOATING_IDS

    @property
    def is_numeric(self) -> bool:
        """Integers, floats and booleans."""
        return self.is_integer or self.is_floating or self.is_boolean

    @property
    def is_string(self) -> bool:
        return self._id is TypeId.STRING

    @property
    def is_nested(self) -> bool:
        return self._id is TypeId.LIST

    @property
    def is_dictionary(self) -> bool:
        return self._id is TypeId.DICTIONARY32

    @property
    def is_fixed_width(self) -> bool:
        return self._id in _NUMPY_DTYPES

    @property
    def numpy_dtype(self) -> np.dtype:
        """NumPy dtype of the element storage of fixed-width types."""
        try:
            return _NUMPY_DTYPES[self._id]
        except KeyError:
            raise TypeError(f"{self} has no fixed-width element storage")

    @property
    def itemsize(self) -> int:
        return self.numpy_dtype.itemsize

    @property
    def bit_width(self) -> int:
        return self.itemsize * 8

    @property
    def host_type(self) -> type:
        """The Python type used to represent one element on the host."""
        if self.is_boolean:
            return bool
        if self.is_integer:
            return int
        if self.is_floating:
            return float
        if self.is_string:
            return str
        return list

    def to_arrow(self) -> pa.DataType:
        if self._id is TypeId.BOOL8:
            return pa.bool_()
        if self._id is TypeId.STRING:
            return pa.string()
        return pa.from_numpy_dtype(self.numpy_dtype)

    def _key(self) -> tuple:
        return (self._id,)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, (str, np.dtype)):
            try:
                other = dtype(other)
            except (TypeError, ValueError):
                return False
        if not isinstance(other, DataType):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return self.name

    def __reduce__(self):
        return (type(self), (self._id,))


class ListType(DataType):
    """A variable length list of elements of ``element_type``."""

    __slots__ = ("_element_type",)

    def __init__(self, element_type: DataType) -> None:
        super().__init__(TypeId.LIST)
        self._element_type = dtype(element_type)

    @property
    def element_type(self) -> DataType:
        return self._element_type

    def to_arrow(self) -> pa.DataType:
        return pa.list_(self._element_type.to_arrow())

    def _key(self) -> tuple:
        return (self._id, self._element_type)

    def __repr__(self) -> str:
        return f"list<{self._element_type!r}>"

    def __reduce__(self):
        return (type(self), (self._element_type,))


class DictionaryType(DataType):
    """Int32 indices into a column of unique keys of ``key_type``."""

    __slots__ = ("_key_type",)

    def __init__(self, key_type: DataType) -> None:
        super().__init__(TypeId.DICTIONARY32)
        key_type = dtype(key_type)
        if key_type.is_nested or key_type.is_dictionary:
            raise TypeError(f"Unsupported dictionary key type {key_type}")
        self._key_type = key_type

    @property
    def key_type(self) -> DataType:
        return self._key_type

    @property
    def index_type(self) -> DataType:
        return int32

    @property
    def numpy_dtype(self) -> np.dtype:
        return np.dtype("int32")

    @property
    def is_fixed_width(self) -> bool:
        return False

    @property
    def host_type(self) -> type:
        return self._key_type.host_type

    def to_arrow(self) -> pa.DataType:
        return pa.dictionary(pa.int32(), self._key_type.to_arrow())

    def _key(self) -> tuple:
        return (self._id, self._key_type)

    def __repr__(self) -> str:
        return f"dictionary32<{self._key_type!r}>"

    def __reduce__(self):
        return (type(self), (self._key_type,))


bool8 = DataType(TypeId.BOOL8)
int8 = DataType(TypeId.INT8)
int16 = DataType(TypeId.INT16)
int32 = DataType(TypeId.INT32)
int64 = DataType(TypeId.INT64)
uint8 = DataType(TypeId.UINT8)
uint16 = DataType(TypeId.UINT16)
uint32 = DataType(TypeId.UINT32)
uint64 = DataType(TypeId.UINT64)
float32 = DataType(TypeId.FLOAT32)
float64 = DataType(TypeId.FLOAT64)
string = DataType(TypeId.STRING)

_NAMED_TYPES = {
    "bool": bool8,
    "bool8": bool8,
    "boolean": bool8,
    "int8": int8,
    "int16": int16,
    "int32": int32,
    "int64": int64,
    "uint8": uint8,
    "uint16": uint16,
    "uint32": uint32,
    "uint64": uint64,
    "float32": float32,
    "float64": float64,
    "str": string,
    "string": string,
    "utf8": string,
}


def dtype(arbitrary: Any) -> DataType:
    """
    Coerce ``arbitrary`` into a DataType.

    Accepts DataType instances, type names (``"int32"``, ``"string"``),
    TypeId members, NumPy dtypes or scalar types and pyarrow types.
    """
    if isinstance(arbitrary, DataType):
        return arbitrary
    if isinstance(arbitrary, TypeId):
        return DataType(arbitrary)
    if isinstance(arbitrary, str):
        try:
            return _NAMED_TYPES[arbitrary.lower()]
        except KeyError:
            raise ValueError(f"Unknown data type {arbitrary!r}")
    if isinstance(arbitrary, pa.DataType):
        return _from_arrow_type(arbitrary)
    if arbitrary in (str, np.str_, np.object_):
        return string
    if arbitrary is bool:
        return bool8
    if arbitrary is int:
        return int64
    if arbitrary is float:
        return float64
    try:
        np_dtype = np.dtype(arbitrary)
    except TypeError:
        raise TypeError(f"Cannot interpret {arbitrary!r} as a data type")
    if np_dtype.kind in "OUS":
        return string
    try:
        return DataType(_TYPE_IDS_BY_NUMPY[np_dtype])
    except KeyError:
        raise TypeError(f"Unsupported data type {np_dtype}")


def _from_arrow_type(pa_type: pa.DataType) -> DataType:
    if pa.types.is_boolean(pa_type):
        return bool8
    if pa.types.is_string(pa_type) or pa.types.is_large_string(pa_type):
        return string
    if pa.types.is_list(pa_type) or pa.types.is_large_list(pa_type):
        return ListType(_from_arrow_type(pa_type.value_type))
    if pa.types.is_dictionary(pa_type):
        return DictionaryType(_from_arrow_type(pa_type.value_type))
    if pa.types.is_integer(pa_type) or pa.types.is_floating(pa_type):
        return dtype(pa_type.to_pandas_dtype())
    raise TypeError(f"Unsupported arrow type {pa_type}")
