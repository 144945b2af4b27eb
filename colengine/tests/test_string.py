# SPDX-FileCopyrightText: Copyright (c) 2019-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

import math

import numpy as np
import pytest

import colengine
from colengine.core.column import StringColumn, as_column
from colengine.errors import ShapeMismatchError
from colengine.testing import assert_column_equal


def test_string_column_layout():
    col = as_column(["ab", None, "", "é"])
    assert isinstance(col, StringColumn)
    assert col.offsets.to_pylist() == [0, 2, 2, 2, 4]
    assert col.chars.to_pylist() == list("abé".encode())
    assert col.to_pylist() == ["ab", None, "", "é"]
    assert col.slice(1, 4).to_pylist() == [None, "", "é"]


@pytest.mark.parametrize(
    "data, dtype, expect",
    [
        (["123", "-45", "+6", None], "int64", [123, -45, 6, None]),
        (["12ab", "", "abc", "7 8"], "int32", [12, 0, 0, 7]),
        (["300", "-1"], "int8", [44, -1]),
        (["255", "-1"], "uint8", [255, 255]),
        (["18446744073709551617"], "int64", [1]),
    ],
)
def test_strings_to_integers(data, dtype, expect):
    got = as_column(data).strings_to_integers(dtype)
    assert got.dtype == colengine.dtype(dtype)
    assert got.to_pylist() == expect


def test_integer_roundtrip(integer_type):
    info = np.iinfo(integer_type)
    values = np.array([info.min, 0, 1, info.max], dtype=integer_type)
    col = as_column(values)
    strings = col.strings_from_integers()
    assert strings.to_pylist() == [str(v) for v in values.tolist()]
    assert_column_equal(strings.strings_to_integers(integer_type), col)


def test_strings_from_integers_keeps_nulls():
    got = as_column([1, None, -3]).strings_from_integers()
    assert got.to_pylist() == ["1", None, "-3"]


@pytest.mark.parametrize(
    "data, dtype, expect",
    [
        ([1234, 0, 255], "int64", ["04D2", "00", "FF"]),
        ([-1, 16], "int8", ["FF", "10"]),
        ([-2], "int32", ["FFFFFFFE"]),
        ([4096], "uint16", ["1000"]),
    ],
)
def test_hex_from_integers(data, dtype, expect):
    got = as_column(data, dtype=dtype).hex_from_integers()
    assert got.to_pylist() == expect


def test_hex_to_integers():
    col = as_column(["04D2", "0xff", "0XAb", "FFz", "", None])
    got = col.hex_to_integers()
    assert got.to_pylist() == [1234, 255, 171, 255, 0, None]
    assert as_column(["FF"]).hex_to_integers("int8").to_pylist() == [-1]


@pytest.mark.parametrize(
    "value, expect",
    [
        (1.5, "1.5"),
        (1.0, "1.0"),
        (-0.25, "-0.25"),
        (100.0, "100.0"),
        (1.78e15, "1.78e+15"),
        (1234567890.0, "1234567890.0"),
        (1.0 / 3.0, "0.3333333333"),
        (math.nan, "NaN"),
        (math.inf, "Inf"),
        (-math.inf, "-Inf"),
    ],
)
def test_strings_from_floats(value, expect):
    got = as_column([value, None]).strings_from_floats()
    assert got.to_pylist() == [expect, None]


def test_strings_to_floats():
    col = as_column(["1.5", "-2e3", ".5", "inf", "-Infinity", "abc", "3.5x"])
    got = col.strings_to_floats().to_pylist()
    assert got == [1.5, -2000.0, 0.5, math.inf, -math.inf, 0.0, 3.5]
    got = as_column(["NaN", "1e39"]).strings_to_floats("float32")
    values = got.to_pylist()
    assert got.dtype == colengine.float32
    assert math.isnan(values[0])
    assert values[1] == math.inf


def test_booleans():
    col = as_column(["true", "True", "false", "", None])
    got = col.strings_to_booleans()
    assert got.dtype == colengine.bool8
    assert got.to_pylist() == [True, False, False, False, None]
    got = as_column([True, None, False]).strings_from_booleans()
    assert got.to_pylist() == ["true", None, "false"]


def test_ipv4():
    col = as_column(["192.168.0.1", "0.0.0.0", "255.255.255.255", None])
    got = col.ipv4_to_integers()
    assert got.dtype == colengine.int64
    assert got.to_pylist() == [3232235521, 0, 4294967295, None]
    assert_column_equal(got.ipv4_from_integers(), col)


def test_ipv4_lenient_parsing():
    got = as_column(["1.2.3", "10.0.0.1x"]).ipv4_to_integers()
    assert got.to_pylist() == [16909056, 167772161]
    got = as_column([2**32 + 1], dtype="int64").ipv4_from_integers()
    assert got.to_pylist() == ["0.0.0.1"]


@pytest.mark.parametrize(
    "method, data, expect",
    [
        (
            "string_is_integer",
            ["12", "-3", "+4", "1.5", "", "a"],
            [True, True, True, False, False, False],
        ),
        (
            "string_is_float",
            ["1.5", "1e10", ".5", "nan", "-inf", "abc", ""],
            [True, True, True, True, True, False, False],
        ),
        (
            "string_is_hex",
            ["0x1F", "ab", "g", ""],
            [True, True, False, False],
        ),
        (
            "string_is_ipv4",
            ["192.168.0.1", "256.0.0.1", "1.2.3", "a.b.c.d"],
            [True, False, False, False],
        ),
    ],
)
def test_string_predicates(method, data, expect):
    col = as_column(data + [None])
    got = getattr(col, method)()
    assert got.dtype == colengine.bool8
    assert got.to_pylist() == expect + [None]


def test_conversion_type_errors():
    with pytest.raises(TypeError):
        as_column([1, 2]).strings_to_integers()
    with pytest.raises(TypeError):
        as_column(["1"]).strings_to_integers("float32")
    with pytest.raises(TypeError):
        as_column(["1"]).strings_to_floats("int32")
    with pytest.raises(TypeError):
        as_column([1, 2]).strings_from_floats()
    with pytest.raises(TypeError):
        as_column([1.0]).strings_from_integers()
    with pytest.raises(TypeError):
        as_column([1]).strings_from_booleans()
    with pytest.raises(TypeError):
        as_column(["a"]).strings_from_integers()


def test_count_bytes_and_characters():
    col = as_column(["a", "é", None, "", "日本"])
    got = col.count_bytes()
    assert got.dtype == colengine.int32
    assert got.to_pylist() == [1, 2, None, 0, 6]
    assert col.count_characters().to_pylist() == [1, 1, None, 0, 2]


@pytest.mark.parametrize(
    "side, expect",
    [
        ("left", ["  a", " ab", "abc", "abcd", None]),
        ("right", ["a  ", "ab ", "abc", "abcd", None]),
        ("both", [" a ", "ab ", "abc", "abcd", None]),
    ],
)
def test_pad(side, expect):
    col = as_column(["a", "ab", "abc", "abcd", None])
    assert col.pad(3, side).to_pylist() == expect


def test_pad_fill_char_and_zfill():
    col = as_column(["7", "42", "1234"])
    assert col.pad(4, "both", "*").to_pylist() == ["*7**", "*42*", "1234"]
    assert col.zfill(3).to_pylist() == ["007", "042", "1234"]


def test_pad_errors():
    col = as_column(["a"])
    with pytest.raises(ValueError):
        col.pad(3, "middle")
    with pytest.raises(ValueError):
        col.pad(3, "left", "ab")


@pytest.mark.parametrize(
    "start, stop, expect",
    [
        (1, 3, ["aXdef", "aX", "X", None]),
        (1, -1, ["aX", "aX", "X", None]),
        (0, 0, ["Xabcdef", "Xab", "X", None]),
        (10, 12, ["abcdefX", "abX", "X", None]),
    ],
)
def test_replace_slice(start, stop, expect):
    col = as_column(["abcdef", "ab", "", None])
    assert col.replace_slice("X", start, stop).to_pylist() == expect


def test_replace_slice_errors():
    col = as_column(["abc"])
    with pytest.raises(ValueError):
        col.replace_slice("X", -1, 2)
    with pytest.raises(ValueError):
        col.replace_slice("X", 2, 1)


def test_split():
    col = as_column(["a,b", "c,", None, "d"])
    got = col.split(",")
    assert got.to_pylist() == ["a,", "bc,", "d"]
    assert not got.nullable
    assert col.split("").to_pylist() == ["a,bc,d"]
    assert as_column(["a,"]).split(",").to_pylist() == ["a,", ""]


def test_regex():
    col = as_column(["apple", "banana", None, ""])
    assert col.contains_re("an").to_pylist() == [False, True, None, False]
    assert col.matches_re("b").to_pylist() == [False, True, None, False]
    assert col.matches_re("an").to_pylist() == [False, False, None, False]
    got = col.count_re("an")
    assert got.dtype == colengine.int32
    assert got.to_pylist() == [0, 2, None, 0]
    assert col.contains_re("^$").to_pylist() == [False, False, None, True]


@pytest.mark.parametrize(
    "null_repr, separate_nulls, expect",
    [
        (None, False, ["a-x", None, None]),
        ("N", True, ["a-x", "N-y", "c-N"]),
        ("N", False, ["a-x", "Ny", "cN"]),
    ],
)
def test_concatenate(null_repr, separate_nulls, expect):
    lhs = as_column(["a", None, "c"])
    rhs = as_column(["x", "y", None])
    got = StringColumn.concatenate(
        [lhs, rhs],
        separator="-",
        null_repr=null_repr,
        separate_nulls=separate_nulls,
    )
    assert got.to_pylist() == expect


def test_concatenate_drops_separators_next_to_nulls():
    cols = [as_column(["a"]), as_column([None], dtype="string")]
    cols.append(as_column(["b"]))
    got = StringColumn.concatenate(cols, ",", "X")
    assert got.to_pylist() == ["aXb"]
    got = StringColumn.concatenate(cols, ",", "X", separate_nulls=True)
    assert got.to_pylist() == ["a,X,b"]


def test_concatenate_errors():
    with pytest.raises(TypeError):
        StringColumn.concatenate([as_column(["a"]), as_column([1])])
    with pytest.raises(ShapeMismatchError):
        StringColumn.concatenate([as_column(["a"]), as_column(["a", "b"])])


_BOOKSTORE = """
{
    "store": {
        "book": [
            {
                "author": "Nigel Rees",
                "title": "Sayings of the Century",
                "price": 8.95
            },
            {
                "category": "fiction",
                "author": "Evelyn Waugh",
                "title": "Sword of Honour",
                "price": 12.99
            }
        ]
    }
}
"""


@pytest.mark.parametrize(
    "json_path, expect",
    [
        ("$.store.book[0].author", "Nigel Rees"),
        ("$.store.book[*].price", "[8.95,12.99]"),
        ("$['store'].book[1].price", "12.99"),
        (
            "$.store.book[1]",
            '{"category":"fiction","author":"Evelyn Waugh",'
            '"title":"Sword of Honour","price":12.99}',
        ),
        ("$.store.book[0].category", None),
        ("$.store.book[2]", None),
        ("$.store.*[0].price", "[8.95]"),
    ],
)
def test_get_json_object(json_path, expect):
    col = as_column([_BOOKSTORE, None, "{not json", '{"a": [1, 2]}'])
    got = col.get_json_object(json_path)
    assert got.to_pylist() == [expect, None, None, None]


def test_get_json_object_root_and_blank_path():
    col = as_column(['{"a": [1, 2.50], "b": {"c": null}}', "[true]"])
    assert col.get_json_object("$").to_pylist() == [
        '{"a":[1,2.50],"b":{"c":null}}',
        "[true]",
    ]
    assert col.get_json_object("$.b.c").to_pylist() == ["null", None]
    assert col.get_json_object(" ").to_pylist() == [None, None]


def test_get_json_object_strip_quotes_from_single_strings():
    col = as_column([_BOOKSTORE])
    got = col.get_json_object(
        "$.store.book[0].author", strip_quotes_from_single_strings=False
    )
    assert got.to_pylist() == ['"Nigel Rees"']
    got = col.get_json_object(
        "$.store.book[*].title", strip_quotes_from_single_strings=True
    )
    assert got.to_pylist() == ['["Sayings of the Century","Sword of Honour"]']


@pytest.mark.parametrize(
    "json_path, missing_fields_as_nulls, expect",
    [
        ("$.store.book[0].category", True, "null"),
        ("$.store.book[*].category", True, '[null,"fiction"]'),
        ("$.store.book[0].category", False, None),
        ("$.store.book[*].category", False, '["fiction"]'),
    ],
)
def test_get_json_object_missing_fields_as_nulls(
    json_path, missing_fields_as_nulls, expect
):
    col = as_column([_BOOKSTORE])
    got = col.get_json_object(
        json_path, missing_fields_as_nulls=missing_fields_as_nulls
    )
    assert got.to_pylist() == [expect]


def test_get_json_object_allow_single_quotes():
    col = as_column(["{'author': \"Nigel Rees\", \"title\": 'It\\'s \"it\"'}"])
    got = col.get_json_object("$.author", allow_single_quotes=True)
    assert got.to_pylist() == ["Nigel Rees"]
    got = col.get_json_object(
        "$.title",
        allow_single_quotes=True,
        strip_quotes_from_single_strings=False,
    )
    assert got.to_pylist() == ['"It\'s \\"it\\""']
    got = col.get_json_object("$.author", allow_single_quotes=False)
    assert got.to_pylist() == [None]


@pytest.mark.parametrize(
    "json_path", ["a", ".", "/.store", "$.store[", "$[x]"]
)
def test_get_json_object_invalid_json_path(json_path):
    with pytest.raises(ValueError):
        as_column([_BOOKSTORE]).get_json_object(json_path)


def test_get_json_object_requires_strings():
    with pytest.raises(TypeError):
        as_column([1, 2]).get_json_object("$")
