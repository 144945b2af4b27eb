# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
"""Conversions between string columns and fixed-width columns.

Parsers never fail: they read the longest valid prefix of each string and
convert the digits seen so far. Integers are accumulated in a wrapping
64-bit value which is then narrowed to the target type, so overflow is
unchecked and its result unspecified. Use the ``is_*`` predicates to
validate strings first.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

    from colengine.core.dtypes import DataType

_UINT64_MASK = (1 << 64) - 1

_INTEGER_PREFIX = re.compile(r"([+-]?)(\d*)")
_HEX_PREFIX = re.compile(r"(?:0[xX])?([0-9A-Fa-f]*)")
_FLOAT_PREFIX = re.compile(
    r"[+-]?(?:infinity|inf|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)",
    re.IGNORECASE,
)
_IS_INTEGER = re.compile(r"[+-]?\d+")
_IS_HEX = re.compile(r"(?:0[xX])?[0-9A-Fa-f]+")
_IS_FLOAT = _FLOAT_PREFIX
_IS_IPV4 = re.compile(r"(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})")


def _narrow(bit_patterns: list[int], dtype: DataType) -> np.ndarray:
    """Narrow unsigned 64-bit patterns to ``dtype``, wrapping."""
    raw = np.array(bit_patterns, dtype=np.uint64)
    if dtype.is_unsigned:
        return raw.astype(dtype.numpy_dtype)
    return raw.view(np.int64).astype(dtype.numpy_dtype)


def _parse_integer(s: str) -> int:
    sign, digits = _INTEGER_PREFIX.match(s).groups()
    value = 0
    for ch in digits:
        value = (value * 10 + ord(ch) - 48) & _UINT64_MASK
    if sign == "-":
        value = -value & _UINT64_MASK
    return value


def to_integers(strings: Sequence[str], dtype: DataType) -> np.ndarray:
    """Parse decimal integers into ``dtype``."""
    if not dtype.is_integer:
        raise TypeError(f"Cannot parse integers into {dtype}")
    return _narrow([_parse_integer(s) for s in strings], dtype)


def from_integers(values: np.ndarray) -> list[str]:
    return [str(int(v)) for v in values.tolist()]


def _parse_hex(s: str) -> int:
    value = 0
    for ch in _HEX_PREFIX.match(s).group(1):
        value = ((value << 4) | int(ch, 16)) & _UINT64_MASK
    return value


def hex_to_integers(strings: Sequence[str], dtype: DataType) -> np.ndarray:
    """Parse hex digits (optional ``0x`` prefix) into ``dtype``."""
    if not dtype.is_integer:
        raise TypeError(f"Cannot parse hex values into {dtype}")
    return _narrow([_parse_hex(s) for s in strings], dtype)


def hex_from_integers(values: np.ndarray, dtype: DataType) -> list[str]:
    """
    Uppercase hex with two characters per byte and leading zero bytes
    removed. Negative values use their two's complement bit pattern.
    """
    mask = (1 << dtype.bit_width) - 1
    out = []
    for v in values.tolist():
        digits = f"{int(v) & mask:X}"
        if len(digits) % 2:
            digits = "0" + digits
        out.append(digits)
    return out


def _parse_float(s: str) -> float:
    match = _FLOAT_PREFIX.match(s)
    if match is None:
        return 0.0
    text = match.group(0)
    lowered = text.lstrip("+-").lower()
    if lowered == "nan":
        return math.nan
    if lowered in {"inf", "infinity"}:
        return -math.inf if text.startswith("-") else math.inf
    return float(text)


def to_floats(strings: Sequence[str], dtype: DataType) -> np.ndarray:
    if not dtype.is_floating:
        raise TypeError(f"Cannot parse floats into {dtype}")
    with np.errstate(over="ignore"):
        return np.array(
            [_parse_float(s) for s in strings], dtype=np.float64
        ).astype(dtype.numpy_dtype)


def format_float(value: float) -> str:
    """
    Format with at most 10 significant digits.

    Scientific notation is used once more digits would be needed. Integral
    values keep a trailing ``.0``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "-Inf" if value < 0 else "Inf"
    text = f"{value:.10g}"
    if "e" not in text and "." not in text:
        text += ".0"
    return text


def from_floats(values: np.ndarray) -> list[str]:
    return [format_float(float(v)) for v in values.tolist()]


def to_booleans(strings: Sequence[str]) -> np.ndarray:
    return np.array([s == "true" for s in strings], dtype=np.bool_)


def from_booleans(values: np.ndarray) -> list[str]:
    return ["true" if v else "false" for v in values.tolist()]


def _parse_octet(s: str) -> int:
    digits = _INTEGER_PREFIX.match(s).group(2)
    return int(digits) if digits else 0


def ipv4_to_integers(strings: Sequence[str]) -> np.ndarray:
    """
    Pack dotted quads as ``(i0 << 24) | (i1 << 16) | (i2 << 8) | i3``.

    Malformed strings produce an unspecified value.
    """
    out = []
    for s in strings:
        octets = (s.split(".") + ["", "", ""])[:4]
        value = 0
        for octet in octets:
            value = ((value << 8) | (_parse_octet(octet) & 0xFF))
        out.append(value)
    return np.array(out, dtype=np.int64)


def ipv4_from_integers(values: np.ndarray) -> list[str]:
    """Format the lower 32 bits of each value as a dotted quad."""
    out = []
    for v in values.tolist():
        v = int(v) & 0xFFFFFFFF
        out.append(
            f"{(v >> 24) & 0xFF}.{(v >> 16) & 0xFF}."
            f"{(v >> 8) & 0xFF}.{v & 0xFF}"
        )
    return out


def is_integer(strings: Sequence[str]) -> np.ndarray:
    return np.array(
        [_IS_INTEGER.fullmatch(s) is not None for s in strings],
        dtype=np.bool_,
    )


def is_float(strings: Sequence[str]) -> np.ndarray:
    return np.array(
        [_IS_FLOAT.fullmatch(s) is not None for s in strings],
        dtype=np.bool_,
    )


def is_hex(strings: Sequence[str]) -> np.ndarray:
    return np.array(
        [_IS_HEX.fullmatch(s) is not None for s in strings],
        dtype=np.bool_,
    )


def _is_ipv4(s: str) -> bool:
    match = _IS_IPV4.fullmatch(s)
    return match is not None and all(int(g) <= 255 for g in match.groups())


def is_ipv4(strings: Sequence[str]) -> np.ndarray:
    return np.array([_is_ipv4(s) for s in strings], dtype=np.bool_)
