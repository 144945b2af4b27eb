# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Literal

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence


def count_bytes(strings: Sequence[str]) -> np.ndarray:
    return np.array(
        [len(s.encode("utf-8")) for s in strings], dtype=np.int32
    )


def count_characters(strings: Sequence[str]) -> np.ndarray:
    return np.array([len(s) for s in strings], dtype=np.int32)


def pad(
    strings: Sequence[str],
    width: int,
    side: Literal["left", "right", "both"] = "left",
    fill_char: str = " ",
) -> list[str]:
    """
    Pad each string to ``width`` characters with ``fill_char``.

    Strings of ``width`` or more characters are returned unchanged. With
    ``side="both"`` an odd amount of padding puts the extra character on the
    right.
    """
    if side not in {"left", "right", "both"}:
        raise ValueError(
            f"side must be 'left', 'right' or 'both', got {side!r}"
        )
    if len(fill_char) != 1:
        raise ValueError("fill_char must be a single character")
    out = []
    for s in strings:
        total = max(width - len(s), 0)
        if side == "left":
            left = total
        elif side == "right":
            left = 0
        else:
            left = total // 2
        out.append(fill_char * left + s + fill_char * (total - left))
    return out


def replace_slice(
    strings: Sequence[str], repl: str, start: int = 0, stop: int = -1
) -> list[str]:
    """
    Replace characters ``[start, stop)`` of each string with ``repl``.

    A negative ``stop`` means the end of the string. Positions past the end
    are clamped.
    """
    if start < 0:
        raise ValueError("start cannot be negative")
    if 0 <= stop < start:
        raise ValueError("stop cannot be less than start")
    out = []
    for s in strings:
        begin = min(start, len(s))
        end = len(s) if stop < 0 else max(min(stop, len(s)), begin)
        out.append(s[:begin] + repl + s[end:])
    return out


def split(strings: Sequence[str], delimiter: str) -> list[str]:
    """
    Re-split the concatenation of every string on ``delimiter``.

    The delimiter stays at the end of each piece except the last. An empty
    delimiter joins every string into a single one.
    """
    text = "".join(strings)
    if not delimiter:
        return [text]
    pieces = text.split(delimiter)
    return [p + delimiter for p in pieces[:-1]] + [pieces[-1]]


def contains_re(strings: Sequence[str], pattern: str) -> np.ndarray:
    regex = re.compile(pattern)
    return np.array(
        [regex.search(s) is not None for s in strings], dtype=np.bool_
    )


def matches_re(strings: Sequence[str], pattern: str) -> np.ndarray:
    """Whether ``pattern`` matches at the start of each string."""
    regex = re.compile(pattern)
    return np.array(
        [regex.match(s) is not None for s in strings], dtype=np.bool_
    )


def count_re(strings: Sequence[str], pattern: str) -> np.ndarray:
    """Number of non-overlapping matches of ``pattern`` in each string."""
    regex = re.compile(pattern)
    return np.array(
        [sum(1 for _ in regex.finditer(s)) for s in strings], dtype=np.int32
    )


def concatenate(
    rows: Sequence[Sequence[str | None]],
    separator: str = "",
    null_repr: str | None = None,
    separate_nulls: bool = False,
) -> tuple[list[str], np.ndarray | None]:
    """
    Join the strings of each row.

    Parameters
    ----------
    rows : sequence of rows
        The values of each row, ``None`` for nulls.
    separator : str
        Placed between adjacent values.
    null_repr : str, optional
        Replaces null values. If ``None`` a row containing a null is null.
    separate_nulls : bool
        Whether the separator next to a replaced null value is kept.

    Returns
    -------
    tuple of (strings, validity)
        ``validity`` is ``None`` if no output row is null.
    """
    out = []
    valid = []
    for row in rows:
        if null_repr is None and any(v is None for v in row):
            out.append("")
            valid.append(False)
            continue
        if separate_nulls:
            out.append(
                separator.join(null_repr if v is None else v for v in row)
            )
        else:
            out.append(
                _join_dropping_null_separators(row, separator, null_repr)
            )
        valid.append(True)
    validity = np.array(valid, dtype=np.bool_)
    return out, None if validity.all() else validity


def _join_dropping_null_separators(
    row: Sequence[str | None], separator: str, null_repr: str
) -> str:
    text = ""
    previous_valid = False
    for v in row:
        if v is None:
            text += null_repr
            previous_valid = False
            continue
        if previous_valid:
            text += separator
        text += v
        previous_valid = True
    return text
