# SPDX-FileCopyrightText: Copyright (c) 2024-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

_PATH_STEP = re.compile(r"\.(\*|[^.\[\]]+)|\[(\*|\d+|'[^']*')\]")

_KEY = "key"
_INDEX = "index"
_WILDCARD = "wildcard"


class _RawNumber(str):
    """A JSON number kept as the text it was written as."""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_json_path(json_path: str) -> list[tuple[str, Any]] | None:
    """
    Split a JSONPath into ``(kind, argument)`` steps.

    Supported steps are ``.name``, ``['name']``, ``[index]`` and the
    wildcards ``.*`` and ``[*]``, following a leading ``$``. A blank path
    selects nothing and returns ``None``.

    Raises
    ------
    ValueError
        If the path does not start with ``$`` or a step cannot be parsed.
    """
    if json_path.strip() == "":
        return None
    if not json_path.startswith("$"):
        raise ValueError(f"JSONPath must start with '$', got {json_path!r}")
    steps: list[tuple[str, Any]] = []
    pos = 1
    while pos < len(json_path):
        m = _PATH_STEP.match(json_path, pos)
        if m is None:
            raise ValueError(
                f"Invalid JSONPath {json_path!r} at position {pos}"
            )
        name, bracket = m.groups()
        if name is not None:
            steps.append((_WILDCARD, None) if name == "*" else (_KEY, name))
        elif bracket == "*":
            steps.append((_WILDCARD, None))
        elif bracket.startswith("'"):
            steps.append((_KEY, bracket[1:-1]))
        else:
            steps.append((_INDEX, int(bracket)))
        pos = m.end()
    return steps


def _normalize_single_quotes(text: str) -> str:
    # Rewrites 'single quoted' strings as "double quoted" ones.
    out = []
    quote = None
    i = 0
    while i < len(text):
        c = text[i]
        if quote is None:
            if c in "\"'":
                quote = c
                c = '"'
        elif c == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            out.append("'" if quote == "'" and nxt == "'" else c + nxt)
            i += 2
            continue
        elif c == quote:
            quote = None
            c = '"'
        elif c == '"':
            c = '\\"'
        out.append(c)
        i += 1
    return "".join(out)


def _loads(text: str, allow_single_quotes: bool) -> Any:
    if allow_single_quotes:
        text = _normalize_single_quotes(text)
    return json.loads(
        text,
        parse_int=_RawNumber,
        parse_float=_RawNumber,
        parse_constant=_reject_constant,
    )


def _dumps(value: Any) -> str:
    """Compact JSON text of a parsed value."""
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, _RawNumber):
        return str(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, list):
        return "[" + ",".join(_dumps(v) for v in value) + "]"
    return (
        "{"
        + ",".join(
            f"{json.dumps(k, ensure_ascii=False)}:{_dumps(v)}"
            for k, v in value.items()
        )
        + "}"
    )


def _select(
    node: Any, steps: list[tuple[str, Any]], missing_as_null: bool
) -> list[Any]:
    if not steps:
        return [node]
    (kind, arg), rest = steps[0], steps[1:]
    if kind == _KEY and isinstance(node, dict) and arg in node:
        return _select(node[arg], rest, missing_as_null)
    if kind == _INDEX and isinstance(node, list) and arg < len(node):
        return _select(node[arg], rest, missing_as_null)
    if kind == _WILDCARD and isinstance(node, (list, dict)):
        children = node if isinstance(node, list) else node.values()
        out = []
        for child in children:
            out.extend(_select(child, rest, missing_as_null))
        return out
    return [None] if missing_as_null else []


def get_json_object(
    strings: Sequence[str],
    valid: np.ndarray,
    json_path: str,
    allow_single_quotes: bool = False,
    strip_quotes_from_single_strings: bool = True,
    missing_fields_as_nulls: bool = False,
) -> tuple[list[str], np.ndarray]:
    """
    Apply ``json_path`` to the JSON document of each valid row.

    A path with a wildcard yields a JSON array of every match. Otherwise
    the single match is written as compact JSON text, a string match
    without its quotes when ``strip_quotes_from_single_strings`` is set.
    Rows that are null, are not valid JSON or have no match are null.
    With ``missing_fields_as_nulls`` a missing field matches JSON ``null``.

    Returns
    -------
    tuple of (strings, validity)
    """
    steps = parse_json_path(json_path)
    out = [""] * len(strings)
    out_valid = np.zeros(len(strings), dtype=np.bool_)
    if steps is None:
        return out, out_valid
    has_wildcard = any(kind == _WILDCARD for kind, _ in steps)
    for i, (text, ok) in enumerate(zip(strings, valid)):
        if not ok:
            continue
        try:
            document = _loads(text, allow_single_quotes)
        except ValueError:
            continue
        matches = _select(document, steps, missing_fields_as_nulls)
        if not matches:
            continue
        if has_wildcard:
            out[i] = "[" + ",".join(_dumps(m) for m in matches) + "]"
        else:
            match = matches[0]
            if (
                strip_quotes_from_single_strings
                and isinstance(match, str)
                and not isinstance(match, _RawNumber)
            ):
                out[i] = match
            else:
                out[i] = _dumps(match)
        out_valid[i] = True
    return out, out_valid
