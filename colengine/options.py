# SPDX-FileCopyrightText: Copyright (c) 2022-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import os
import textwrap
from contextlib import ContextDecorator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Container


@dataclass
class Option:
    default: Any
    value: Any
    description: str
    validator: Callable
    set_callback: Callable | None = None


_OPTIONS: dict[str, Option] = {}


def _env_get_int(name, default):
    try:
        return int(os.getenv(name, default))
    except (ValueError, TypeError):
        return default


def _env_get_bool(name, default):
    env = os.getenv(name)
    if env is None:
        return default
    as_a_int = _env_get_int(name, None)
    env = env.lower().strip()
    if env == "true" or env == "on" or as_a_int:
        return True
    if env == "false" or env == "off" or as_a_int == 0:
        return False
    return default


def _register_option(
    name: str,
    default_value: Any,
    description: str,
    validator: Callable,
    set_callback: Callable | None = None,
):
    """Register an option.

    Parameters
    ----------
    name : str
        The name of the option.
    default_value : Any
        The default value of the option.
    description : str
        A text description of the option.
    validator : Callable
        Called on the option value to check its validity. Should raise an
        error if the value is invalid.
    set_callback : Callable | None
        Called when setting the option value.

    Raises
    ------
    BaseException
        Raised by validator if the value is invalid.
    """
    validator(default_value)
    _OPTIONS[name] = Option(
        default_value,
        default_value,
        description,
        validator,
        set_callback,
    )


def get_option(name: str) -> Any:
    """Get the value of option.

    Parameters
    ----------
    key : str
        The name of the option.

    Returns
    -------
    The value of the option.

    Raises
    ------
    KeyError
        If option ``name`` does not exist.
    """
    try:
        return _OPTIONS[name].value
    except KeyError:
        raise KeyError(f'"{name}" does not exist.')


def set_option(name: str, val: Any):
    """Set the value of option.

    Parameters
    ----------
    name : str
        The name of the option.
    val : Any
        The value to set.

    Raises
    ------
    KeyError
        If option ``name`` does not exist.
    BaseException
        Raised by validator if the value is invalid.
    """
    try:
        option_obj = _OPTIONS[name]
    except KeyError:
        raise KeyError(f'"{name}" does not exist.')
    option_obj.validator(val)
    option_obj.value = val
    if option_obj.set_callback is not None:
        option_obj.set_callback()


def _build_option_description(name, opt):
    return (
        f"{name}:\n"
        f"\t{opt.description}\n"
        f"\t[Default: {opt.default}] [Current: {opt.value}]"
    )


def describe_option(name: str | None = None):
    """Prints the description of an option.

    If `name` is unspecified, prints the description of all available options.

    Parameters
    ----------
    name : Optional[str]
        The name of the option.
    """
    names = _OPTIONS.keys() if name is None else [name]
    for name in names:
        print(_build_option_description(name, _OPTIONS[name]))  # noqa: T201


def _make_contains_validator(valid_options: Container) -> Callable:
    """Return a validator that checks if a value is in `valid_options`."""

    def _validator(val):
        if val not in valid_options:
            raise ValueError(
                f"{val} is not a valid option. "
                f"Must be one of {set(valid_options)}."
            )

    return _validator


def _positive_integer_validator(val):
    if not (isinstance(val, int) and not isinstance(val, bool) and val > 0):
        raise ValueError(
            f"{val} is not a valid option. Must be a positive integer."
        )


def _reset_default_memory_resource():
    from colengine.core.buffer.memory_resource import (
        reset_current_memory_resource,
    )

    reset_current_memory_resource()


_register_option(
    "gather.bounds_check",
    _env_get_bool("COLENGINE_GATHER_BOUNDS_CHECK", False),
    textwrap.dedent(
        """
        If set to `True`, `gather` with `nullify_out_of_bounds=False`
        validates every index and raises `RangeError` for out-of-bounds
        entries instead of producing undefined rows. Meant for debugging,
        it costs a full pass over the selection.
        \tValid values are True or False. Default is False.
    """
    ),
    _make_contains_validator([False, True]),
)

_register_option(
    "memory.track_allocations",
    _env_get_bool("COLENGINE_TRACK_ALLOCATIONS", False),
    textwrap.dedent(
        """
        If set to `True`, the default memory resource records the number
        of live and peak allocated bytes.
        \tValid values are True or False. Default is False.
    """
    ),
    _make_contains_validator([False, True]),
    _reset_default_memory_resource,
)

_register_option(
    "io.read_text.max_bytes",
    _env_get_int("COLENGINE_READ_TEXT_MAX_BYTES", 2**30),
    textwrap.dedent(
        """
        Largest file size in bytes that `read_text` supports. Larger inputs
        are out of contract and produce a warning.
        \tValid values are positive integers. Default is 2**30.
    """
    ),
    _positive_integer_validator,
)

_register_option(
    "display.max_rows",
    10,
    textwrap.dedent(
        """
        Number of rows shown by the repr of a column.
        \tValid values are positive integers. Default is 10.
    """
    ),
    _positive_integer_validator,
)


class option_context(ContextDecorator):
    """
    Context manager to temporarily set options in the `with` statement context.

    You need to invoke as ``option_context(pat, val, [(pat, val), ...])``.


    Examples
    --------
    >>> from colengine import option_context
    >>> with option_context('gather.bounds_check', True):
    ...     pass
    """

    def __init__(self, *args) -> None:
        if len(args) % 2 != 0:
            raise ValueError(
                "Need to invoke as option_context(pat, val, "
                "[(pat, val), ...])."
            )

        self.ops = tuple(zip(args[::2], args[1::2]))

    def __enter__(self) -> None:
        self.undo = tuple((pat, get_option(pat)) for pat, _ in self.ops)
        for pat, val in self.ops:
            set_option(pat, val)

    def __exit__(self, *args) -> None:
        for pat, val in self.undo:
            set_option(pat, val)
