# SPDX-FileCopyrightText: Copyright (c) 2018-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from colengine.core._internals import strings_transform
from colengine.core.column import StringColumn
from colengine.core.table import Table
from colengine.options import get_option

if TYPE_CHECKING:
    from colengine.core.buffer import MemoryResource

logger = logging.getLogger(__name__)


def _read_source(filepath_or_buffer) -> str:
    if isinstance(filepath_or_buffer, (str, os.PathLike)):
        nbytes = os.path.getsize(filepath_or_buffer)
        max_bytes = get_option("io.read_text.max_bytes")
        if nbytes > max_bytes:
            logger.warning(
                "%s is %d bytes, larger than the supported %d bytes; the "
                "result is undefined",
                os.fspath(filepath_or_buffer),
                nbytes,
                max_bytes,
            )
        with open(filepath_or_buffer, "rb") as f:
            data = f.read()
    elif hasattr(filepath_or_buffer, "read"):
        data = filepath_or_buffer.read()
    else:
        raise TypeError(
            "filepath_or_buffer must be a path or a file-like object, "
            f"not {type(filepath_or_buffer).__name__}"
        )
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return data


def read_text(
    filepath_or_buffer,
    delimiter: str | None = None,
    strip_delimiters: bool = False,
    memory_resource: MemoryResource | None = None,
) -> Table:
    """
    Read UTF-8 text into a single string column named ``"text"``.

    Parameters
    ----------
    filepath_or_buffer : str, path object or file-like object
        The file to read.
    delimiter : str, optional
        Splits the text into one row per piece. Every piece but the last
        keeps the delimiter at its end. Without a delimiter the whole text
        is a single row.
    strip_delimiters : bool, default False
        Remove the delimiter from the end of each piece.
    memory_resource : MemoryResource, optional
        Allocates the buffers of the result.

    Returns
    -------
    Table

    Notes
    -----
    Files larger than the ``io.read_text.max_bytes`` option (2**30 bytes by
    default) are not supported and produce an undefined result; a warning
    is logged for them.
    """
    text = _read_source(filepath_or_buffer)
    if delimiter is None:
        pieces = [text]
    else:
        pieces = strings_transform.split([text], delimiter)
        if strip_delimiters and delimiter:
            pieces = [
                p[: -len(delimiter)] if p.endswith(delimiter) else p
                for p in pieces[:-1]
            ] + pieces[-1:]
    logger.debug("Read %d rows of text", len(pieces))
    return Table(
        {
            "text": StringColumn._from_strings(
                pieces, None, memory_resource=memory_resource
            )
        }
    )
