# SPDX-FileCopyrightText: Copyright (c) 2018-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from colengine.core import _internals, buffer, column, dtypes
from colengine.core.buffer import Buffer
from colengine.core.scalar import Scalar
from colengine.core.store import TableStore
from colengine.core.table import Table
