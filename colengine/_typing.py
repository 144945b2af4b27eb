# SPDX-FileCopyrightText: Copyright (c) 2021-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from typing import TYPE_CHECKING, Any, Union

import numpy as np
import pyarrow as pa

if TYPE_CHECKING:
    import colengine

# Dtype should ideally only used for public facing APIs
Dtype = Union["colengine.core.dtypes.DataType", str, np.dtype, pa.DataType]

# scalars
ScalarLike = Any

# columns
ColumnLike = Any

# binary operation
ColumnBinaryOperand = Union[
    "colengine.Scalar", "colengine.core.column.ColumnBase", int, float, bool
]
