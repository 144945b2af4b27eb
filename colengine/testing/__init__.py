# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from colengine.testing.testing import (
    assert_column_equal,
    assert_table_equal,
)
