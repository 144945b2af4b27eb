# SPDX-FileCopyrightText: Copyright (c) 2022-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from colengine.core.buffer.buffer import Buffer, BufferOwner
from colengine.core.buffer.memory_resource import (
    MemoryResource,
    TrackingMemoryResource,
    get_current_memory_resource,
    reset_current_memory_resource,
    set_current_memory_resource,
)
from colengine.core.buffer.utils import (
    allocate_buffer,
    as_buffer,
    get_buffer_owner,
)
