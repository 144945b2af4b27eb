# SPDX-FileCopyrightText: Copyright (c) 2022-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from .binops import BinaryOperand
from .reductions import Reducible
from .scans import Scannable
from .unary import UnaryOperand

__all__ = [
    "BinaryOperand",
    "Reducible",
    "Scannable",
    "UnaryOperand",
]
