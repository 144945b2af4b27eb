# SPDX-FileCopyrightText: Copyright (c) 2022-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from .mixin_factory import _create_delegating_mixin

UnaryOperand = _create_delegating_mixin(
    "UnaryOperand",
    "Mixin encapsulating element-wise unary operations.",
    "UNARY_OPERATION",
    "_unaryop",
    {
        "sin",
        "cos",
        "tan",
        "asin",
        "acos",
        "atan",
        "sinh",
        "cosh",
        "tanh",
        "asinh",
        "acosh",
        "atanh",
        "exp",
        "log",
        "sqrt",
        "cbrt",
        "ceil",
        "floor",
        "abs",
        "rint",
        "bit_invert",
        "not_",
    },
)
