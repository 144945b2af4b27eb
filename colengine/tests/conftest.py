# SPDX-FileCopyrightText: Copyright (c) 2019-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

import pytest

import colengine
from colengine.core.buffer import (
    TrackingMemoryResource,
    get_current_memory_resource,
    set_current_memory_resource,
)

signed_integer_types = ["int8", "int16", "int32", "int64"]
unsigned_types = ["uint8", "uint16", "uint32", "uint64"]
integer_types = signed_integer_types + unsigned_types
float_types = ["float32", "float64"]
numeric_types = integer_types + float_types

arithmetic_ops = ["add", "sub", "mul", "true_div", "floor_div", "pow"]
comparison_ops = ["eq", "ne", "lt", "le", "gt", "ge"]
bitwise_ops = ["bitwise_and", "bitwise_or", "bitwise_xor"]
unary_math_ops = [
    "sin",
    "cos",
    "tan",
    "atan",
    "sinh",
    "tanh",
    "exp",
    "sqrt",
    "cbrt",
    "ceil",
    "floor",
    "abs",
    "rint",
]


@pytest.fixture(params=integer_types)
def integer_type(request):
    return request.param


@pytest.fixture(params=float_types)
def float_type(request):
    return request.param


@pytest.fixture(params=numeric_types)
def numeric_type(request):
    return request.param


@pytest.fixture(params=arithmetic_ops)
def arithmetic_op(request):
    return request.param


@pytest.fixture(params=comparison_ops)
def comparison_op(request):
    return request.param


@pytest.fixture(params=bitwise_ops)
def bitwise_op(request):
    return request.param


@pytest.fixture
def tracking_mr():
    """Route every allocation of the test through a tracking resource."""
    previous = get_current_memory_resource()
    mr = TrackingMemoryResource()
    set_current_memory_resource(mr)
    yield mr
    set_current_memory_resource(previous)


@pytest.fixture
def bounds_check():
    with colengine.option_context("gather.bounds_check", True):
        yield
