# SPDX-FileCopyrightText: Copyright (c) 2022-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

from .mixin_factory import Operation, _create_delegating_mixin

# Python operators and the named column operation each one evaluates.
_OPERATOR_NAMES = {
    "__add__": "add",
    "__sub__": "sub",
    "__mul__": "mul",
    "__truediv__": "true_div",
    "__floordiv__": "floor_div",
    "__mod__": "mod",
    "__pow__": "pow",
    "__and__": "bitwise_and",
    "__or__": "bitwise_or",
    "__xor__": "bitwise_xor",
    "__lshift__": "shift_left",
    "__rshift__": "shift_right",
    "__lt__": "lt",
    "__le__": "le",
    "__eq__": "eq",
    "__ne__": "ne",
    "__gt__": "gt",
    "__ge__": "ge",
}

ARITHMETIC_OPERATIONS = {
    "add",
    "sub",
    "mul",
    "div",
    "true_div",
    "floor_div",
    "mod",
    "pow",
    "log_base",
    "atan2",
    "null_max",
    "null_min",
}
BITWISE_OPERATIONS = {
    "bitwise_and",
    "bitwise_or",
    "bitwise_xor",
    "shift_left",
    "shift_right",
    "shift_right_unsigned",
}
LOGICAL_OPERATIONS = {"logical_and", "logical_or"}
COMPARISON_OPERATIONS = {"eq", "ne", "lt", "le", "gt", "ge", "null_equals"}

BinaryOperand = _create_delegating_mixin(
    "BinaryOperand",
    "Mixin encapsulating binary operations.",
    "BINARY_OPERATION",
    "_binaryop",
    {
        *ARITHMETIC_OPERATIONS,
        *BITWISE_OPERATIONS,
        *LOGICAL_OPERATIONS,
        *COMPARISON_OPERATIONS,
        # Numeric operators.
        "__add__",
        "__sub__",
        "__mul__",
        "__truediv__",
        "__floordiv__",
        "__mod__",
        "__pow__",
        "__lshift__",
        "__rshift__",
        "__and__",
        "__xor__",
        "__or__",
        # Reflected numeric operators.
        "__radd__",
        "__rsub__",
        "__rmul__",
        "__rtruediv__",
        "__rfloordiv__",
        "__rmod__",
        "__rpow__",
        "__rlshift__",
        "__rrshift__",
        "__rand__",
        "__rxor__",
        "__ror__",
        # Rich comparison operators.
        "__lt__",
        "__le__",
        "__eq__",
        "__ne__",
        "__gt__",
        "__ge__",
    },
)


def _binaryop(self, other, op: str):
    """The core binary_operation function.

    Must be overridden by subclasses, the default implementation raises a
    NotImplementedError.
    """
    if op == "__eq__":
        raise TypeError(
            "'==' not supported between instances of "
            f"'{type(self).__name__}' and '{type(other).__name__}'"
        )
    if op == "__ne__":
        raise TypeError(
            "'!=' not supported between instances of "
            f"'{type(self).__name__}' and '{type(other).__name__}'"
        )
    raise NotImplementedError()


def _check_reflected_op(op):
    if reflect := (
        op.startswith("__") and op[2] == "r" and op != "__rshift__"
    ):
        op = op[:2] + op[3:]
    return reflect, _OPERATOR_NAMES.get(op, op)


BinaryOperand._binaryop = _binaryop
BinaryOperand._check_reflected_op = staticmethod(_check_reflected_op)

# object.__eq__ is replaced by an Operation so that classes implementing
# _binaryop get generated comparison operators instead of identity checks.
BinaryOperand.__eq__ = Operation("__eq__", {}, BinaryOperand._binaryop)
BinaryOperand.__ne__ = Operation("__ne__", {}, BinaryOperand._binaryop)
