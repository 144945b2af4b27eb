# SPDX-FileCopyrightText: Copyright (c) 2020-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0


class MixedTypeError(TypeError):
    pass


class UnsupportedCastError(TypeError):
    pass


class ShapeMismatchError(ValueError):
    pass


class DomainError(ValueError):
    pass


class RangeError(IndexError):
    pass


class AliasingError(RuntimeError):
    pass


class UseAfterDisposeError(RuntimeError):
    pass
