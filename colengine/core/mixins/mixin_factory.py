# SPDX-FileCopyrightText: Copyright (c) 2022-2025, NVIDIA CORPORATION.
# SPDX-License-Identifier: Apache-2.0

import inspect


# `functools.partialmethod` does not allow setting attributes such as
# __doc__ on the resulting method. So we use a simple alternative to
# it here:
def _partialmethod(method, *args1, **kwargs1):
    def wrapper(self, *args2, **kwargs2):
        return method(self, *args1, *args2, **kwargs1, **kwargs2)

    return wrapper


class Operation:
    """Descriptor generating one delegating method of an operation mixin.

    The method is created the first time the attribute is accessed and is
    then cached on the owning class, so later lookups are plain attribute
    accesses.

    Parameters
    ----------
    name : str
        The name of the operation.
    docstring_format_args : dict
        Extra keys used to format the base operation's docstring.
    base_operation : callable
        The function every operation of the category delegates to. It is
        called with the operation name as the ``op`` keyword.
    """

    def __init__(self, name, docstring_format_args, base_operation):
        self._name = name
        self._docstring_format_args = docstring_format_args
        self._base_operation = base_operation

    def __get__(self, obj, owner=None):
        retfunc = _partialmethod(self._base_operation, op=self._name)

        retfunc.__name__ = self._name
        retfunc.__qualname__ = ".".join([owner.__name__, self._name])
        retfunc.__module__ = self._base_operation.__module__

        if self._base_operation.__doc__ is not None:
            retfunc.__doc__ = self._base_operation.__doc__.format(
                cls=owner.__name__,
                op=self._name,
                **self._docstring_format_args,
            )

        retfunc.__annotations__ = self._base_operation.__annotations__.copy()
        retfunc.__annotations__.pop("op", None)
        retfunc_params = [
            v
            for k, v in inspect.signature(
                self._base_operation
            ).parameters.items()
            if k != "op"
        ]
        retfunc.__signature__ = inspect.Signature(retfunc_params)

        setattr(owner, self._name, retfunc)

        if obj is None:
            return getattr(owner, self._name)
        else:
            return getattr(obj, self._name)


def _should_define_operation(cls, operation, base_operation_name):
    if operation not in dir(cls):
        return True

    # Without an override of the base operation the inherited method is used.
    if base_operation_name not in cls.__dict__:
        return False

    # The operation is inherited and the class overrides the base operation.
    # A hand written parent method wins, a generated one is replaced so that
    # it delegates to this class's base operation, and methods of object are
    # always replaced.
    for base_cls in cls.__mro__:
        if base_cls is object:
            return True
        if operation in base_cls.__dict__:
            return isinstance(base_cls.__dict__[operation], Operation)

    assert False, "Operation attribute not found in hierarchy."


def _create_delegating_mixin(
    mixin_name,
    docstring,
    category_name,
    base_operation_name,
    supported_operations,
):
    """Factory for mixins defining collections of delegated operations.

    Columns expose families of operations (binary operators, reductions,
    scans) that differ only in the operation name passed to one shared
    implementation, e.g. ``col.sum()`` calls ``col._reduce(op="sum")``. The
    mixin returned here generates those thin delegating methods for each
    subclass from the operations it declares valid.

    Parameters
    ----------
    mixin_name : str
        The name of the class, matching the name it is assigned to.
    docstring : str
        The documentation string for the mixin class.
    category_name : str
        The category of operations. Subclasses declare the operations they
        want in ``_VALID_{category_name}S`` and may supply docstring format
        keys per operation in ``_{category_name}_DOCSTRINGS``. The mixin
        publishes everything it can generate in
        ``_SUPPORTED_{category_name}S``.
    base_operation_name : str
        The name of the method every generated operation delegates to.
    supported_operations : set of str
        The operations subclasses may request.

    Examples
    --------
    >>> Counter = _create_delegating_mixin(
    ...     "Counter", "", "TALLY", "_tally", {"count_up", "count_down"}
    ... )
    >>> class Clicker(Counter):
    ...     _VALID_TALLYS = {"count_up"}
    ...
    ...     def _tally(self, op: str):
    ...         '''Run {op}.'''
    ...         return op
    >>> Clicker().count_up()
    'count_up'
    >>> Clicker.count_up.__doc__
    'Run count_up.'
    """
    validity_attr = f"_VALID_{category_name}S"
    docstring_attr = f"_{category_name}_DOCSTRINGS"
    supported_attr = f"_SUPPORTED_{category_name}S"

    class OperationMixin:
        @classmethod
        def __init_subclass__(cls):
            super().__init_subclass__()

            valid_operations = set()
            for base_cls in cls.__mro__:
                valid_operations |= getattr(base_cls, validity_attr, set())

            invalid_operations = valid_operations - supported_operations
            assert len(invalid_operations) == 0, (
                f"Invalid requested operations: {invalid_operations}"
            )

            base_operation = getattr(cls, base_operation_name)
            for operation in valid_operations:
                if _should_define_operation(
                    cls, operation, base_operation_name
                ):
                    docstring_format_args = getattr(
                        cls, docstring_attr, {}
                    ).get(operation, {})
                    op_attr = Operation(
                        operation, docstring_format_args, base_operation
                    )
                    setattr(cls, operation, op_attr)

    OperationMixin.__name__ = mixin_name
    OperationMixin.__qualname__ = mixin_name
    OperationMixin.__doc__ = docstring

    def _operation(self, op: str, *args, **kwargs):
        raise NotImplementedError

    _operation.__name__ = base_operation_name
    _operation.__qualname__ = ".".join([mixin_name, base_operation_name])
    _operation.__doc__ = (
        f"The core {category_name.lower()} function. Must be overridden by "
        "subclasses, the default implementation raises a NotImplementedError."
    )

    setattr(OperationMixin, base_operation_name, _operation)
    setattr(OperationMixin, supported_attr, supported_operations)

    return OperationMixin
