"""
itchain Exception Hierarchy

Contains the exceptions raised while *building* pipelines. Faults raised
while a pipeline runs (AttributeError, KeyError, TypeError, ...) come from
the subject itself and are never wrapped.
"""


class ItchainError(Exception):
    """
    Base exception for all itchain build-time errors.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class InvalidSelectorError(ItchainError, TypeError):
    """
    Raised when an operation is given a selector it cannot resolve.

    Selectors are method names (str) or callables. Higher-order operations
    additionally accept None (identity), Steps and Pipelines.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class InvalidStepError(ItchainError, TypeError):
    """
    Raised when compose() or decorate() receives something that is not callable.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class OperationConflictError(ItchainError, ValueError):
    """
    Raised when extend() is asked to register an operation whose name
    already exists on the pipeline class.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


__all__ = [
    "ItchainError",
    "InvalidSelectorError",
    "InvalidStepError",
    "OperationConflictError",
]
