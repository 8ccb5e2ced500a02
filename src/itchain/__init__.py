"""
itchain - chainable accessor and transformer functions

Build the small callables that map/filter/sorted/reduce want without
writing lambdas:

    from itchain import It, Self

    sorted(words, key=It.invoke('lower'))
    list(map(It.get('last').run_if_truthy(It.invoke('lower')).default_to('none'), people))
    It.pluck('x')([{'x': 1}, {'x': 2}])          # [1, 2]

Every operation returns a new immutable Pipeline that carries the whole
operation set again. `It` is the identity root; `Self` reads the receiver
instead of the subject, so it can be stored on a class and bound like a
method.
"""

__version__ = "0.3.0"

from .catpy import Functor, identity, is_truthy
from .core import (
    It,
    Pipeline,
    Self,
    compose,
    decorate,
    extend,
    self_context,
)
from .exceptions import (
    InvalidSelectorError,
    InvalidStepError,
    ItchainError,
    OperationConflictError,
)
from .logging_config import (
    configure_trace_logging,
    get_trace_logger,
    restore_stderr_logging,
    suppress_stderr_logging,
)
from .operations import OPERATION_NAMES, Chainable
from .operators import BINARY_OPERATORS, Comparator, compare_by
from .printing import pipeline_tree, print_pipeline
from .selectors import ByFunction, ByName, to_selector
from .steps import Step

__all__ = [
    # Core
    "It",
    "Self",
    "Pipeline",
    "Chainable",
    "Step",
    "identity",
    "self_context",
    "decorate",
    "compose",
    "extend",
    "OPERATION_NAMES",
    # Operators and comparators
    "BINARY_OPERATORS",
    "Comparator",
    "compare_by",
    # Selectors
    "ByName",
    "ByFunction",
    "to_selector",
    # Foundations
    "Functor",
    "is_truthy",
    # Exceptions
    "ItchainError",
    "InvalidSelectorError",
    "InvalidStepError",
    "OperationConflictError",
    # Logging
    "get_trace_logger",
    "configure_trace_logging",
    "suppress_stderr_logging",
    "restore_stderr_logging",
    # Printing
    "pipeline_tree",
    "print_pipeline",
]
