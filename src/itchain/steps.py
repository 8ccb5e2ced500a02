"""
itchain Steps - the units of composition

A Step transforms a subject under an explicit receiver:

    step.execute(subject, receiver=None) -> result

Pipelines are thin immutable wrappers around a single Step; composing two
pipelines composes their steps. The receiver is passed unchanged to every
step of a composition, including steps nested inside higher-order
operations (run_if_truthy, map_over, ...), which is what lets receiver
pipelines (Self) behave exactly like subject pipelines (It).
"""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Type

import pyarrow as pa

from .catpy import is_truthy
from .exceptions import InvalidSelectorError, InvalidStepError
from .logging_config import get_trace_logger
from .selectors import (
    ByName, Selector, assign, describe_callable, lookup, remove,
)


# =============================================================================
# Arrow Utilities
# =============================================================================

def is_arrow(data: Any) -> bool:
    """Check if data is a PyArrow table."""
    return isinstance(data, pa.Table)


def iter_items(data: Any) -> Iterator[Any]:
    """Iterate a sequence; Arrow tables are iterated as row dicts."""
    if is_arrow(data):
        return iter(data.to_pylist())
    return iter(data)


# =============================================================================
# Step
# =============================================================================

class Step(ABC):
    """
    A step in a pipeline: (subject, receiver) -> result.

    Steps are immutable and hold only their configuration arguments.

    ::: This is-in-layer Core-Layer.
    ::: This is a step.
    ::: This is stateless.
    """

    @abstractmethod
    def execute(self, subject: Any, receiver: Any = None) -> Any:
        """Transform the subject and return the result."""
        pass

    def describe(self) -> str:
        """Method-call label of this step, e.g. ``get('a')``."""
        return type(self).__name__

    def children(self) -> Tuple["Step", ...]:
        """Steps nested inside this one (arguments of higher-order steps)."""
        return ()

    def __rshift__(self, other: "Step") -> "ComposedStep":
        """Compose steps: step1 >> step2"""
        return ComposedStep(self, as_step(other))

    def and_then(self, other: "Step") -> "ComposedStep":
        """Compose steps: step1.and_then(step2)"""
        return self >> other


class StepSource(ABC):
    """Anything that can hand out a Step (Pipeline implements this)."""

    @abstractmethod
    def as_step(self) -> Step:
        raise NotImplementedError


def as_step(value: Any) -> Step:
    """Resolve a Step, a Pipeline or a plain callable into a Step."""
    if isinstance(value, Step):
        return value
    if isinstance(value, StepSource):
        return value.as_step()
    if callable(value):
        return FunctionStep(value)
    raise InvalidStepError(f"Cannot compose a non-callable {type(value).__name__}")


def unary_step(fn_or_key: Any, operation: str) -> Step:
    """
    Resolve the argument of a higher-order operation.

    None means identity, a string means get(key), anything callable is used
    as is.
    """
    if fn_or_key is None:
        return IdentityStep()
    if isinstance(fn_or_key, str):
        return GetStep(fn_or_key)
    if isinstance(fn_or_key, (Step, StepSource)) or callable(fn_or_key):
        return as_step(fn_or_key)
    raise InvalidSelectorError(
        f"{operation}() expects a key, a callable or nothing, got {type(fn_or_key).__name__}"
    )


# =============================================================================
# Formatting
# =============================================================================

ROOT_LABELS: Dict[Type[Step], str] = {}


def format_arg(value: Any) -> str:
    if isinstance(value, Step):
        return chain_repr(value)
    if isinstance(value, StepSource):
        return chain_repr(value.as_step())
    if isinstance(value, type):
        return value.__qualname__
    if callable(value):
        return describe_callable(value)
    return repr(value)


def format_args(args: Tuple[Any, ...] = (), kwargs: Optional[Dict[str, Any]] = None) -> str:
    parts = [format_arg(a) for a in args]
    parts.extend(f"{k}={format_arg(v)}" for k, v in (kwargs or {}).items())
    return ", ".join(parts)


def flatten(step: Step) -> Tuple[Step, ...]:
    if isinstance(step, ComposedStep):
        return step.parts
    return (step,)


def chain_repr(step: Step) -> str:
    """Render a step chain the way it would be written, e.g. It.get('a').not_()."""
    head, *rest = flatten(step)
    if type(head) in ROOT_LABELS:
        text = ROOT_LABELS[type(head)]
    elif isinstance(head, FunctionStep):
        text = f"decorate({head.label()})"
    else:
        text = f"It.{head.describe()}"
    return text + "".join(f".{leaf.describe()}" for leaf in rest)


# =============================================================================
# Core Steps
# =============================================================================

@dataclass(frozen=True)
class IdentityStep(Step):
    """Pass-through step that returns the subject unchanged."""

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return subject

    def describe(self) -> str:
        return "compose(identity)"


@dataclass(frozen=True)
class ReceiverStep(Step):
    """Returns the receiver and ignores the subject."""

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return receiver

    def describe(self) -> str:
        return "compose(self_context())"


ROOT_LABELS[IdentityStep] = "It"
ROOT_LABELS[ReceiverStep] = "Self"


@dataclass(frozen=True)
class FunctionStep(Step):
    """A plain callable used as a step. It receives the subject only."""
    fn: Callable[[Any], Any]

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return self.fn(subject)

    def label(self) -> str:
        return describe_callable(self.fn)

    def describe(self) -> str:
        return f"compose({self.label()})"


@dataclass(frozen=True)
class ComposedStep(Step):
    """Composition of two steps: second(first(subject, receiver), receiver).

    The leaves are flattened once at construction, so execution is a loop
    over the chain rather than a recursion as deep as the chain. Equality,
    hashing and repr use the flat `parts` as well, so regrouping the same
    leaves gives an equal step.

    ::: This is-in-layer Core-Layer.
    ::: This is a step.
    ::: This is stateless.
    """
    first: Step = field(repr=False, compare=False)
    second: Step = field(repr=False, compare=False)
    parts: Tuple[Step, ...] = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "parts", flatten(self.first) + flatten(self.second))

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        for step in self.parts:
            subject = step.execute(subject, receiver)
        return subject

    def describe(self) -> str:
        return chain_repr(self)


# =============================================================================
# Property Steps
# =============================================================================

@dataclass(frozen=True)
class GetStep(Step):
    key: Any

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return lookup(subject, self.key)

    def describe(self) -> str:
        return f"get({self.key!r})"


@dataclass(frozen=True)
class SetStep(Step):
    """Assign in place and return the same subject."""
    key: Any
    value: Any

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return assign(subject, self.key, self.value)

    def describe(self) -> str:
        return f"set({self.key!r}, {format_arg(self.value)})"


@dataclass(frozen=True)
class DeleteStep(Step):
    key: Any

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return remove(subject, self.key)

    def describe(self) -> str:
        return f"delete({self.key!r})"


# =============================================================================
# Call Steps
# =============================================================================

@dataclass(frozen=True)
class InvokeStep(Step):
    """Call a method (by name or function) on the subject."""
    selector: Selector
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return self.selector.call(subject, self.args, self.kwargs)

    def describe(self) -> str:
        rendered = format_args(self.args, self.kwargs)
        head = self.selector.describe()
        return f"invoke({head}, {rendered})" if rendered else f"invoke({head})"

    def __hash__(self):
        return hash((self.selector, self.args, tuple(sorted(self.kwargs.items()))))


@dataclass(frozen=True)
class ApplyArgsStep(Step):
    """Treat the subject as a callable and call it with fixed arguments."""
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return subject(*self.args, **self.kwargs)

    def describe(self) -> str:
        return f"call_with_args({format_args(self.args, self.kwargs)})"

    def __hash__(self):
        return hash((self.args, tuple(sorted(self.kwargs.items()))))


@dataclass(frozen=True)
class InstantiateStep(Step):
    cls: Type[Any]

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return self.cls(subject)

    def describe(self) -> str:
        return f"instantiate_as({format_arg(self.cls)})"


# =============================================================================
# Conditional Steps
# =============================================================================

@dataclass(frozen=True)
class DefaultToStep(Step):
    fallback: Any

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return subject if is_truthy(subject) else self.fallback

    def describe(self) -> str:
        return f"default_to({format_arg(self.fallback)})"


@dataclass(frozen=True)
class RunIfTruthyStep(Step):
    """
    Run the inner step only when the subject is truthy.

    A falsy subject is returned unchanged and the inner step is never
    executed, so `It.get('last').run_if_truthy(It.invoke('lower'))` is safe
    on records without a last name.
    """
    inner: Step

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        if not is_truthy(subject):
            return subject
        return self.inner.execute(subject, receiver)

    def describe(self) -> str:
        return f"run_if_truthy({chain_repr(self.inner)})"

    def children(self) -> Tuple[Step, ...]:
        return (self.inner,)


@dataclass(frozen=True)
class NegateStep(Step):
    inner: Step

    def execute(self, subject: Any, receiver: Any = None) -> bool:
        return not is_truthy(self.inner.execute(subject, receiver))

    def describe(self) -> str:
        if isinstance(self.inner, IdentityStep):
            return "negate()"
        return f"negate({chain_repr(self.inner)})"

    def children(self) -> Tuple[Step, ...]:
        return (self.inner,)


# =============================================================================
# Side Effect Steps
# =============================================================================

@dataclass(frozen=True)
class TapStep(Step):
    """Execute a side effect and pass the subject through unchanged."""
    inner: Step

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        self.inner.execute(subject, receiver)
        return subject

    def describe(self) -> str:
        return f"side_effect({chain_repr(self.inner)})"

    def children(self) -> Tuple[Step, ...]:
        return (self.inner,)


@dataclass(frozen=True)
class TraceStep(Step):
    """Log the subject on the trace logger and pass it through."""
    label: Optional[str] = None

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        logger = get_trace_logger()
        if self.label:
            logger.debug("%s: %r", self.label, subject)
        else:
            logger.debug("%r", subject)
        return subject

    def describe(self) -> str:
        return f"trace({self.label!r})" if self.label else "trace()"


# =============================================================================
# Sequence Steps
# =============================================================================

@dataclass(frozen=True)
class MapOverStep(Step):
    """Apply the inner step to each item, returning a new list."""
    inner: Step

    def execute(self, subject: Any, receiver: Any = None) -> list:
        return [self.inner.execute(item, receiver) for item in iter_items(subject)]

    def describe(self) -> str:
        if isinstance(self.inner, IdentityStep):
            return "map_over()"
        return f"map_over({chain_repr(self.inner)})"

    def children(self) -> Tuple[Step, ...]:
        return (self.inner,)


@dataclass(frozen=True)
class SelectWhereStep(Step):
    """Keep the items whose predicate is truthy.

    Lists (and any other iterable) give a new list; Arrow tables are
    filtered with a boolean mask so the schema survives an empty result.
    """
    predicate: Step

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        if is_arrow(subject):
            return self._arrow_filter(subject, receiver)
        return [item for item in subject if is_truthy(self.predicate.execute(item, receiver))]

    def _arrow_filter(self, table: pa.Table, receiver: Any) -> pa.Table:
        mask = [is_truthy(self.predicate.execute(row, receiver)) for row in table.to_pylist()]
        return table.filter(pa.array(mask, type=pa.bool_()))

    def describe(self) -> str:
        if isinstance(self.predicate, IdentityStep):
            return "select_where()"
        return f"select_where({chain_repr(self.predicate)})"

    def children(self) -> Tuple[Step, ...]:
        return (self.predicate,)


@dataclass(frozen=True)
class ReduceWithStep(Step):
    """Left fold without a seed; an empty subject raises TypeError.

    `method` names a method called on the accumulator (``acc.union(item)``)
    and takes the place of `reducer` when given.
    """
    reducer: Optional[Callable[[Any, Any], Any]] = None
    method: Optional[str] = None

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return functools.reduce(self._fold, iter_items(subject))

    def _fold(self, acc: Any, item: Any) -> Any:
        if self.method is not None:
            return ByName(self.method).call(acc, (item,), {})
        return self.reducer(acc, item)

    def describe(self) -> str:
        if self.method is not None:
            return f"reduce_with({self.method!r})"
        return f"reduce_with({format_arg(self.reducer)})"
