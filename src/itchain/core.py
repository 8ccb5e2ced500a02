"""
itchain Core - Pipeline, roots and composition

This module provides the composition engine:

- Pipeline: an immutable, chainable callable wrapping a single Step
- It: the identity root, ``It(x) is x``
- Self: the receiver root, returning the receiver instead of the subject
- decorate / compose: turn any callable into a Pipeline, compose two steps
- extend: derive a Pipeline class carrying extra operations

Every operation returns a new Pipeline of the same class, so chains are
unbounded:

    first_initial = It.get('first').get(0).invoke('upper')
    sorted(people, key=It.get('last').default_to(''))

Receiver pipelines bind like methods when stored on a class:

    class Person:
        first_name = Self.get('info').get('first')

    Person(info).first_name()
"""

from __future__ import annotations

import functools
import types
from dataclasses import dataclass
from typing import Any, Callable, Tuple, Type, TypeVar

from .catpy import Functor
from .exceptions import InvalidStepError, OperationConflictError
from .logging_config import get_trace_logger
from .operations import Chainable
from .steps import (
    ComposedStep,
    FunctionStep,
    IdentityStep,
    ReceiverStep,
    Step,
    StepSource,
    as_step,
    chain_repr,
    flatten,
)

P = TypeVar("P", bound="Pipeline")


# =============================================================================
# Pipeline
# =============================================================================

@dataclass(frozen=True, repr=False)
class Pipeline(Chainable, Functor[Any]):
    """
    A composable, immutable transformation of a subject under a receiver.

    Calling a pipeline runs its step:

        pipeline(subject)                   # receiver None
        pipeline(subject, receiver=obj)
        pipeline.call(obj)                  # receiver only, subject None

    Pipeline is a Functor where fmap(f) == compose(f):
      1) Identity:     p.fmap(identity)(x)        == p(x)
      2) Composition:  p.fmap(f).fmap(g)(x)       == g(f(p(x)))

    ::: This is-in-layer Core-Layer.
    ::: This is a functor.
    ::: This is stateless.
    """
    step: Step

    # -------------------------------------------------------------------------
    # Roots
    # -------------------------------------------------------------------------

    @classmethod
    def root(cls: Type[P]) -> P:
        """The identity pipeline of this class."""
        return cls(IdentityStep())

    @classmethod
    def self_root(cls: Type[P]) -> P:
        """The receiver pipeline of this class."""
        return cls(ReceiverStep())

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def compose(self: P, next_step: Any) -> P:
        """
        Append `next_step` (a Step, a Pipeline or a plain callable).

        The receiver this pipeline runs under is handed to `next_step` as
        well; plain callables only see the subject.
        """
        return type(self)(ComposedStep(self.step, as_step(next_step)))

    def fmap(self: P, f: Callable[[Any], Any]) -> P:
        """Functor.fmap: map `f` over the pipeline output."""
        return self.compose(f)

    def as_step(self) -> Step:
        return self.step

    def steps(self) -> Tuple[Step, ...]:
        """The flat, ordered leaf steps of this pipeline."""
        return flatten(self.step)

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def __call__(self, *args: Any, receiver: Any = None, **kwargs: Any) -> Any:
        """
        Run the pipeline on a subject.

        A pipeline whose first step is a plain function (see decorate())
        hands every argument to that function, so ``decorate(operator.add)(1, 2)``
        behaves like ``operator.add(1, 2)``; the remaining steps then run on its
        result. Any other pipeline takes at most one subject.
        """
        head, *rest = flatten(self.step)
        if isinstance(head, FunctionStep):
            result = head.fn(*args, **kwargs)
            for step in rest:
                result = step.execute(result, receiver)
            return result
        if len(args) > 1 or kwargs:
            raise TypeError(
                f"{self!r} takes a single subject; pass the receiver as receiver="
            )
        return self.step.execute(args[0] if args else None, receiver)

    def call(self, receiver: Any, subject: Any = None) -> Any:
        """Run with an explicit receiver."""
        return self.step.execute(subject, receiver)

    def bound_to(self, receiver: Any) -> Callable[..., Any]:
        """A callable running this pipeline with `receiver` fixed."""
        return functools.partial(self.call, receiver)

    def __get__(self, instance: Any, owner: Any = None) -> Any:
        # Stored on a class, a pipeline binds like a method.
        if instance is None:
            return self
        return self.bound_to(instance)

    def __repr__(self) -> str:
        return chain_repr(self.step)


# =============================================================================
# Roots and primitives
# =============================================================================

It = Pipeline.root()
Self = Pipeline.self_root()


def self_context() -> Pipeline:
    """The receiver pipeline: returns the receiver, ignoring the subject."""
    return Self


def decorate(fn: Callable[[Any], Any]) -> Pipeline:
    """
    Give `fn` the chainable operation set.

    Calling the returned pipeline calls `fn` with the same arguments, so its
    call behaviour is unchanged; chained steps run on the result. Inside a
    composition the function receives the subject only. Pipelines are
    returned unchanged.
    """
    if isinstance(fn, Pipeline):
        return fn
    if isinstance(fn, (Step, StepSource)):
        return Pipeline(as_step(fn))
    if not callable(fn):
        raise InvalidStepError(f"Cannot decorate a non-callable {type(fn).__name__}")
    return Pipeline(FunctionStep(fn))


def compose(step_a: Any, step_b: Any) -> Pipeline:
    """
    h(x, receiver=r) == step_b(step_a(x, receiver=r), receiver=r)

    Both sides run under the same receiver.
    """
    return Pipeline(ComposedStep(as_step(step_a), as_step(step_b)))


# =============================================================================
# Extension
# =============================================================================

def extend(name: str = "ExtendedPipeline", base: Type[Pipeline] = Pipeline,
           **factories: Callable[..., Any]) -> Type[Pipeline]:
    """
    Create a Pipeline subclass with additional chainable operations.

    Each factory receives the operation's arguments and returns the step to
    append (a Step, a Pipeline or a plain callable). `base` is never
    modified; pipelines built from the new class keep the new class.

    Example:
        Text = extend("Text", words=lambda: It.invoke("split"))
        Text.root().get("title").words()({"title": "a b"})   # ['a', 'b']

    Raises:
        OperationConflictError: if a name already exists on `base`
    """
    logger = get_trace_logger()
    namespace = {}
    for op_name, factory in factories.items():
        if hasattr(base, op_name):
            raise OperationConflictError(
                f"Operation {op_name!r} already exists on {base.__name__}"
            )
        namespace[op_name] = _make_operation(op_name, factory)
        logger.debug("Registered operation %s on %s", op_name, name)

    return types.new_class(name, (base,), exec_body=lambda ns: ns.update(namespace))


def _make_operation(op_name: str, factory: Callable[..., Any]) -> Callable[..., Any]:
    def operation(self, *args: Any, **kwargs: Any):
        return self.compose(factory(*args, **kwargs))

    operation.__name__ = op_name
    operation.__qualname__ = op_name
    operation.__doc__ = factory.__doc__
    return operation
