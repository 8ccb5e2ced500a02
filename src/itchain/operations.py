"""
itchain Operations - the chainable operation set

Chainable is the fixed capability set every Pipeline implements. Each
operation builds one Step from its arguments and appends it through
compose(); that is the only primitive a concrete class has to provide.

Because the set is inherited rather than copied onto functions, every
pipeline produced by an operation is chainable again:

    It.get('last').run_if_truthy(It.invoke('lower')).default_to('none')
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Type, Union

from .operators import BINARY_OPERATORS, BinaryOperatorStep
from .selectors import to_selector
from .steps import (
    ApplyArgsStep,
    DefaultToStep,
    DeleteStep,
    GetStep,
    InstantiateStep,
    InvokeStep,
    MapOverStep,
    NegateStep,
    ReduceWithStep,
    RunIfTruthyStep,
    SelectWhereStep,
    SetStep,
    Step,
    StepSource,
    TapStep,
    TraceStep,
    as_step,
    unary_step,
)

FnOrKey = Union[str, Callable[[Any], Any], Step, StepSource, None]


class Chainable(StepSource):
    """
    Mixin providing the operation library in terms of compose().

    ::: This is-in-layer Core-Layer.
    ::: This is a capability.
    ::: This is stateless.
    """

    @abstractmethod
    def compose(self, next_step: Any) -> "Chainable":
        """Return a new chainable with `next_step` appended."""
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Properties: get, set, delete
    # -------------------------------------------------------------------------

    def get(self, key: Any) -> "Chainable":
        """Read a key (mappings), attribute (str keys) or index."""
        return self.compose(GetStep(key))

    def set(self, key: Any, value: Any) -> "Chainable":
        """Assign in place; the result is the subject itself, so it chains."""
        return self.compose(SetStep(key, value))

    def delete(self, key: Any) -> "Chainable":
        """Remove a key or attribute if present; the result is the subject."""
        return self.compose(DeleteStep(key))

    # -------------------------------------------------------------------------
    # Calling: invoke, post, apply_args, call_with_args
    # -------------------------------------------------------------------------

    def invoke(self, name_or_fn: Union[str, Callable[..., Any]], *args: Any, **kwargs: Any) -> "Chainable":
        """
        Call a method on the subject.

        A string names the method (``It.invoke('split', ',')``); a function is
        called with the subject as first argument (``It.invoke(str.split, ',')``).
        """
        return self.compose(InvokeStep(to_selector(name_or_fn), tuple(args), dict(kwargs)))

    def post(self, name_or_fn: Union[str, Callable[..., Any]], args: Sequence[Any] = ()) -> "Chainable":
        """invoke() with the arguments given as one sequence."""
        return self.compose(InvokeStep(to_selector(name_or_fn), tuple(args)))

    def apply_args(self, args: Sequence[Any] = (), kwargs: Optional[Dict[str, Any]] = None) -> "Chainable":
        """Call the subject itself with the given arguments."""
        return self.compose(ApplyArgsStep(tuple(args), dict(kwargs or {})))

    def call_with_args(self, *args: Any, **kwargs: Any) -> "Chainable":
        return self.apply_args(args, kwargs)

    # -------------------------------------------------------------------------
    # Conditionals: default_to, run_if_truthy, negate
    # -------------------------------------------------------------------------

    def default_to(self, fallback: Any) -> "Chainable":
        """Replace a falsy subject with `fallback`."""
        return self.compose(DefaultToStep(fallback))

    def run_if_truthy(self, fn_or_key: FnOrKey) -> "Chainable":
        """Apply `fn_or_key` only to truthy subjects; falsy ones pass through."""
        return self.compose(RunIfTruthyStep(unary_step(fn_or_key, "run_if_truthy")))

    def negate(self, fn_or_key: FnOrKey = None) -> "Chainable":
        """Boolean not of `fn_or_key` applied to the subject (identity if omitted)."""
        return self.compose(NegateStep(unary_step(fn_or_key, "negate")))

    # -------------------------------------------------------------------------
    # Side effects and construction
    # -------------------------------------------------------------------------

    def side_effect(self, fn: Any) -> "Chainable":
        """Call `fn` with the subject, ignore its result, pass the subject on."""
        return self.compose(TapStep(as_step(fn)))

    def trace(self, label: Optional[str] = None) -> "Chainable":
        """Log the subject on the ``itchain.trace`` logger at DEBUG level."""
        return self.compose(TraceStep(label))

    def instantiate_as(self, cls: Type[Any]) -> "Chainable":
        """Construct ``cls(subject)``."""
        return self.compose(InstantiateStep(cls))

    # -------------------------------------------------------------------------
    # Sequences: map_over, pluck, select_where, reduce_with
    # -------------------------------------------------------------------------

    def map_over(self, fn_or_key: FnOrKey = None) -> "Chainable":
        """New list with `fn_or_key` applied to every item."""
        return self.compose(MapOverStep(unary_step(fn_or_key, "map_over")))

    def pluck(self, key: Any) -> "Chainable":
        return self.compose(MapOverStep(GetStep(key)))

    def select_where(self, fn_or_key: FnOrKey = None) -> "Chainable":
        """Items for which `fn_or_key` is truthy (identity if omitted)."""
        return self.compose(SelectWhereStep(unary_step(fn_or_key, "select_where")))

    def reduce_with(self, fn_or_name: Union[str, Callable[[Any, Any], Any]]) -> "Chainable":
        """
        Left fold without a seed.

        A string names a method of the accumulator: ``reduce_with('union')``
        folds with ``acc.union(item)``.
        """
        if isinstance(fn_or_name, str):
            return self.compose(ReduceWithStep(method=fn_or_name))
        return self.compose(ReduceWithStep(reducer=to_selector(fn_or_name).function))

    # -------------------------------------------------------------------------
    # Binary operators
    # -------------------------------------------------------------------------

    def _binary(self, name: str, operands: tuple) -> Any:
        if len(operands) == 1:
            return self.compose(BinaryOperatorStep(name, operands[0]))
        if len(operands) == 2:
            return BINARY_OPERATORS[name](*operands)
        if not operands:
            return BINARY_OPERATORS[name]
        raise TypeError(f"{name}() takes at most 2 operands ({len(operands)} given)")

    def eq(self, *operands: Any) -> Any:
        return self._binary("eq", operands)

    def neq(self, *operands: Any) -> Any:
        return self._binary("neq", operands)

    def strict_eq(self, *operands: Any) -> Any:
        """Like eq(), but the types must be identical as well."""
        return self._binary("strict_eq", operands)

    def strict_neq(self, *operands: Any) -> Any:
        return self._binary("strict_neq", operands)

    def gt(self, *operands: Any) -> Any:
        return self._binary("gt", operands)

    def gte(self, *operands: Any) -> Any:
        return self._binary("gte", operands)

    def lt(self, *operands: Any) -> Any:
        return self._binary("lt", operands)

    def lte(self, *operands: Any) -> Any:
        return self._binary("lte", operands)

    def add(self, *operands: Any) -> Any:
        return self._binary("add", operands)

    def sub(self, *operands: Any) -> Any:
        return self._binary("sub", operands)

    def mul(self, *operands: Any) -> Any:
        return self._binary("mul", operands)

    def div(self, *operands: Any) -> Any:
        return self._binary("div", operands)

    # -------------------------------------------------------------------------
    # Aliases
    # -------------------------------------------------------------------------

    put = set
    del_ = delete
    send = invoke
    fapply = apply_args
    fcall = call_with_args
    or_ = default_to
    maybe = run_if_truthy
    not_ = negate
    tap = side_effect
    instantiate = instantiate_as
    splat = map_over
    map = map_over
    filter = select_where
    reduce = reduce_with


OPERATION_NAMES: Tuple[str, ...] = tuple(
    name for name, value in vars(Chainable).items()
    if callable(value) and not name.startswith("_") and name not in ("compose", "as_step")
)
