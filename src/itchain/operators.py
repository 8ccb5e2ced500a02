"""
itchain Operators - binary operators and comparators

Binary operators take the running value as their left-hand side:

    It.sub(1)(10)      # 10 - 1 == 9
    It.get('age').gte(18)

Called with two operands they evaluate immediately, and with none they
return the plain binary function (handy as a reduce_with step):

    It.sub(10, 1)            # 9
    It.reduce_with(It.add()) # sum without a seed

compare_by() builds the one non-pipeline callable shape in the package: a
two-argument comparator returning -1, 0 or 1.
"""

from __future__ import annotations

import functools
import operator
from dataclasses import dataclass
from typing import Any, Callable, Dict

from .steps import IdentityStep, Step, chain_repr, format_arg, unary_step


# =============================================================================
# Binary Operators
# =============================================================================

def strict_eq(a: Any, b: Any) -> bool:
    """Equality that also requires identical types (1 vs 1.0 vs True differ)."""
    return type(a) is type(b) and a == b


def strict_neq(a: Any, b: Any) -> bool:
    return not strict_eq(a, b)


BINARY_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    "eq": operator.eq,
    "neq": operator.ne,
    "strict_eq": strict_eq,
    "strict_neq": strict_neq,
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
    "add": operator.add,
    "sub": operator.sub,
    "mul": operator.mul,
    "div": operator.truediv,
}


@dataclass(frozen=True)
class BinaryOperatorStep(Step):
    """
    `subject OP operand` with the subject always on the left.

    ::: This is-in-layer Core-Layer.
    ::: This is a step.
    ::: This is stateless.
    """
    name: str
    operand: Any

    def execute(self, subject: Any, receiver: Any = None) -> Any:
        return BINARY_OPERATORS[self.name](subject, self.operand)

    def describe(self) -> str:
        return f"{self.name}({format_arg(self.operand)})"


# =============================================================================
# Comparators
# =============================================================================

def _compare(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


@dataclass(frozen=True)
class Comparator:
    """
    Two-argument ordering function over keys extracted by a step.

    Comparator(a, b) is -1, 0 or 1. It is not a Pipeline: sort utilities
    that want a key function can use `sort_key` instead.

    Example:
        by_age = compare_by("age")
        sorted(people, key=by_age.sort_key)
        sorted(people, key=by_age.reverse().sort_key)
    """
    key: Step
    descending: bool = False

    def __call__(self, a: Any, b: Any) -> int:
        result = _compare(self.key.execute(a), self.key.execute(b))
        return -result if self.descending else result

    def reverse(self) -> "Comparator":
        """The same ordering, negated."""
        return Comparator(self.key, not self.descending)

    @property
    def sort_key(self) -> Callable[[Any], Any]:
        """Key wrapper for sorted()/list.sort()."""
        return functools.cmp_to_key(self)

    def __repr__(self) -> str:
        key = "" if isinstance(self.key, IdentityStep) else chain_repr(self.key)
        text = f"compare_by({key})"
        return f"{text}.reverse()" if self.descending else text


def compare_by(key: Any = None) -> Comparator:
    """
    Build a comparator on the keys extracted by `key`.

    Args:
        key: A property name, a callable or a Pipeline; omitted compares the
            items themselves

    Returns:
        Comparator usable with functools.cmp_to_key
    """
    return Comparator(unary_step(key, "compare_by"))
