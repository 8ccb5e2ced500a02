"""
catpy.py: Category-theory-inspired foundations for itchain.

This module provides the small functional vocabulary the rest of the
package is built on:
- Functor typeclass (Pipeline is a Functor over its output)
- Helpers: identity, is_truthy
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")

# ---------------------------------------------------------------------------
# Core typeclasses
# ---------------------------------------------------------------------------

class Functor(ABC, Generic[T]):
    """
    A structure that supports mapping a function over the values it produces.

    Laws (for all f: a->b, g: b->c):
      1) Identity:     fmap(id)      == id
      2) Composition:  fmap(g)∘fmap(f) == fmap(g∘f)

    ::: This is-in-layer Core-Layer.
    ::: This is a type-class.
    ::: This is stateless.
    """

    @abstractmethod
    def fmap(self, f: Callable[[T], U]) -> "Functor[U]":
        """Map a pure function over the structure."""
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def identity(x: T) -> T:
    """Identity function."""
    return x


def is_truthy(value: Any) -> bool:
    """Python truthiness, except that float NaN counts as falsy."""
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)
