"""
Selectors and key access.

A method selector is a tagged variant resolved once, when a step is built:

- ByName("upper"): look the method up on the subject
- ByFunction(str.upper): call the function with the subject as first argument

Key access follows one rule everywhere (get/set/delete): mappings are
indexed, string keys on any other object are attributes, and any other key
indexes the subject (lists, tuples, ...).
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any, Callable, Union

from .exceptions import InvalidSelectorError


# =============================================================================
# Key access
# =============================================================================

def lookup(subject: Any, key: Any) -> Any:
    """Read `key` from `subject`. Faults propagate unchanged."""
    if isinstance(subject, Mapping):
        return subject[key]
    if isinstance(key, str):
        return getattr(subject, key)
    return subject[key]


def assign(subject: Any, key: Any, value: Any) -> Any:
    """Write `key` on `subject` in place and return the subject."""
    if isinstance(subject, MutableMapping):
        subject[key] = value
    elif isinstance(key, str):
        setattr(subject, key, value)
    else:
        subject[key] = value
    return subject


def remove(subject: Any, key: Any) -> Any:
    """Remove `key` from `subject` if present and return the subject."""
    if isinstance(subject, MutableMapping):
        subject.pop(key, None)
    elif isinstance(key, str):
        if hasattr(subject, key):
            delattr(subject, key)
    else:
        del subject[key]
    return subject


# =============================================================================
# Method selectors
# =============================================================================

@dataclass(frozen=True)
class ByName:
    """Select a method by name on the subject.

    ::: This is-in-layer Core-Layer.
    ::: This is a value-object.
    """
    name: str

    def resolve(self, subject: Any) -> Callable[..., Any]:
        # Mapping subjects may hold callables under the name (dict of handlers)
        if isinstance(subject, Mapping) and self.name in subject:
            return subject[self.name]
        return getattr(subject, self.name)

    def call(self, subject: Any, args: tuple, kwargs: dict) -> Any:
        return self.resolve(subject)(*args, **kwargs)

    def describe(self) -> str:
        return repr(self.name)


@dataclass(frozen=True)
class ByFunction:
    """Call a function with the subject bound as its first argument.

    ::: This is-in-layer Core-Layer.
    ::: This is a value-object.
    """
    function: Callable[..., Any]

    def call(self, subject: Any, args: tuple, kwargs: dict) -> Any:
        return self.function(subject, *args, **kwargs)

    def describe(self) -> str:
        return describe_callable(self.function)


Selector = Union[ByName, ByFunction]


def to_selector(name_or_fn: Union[str, Callable[..., Any], Selector]) -> Selector:
    """Resolve a method name or callable into a Selector."""
    if isinstance(name_or_fn, (ByName, ByFunction)):
        return name_or_fn
    if isinstance(name_or_fn, str):
        return ByName(name_or_fn)
    if callable(name_or_fn):
        return ByFunction(name_or_fn)
    raise InvalidSelectorError(
        f"Method selector must be a name or a callable, got {type(name_or_fn).__name__}"
    )


def describe_callable(fn: Any) -> str:
    """Short human readable label for a callable."""
    name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None)
    if name is None:
        return repr(fn)
    return name
