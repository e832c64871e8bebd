"""Deep merge with optional function proxying.

merge() copies every property of a source onto a target, recursing into
nested structured values. When a proxy factory is given, callables are not
copied as they are: each one is replaced by proxy_factory(fn, target), bound
to the slice it lands on.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Protocol

from overstate._props import Kind, kind_of, iter_props
from overstate.model import Model

ProxyFactory = Callable[[Callable, Any], Callable]


class MergeFn(Protocol):
    def __call__(self, target: Any, source: Any = None, proxy_factory: ProxyFactory | None = None) -> Any: ...


class InvalidMergeTarget(TypeError):
    """Raised when a merge target is not a structured value."""

    def __init__(self, target: Any) -> None:
        self.target = target
        super().__init__(
            f"Invalid merge target, expected a mapping or object, but got {target!r}"
        )


def merge(target: Any, source: Any = None, proxy_factory: ProxyFactory | None = None) -> Any:
    """Deep merge source into target, mutating and returning target.

    - Nested structured values are merged into target's existing entry, or
      into a fresh empty one ({} under a mapping, a Model otherwise) when the
      entry is missing or None.
    - Callables become proxy_factory(fn, target) when a factory is given.
    - Everything else (scalars, lists, tuples, sets) overwrites by reference.

    A source of None leaves target unchanged. Raises InvalidMergeTarget when
    target, or a nested entry being merged into, is not structured.

    Usage:
        merge({"a": 1, "b": {"x": 1}}, {"b": {"y": 2}, "c": 3})
        # {"a": 1, "b": {"x": 1, "y": 2}, "c": 3}
    """
    if kind_of(target) is not Kind.STRUCT:
        raise InvalidMergeTarget(target)

    for key, value in iter_props(source):
        kind = kind_of(value)
        if kind is Kind.STRUCT:
            nested = _get(target, key)
            if nested is None:
                nested = {} if isinstance(target, Mapping) else Model()
                _put(target, key, nested)
            merge(nested, value, proxy_factory)
        elif kind is Kind.ACTION and proxy_factory is not None:
            _put(target, key, proxy_factory(value, target))
        else:
            _put(target, key, value)

    return target


def _get(target: Any, key: Any) -> Any:
    if isinstance(target, Mapping):
        return target.get(key)
    if isinstance(target, Model):
        return vars(target).get(key)
    return getattr(target, key, None)


def _put(target: Any, key: Any, value: Any) -> None:
    if isinstance(target, (MutableMapping, Model)):
        target[key] = value
    else:
        setattr(target, key, value)
