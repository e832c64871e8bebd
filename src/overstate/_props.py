"""Value kinds and property enumeration — how a source is read.

Every value met during a merge is one of three kinds:

- STRUCT: a mapping or an object with an instance __dict__, merged key by key.
- ACTION: a callable (not a class), proxied when a proxy factory is given.
- VALUE: everything else (scalars, lists, tuples, sets, classes, modules,
  enum members), copied by reference.

The kind depends only on the value's type, so it is resolved once per type.
"""

from __future__ import annotations

import enum
import types
import weakref
from collections.abc import Mapping
from typing import Any, Iterator


class Kind(enum.Enum):
    STRUCT = "struct"
    ACTION = "action"
    VALUE = "value"


_PLAIN_VALUES = (
    str, bytes, bytearray, int, float, complex, bool,
    list, tuple, set, frozenset, type, types.ModuleType, enum.Enum,
)

# Classes whose attributes are interpreter or typing machinery.
_INTERNAL_MODULES = frozenset({"builtins", "abc", "typing"})

# Bookkeeping that ABCMeta and typing write into user classes.
_CLASS_INTERNALS = frozenset({"_abc_impl", "_is_protocol", "_is_runtime_protocol"})

# Weak keys: dynamically created classes are still collectable.
_kinds: weakref.WeakKeyDictionary[type, Kind] = weakref.WeakKeyDictionary()


def _kind_for_type(cls: type) -> Kind:
    if cls is type(None) or issubclass(cls, _PLAIN_VALUES):
        return Kind.VALUE
    if issubclass(cls, Mapping):
        return Kind.STRUCT
    names = _mro_names(cls)
    if "__call__" in names:
        return Kind.ACTION
    if "__dict__" in names:
        return Kind.STRUCT
    return Kind.VALUE


def _mro_names(cls: type) -> set[str]:
    names: set[str] = set()
    for base in cls.__mro__:
        if base is object:
            continue
        names.update(vars(base))
    return names


def kind_of(value: Any) -> Kind:
    """Classify a value for merging."""
    cls = type(value)
    kind = _kinds.get(cls)
    if kind is None:
        kind = _kinds[cls] = _kind_for_type(cls)
    return kind


def is_structured(value: Any) -> bool:
    return kind_of(value) is Kind.STRUCT


def is_reserved(key: object) -> bool:
    """Dunder names on objects are interpreter machinery, never model state."""
    return isinstance(key, str) and key.startswith("__") and key.endswith("__")


def iter_props(source: Any) -> Iterator[tuple[Any, Any]]:
    """Yield (key, value) for every own and inherited property of source.

    Mappings and Models are plain data: every key is yielded as it is,
    dunder names and non-string keys included.

    For other objects, instance attributes come first, in declaration order,
    then each class along the MRO contributes the names it defines itself.
    A name produced by a shallower level is not revisited. Dunder names,
    classes from builtins/abc/typing, and the bookkeeping ABCMeta and typing
    store on user classes (_abc_impl, _is_protocol) are skipped.

    Plain functions defined on a class are yielded unbound, ready to be
    bound to a model slice. staticmethod and classmethod entries are
    skipped. Other descriptors (property, ...) are read from the source.
    """
    from overstate.model import Model

    if source is None:
        return
    if isinstance(source, Mapping):
        yield from source.items()
        return
    if isinstance(source, Model):
        yield from vars(source).items()
        return

    seen: set[str] = set()
    for key, value in vars(source).items():
        if is_reserved(key):
            continue
        seen.add(key)
        yield key, value

    for cls in type(source).__mro__:
        if cls is object or cls.__module__ in _INTERNAL_MODULES:
            continue
        for key, value in vars(cls).items():
            if key in seen or is_reserved(key) or key in _CLASS_INTERNALS:
                continue
            seen.add(key)
            if isinstance(value, (staticmethod, classmethod)):
                continue
            if isinstance(value, types.FunctionType):
                yield key, value
            elif hasattr(type(value), "__get__"):
                yield key, getattr(source, key)
            else:
                yield key, value


def prop_names(source: Any) -> list:
    """List the keys iter_props() would produce, in order."""
    return [key for key, _ in iter_props(source)]
