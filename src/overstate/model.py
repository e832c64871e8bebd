"""Model — the attribute namespace every store slice is built from."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterator

from overstate._props import Kind, kind_of


class Model:
    """A mutable namespace of state values and actions.

    State reads and writes go through attributes (``slice.count``,
    ``slice.count += 1``). Item access, ``in``, ``len()`` and iteration over
    keys are also supported. There are no public methods, so every name is
    free to be used as a state key. Keys that are not identifiers (ints,
    tuples, dunder names) are stored too, and read through item access.

    A Model compares equal to another Model or to a plain mapping holding
    equal keys and values.
    """

    def __init__(self, **values: Any) -> None:
        self.__dict__.update(values)

    def __getitem__(self, key: Any) -> Any:
        try:
            return self.__dict__[key]
        except KeyError:
            raise KeyError(key) from None

    def __setitem__(self, key: Any, value: Any) -> None:
        self.__dict__[key] = value

    def __delitem__(self, key: Any) -> None:
        try:
            del self.__dict__[key]
        except KeyError:
            raise KeyError(key) from None

    def __contains__(self, key: object) -> bool:
        return key in self.__dict__

    def __iter__(self) -> Iterator[Any]:
        return iter(self.__dict__)

    def __len__(self) -> int:
        return len(self.__dict__)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Model):
            return self.__dict__ == other.__dict__
        if isinstance(other, Mapping):
            return self.__dict__ == dict(other)
        return NotImplemented

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"Model({fields})"


def as_dict(value: Any) -> Any:
    """Plain nested-dict snapshot of a model, with actions left out.

    Non-structured values are returned as they are.
    """
    if isinstance(value, Model):
        items = vars(value).items()
    elif isinstance(value, Mapping):
        items = value.items()
    else:
        return value
    return {
        key: as_dict(item)
        for key, item in items
        if kind_of(item) is not Kind.ACTION
    }
