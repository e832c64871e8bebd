"""Actions — model methods bound to the slice they were declared on.

The store never exposes a source method directly. Each one is wrapped in an
Action that calls it with the slice as its first argument, then merges what
it returns back into that slice:

- a structured result (dict, Model, object) is merged and listeners fire;
- a future or task result is chained: the action returns a new future and
  the resolved value is merged, and listeners fire, as soon as it settles,
  whether or not the caller awaits it;
- any other awaitable (a coroutine) makes the action return a coroutine
  which, once awaited, merges the resolved value and fires listeners;
- anything else (None, scalars, lists) is returned untouched and nothing
  fires. Methods that assign to the slice directly use this to opt out.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable

from overstate._props import is_structured

Commit = Callable[[Any, Any, "Action"], Any]


class Action:
    """Callable proxy for a model method.

    Usage:
        store = create_store({
            "count": 0,
            "add": lambda self, n: {"count": self.count + n},
        })
        store.model.add(5)   # {"count": 5}
        store.model.count    # 5
    """

    def __init__(self, fn: Callable, slice_: Any, commit: Commit) -> None:
        if isinstance(fn, Action):
            fn = fn._fn
        self._fn = fn
        self._slice = slice_
        self._commit = commit
        self.__name__ = getattr(fn, "__name__", type(fn).__name__)
        self.__qualname__ = getattr(fn, "__qualname__", self.__name__)
        self.__doc__ = getattr(fn, "__doc__", None)

    @property
    def slice(self) -> Any:
        """The model slice this action reads and merges into."""
        return self._slice

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        result = self._fn(self._slice, *args, **kwargs)
        if asyncio.isfuture(result):
            return self._chain(result)
        if inspect.isawaitable(result):
            return self._settle(result)
        if is_structured(result):
            self._commit(self._slice, result, self)
        return result

    async def _settle(self, pending: Any) -> Any:
        value = await pending
        self._commit(self._slice, value, self)
        return value

    def _chain(self, pending: asyncio.Future) -> asyncio.Future:
        chained = pending.get_loop().create_future()

        def _settled(fut: asyncio.Future) -> None:
            if fut.cancelled():
                chained.cancel()
                return
            error = fut.exception()
            if error is not None:
                if not chained.done():
                    chained.set_exception(error)
                return
            value = fut.result()
            if chained.done():
                # Caller cancelled the chained future; the merge still runs.
                self._commit(self._slice, value, self)
                return
            try:
                self._commit(self._slice, value, self)
            except Exception as exc:
                chained.set_exception(exc)
            else:
                chained.set_result(value)

        pending.add_done_callback(_settled)
        return chained

    def __repr__(self) -> str:
        return f"Action({self.__qualname__})"
