"""Store — a model materialized from a source, plus change listeners.

create_store() deep-copies a source (dict or object) into a private Model.
Every method found on the source, own or inherited, becomes an Action bound
to the slice it was declared on. Calling an action merges its result back
into that slice and notifies listeners.

Listeners are called as listener(model). Subscribing with details=True
calls listener(model, changes, action) instead: changes is the merged delta
(None for a bare update()) and action is the originating Action (None for
Store.set() and update()).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, TypedDict

from overstate._props import is_structured
from overstate.action import Action
from overstate.merge import MergeFn, merge
from overstate.model import Model

logger = logging.getLogger("overstate.store")

Listener = Callable[[Model], None]
DetailedListener = Callable[[Model, Any, "Action | None"], None]
Disposer = Callable[[], None]


class StoreOptions(TypedDict, total=False):
    merge: MergeFn


class Store:
    """Model container with merge-on-return actions and listeners."""

    def __init__(self, source: object = None, options: Mapping | None = None) -> None:
        options = options or {}
        self._merge: MergeFn = options.get("merge") or merge
        self._model = Model()
        self._listeners: list[tuple[Callable, bool]] = []
        self._merge(self._model, source, self._proxy)
        logger.debug("Materialized store with %d top-level keys", len(self._model))

    @property
    def model(self) -> Model:
        """The live model. Mutate it through actions, set() or update()."""
        return self._model

    def set(self, changes: Any) -> Any:
        """Merge changes into the model root and notify. Returns changes."""
        return self._set(self._model, changes)

    def subscribe(self, listener: Listener | DetailedListener, *, details: bool = False) -> Disposer:
        """Register a listener. Returns a function that removes it.

        With details=True the listener also receives the merged changes and
        the originating Action.
        """
        entry = (listener, details)
        self._listeners.append(entry)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(entry)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def update(self) -> None:
        """Notify listeners without merging, after imperative mutations."""
        self._notify(None, None)

    def _proxy(self, fn: Callable, slice_: Any) -> Action:
        return Action(fn, slice_, self._set)

    def _set(self, slice_: Any, changes: Any, action: Action | None = None) -> Any:
        if is_structured(changes):
            self._merge(slice_, changes, self._proxy)
        self._notify(changes, action)
        return changes

    def _notify(self, changes: Any, action: Action | None) -> None:
        # Snapshot: listeners removed mid-round still get this round.
        listeners = list(self._listeners)
        logger.debug(
            "Notifying %d listener(s) after %s",
            len(listeners), action.__name__ if action is not None else "update",
        )
        for listener, details in listeners:
            if details:
                listener(self._model, changes, action)
            else:
                listener(self._model)

    def __repr__(self) -> str:
        return f"Store({self._model!r}, listeners={len(self._listeners)})"


def create_store(source: object = None, options: StoreOptions | None = None) -> Store:
    """Create a Store whose model mirrors source.

    options["merge"] substitutes the merge function; it is called as
    merge(target, source, proxy_factory) and must honour the factory.

    Usage:
        class Counter:
            def __init__(self):
                self.count = 0

            def up(self):
                return {"count": self.count + 1}

        store = create_store({"counter": Counter()})
        store.subscribe(lambda model, changes, action: print(changes), details=True)
        store.model.counter.up()   # prints {'count': 1}
    """
    return Store(source, options)
