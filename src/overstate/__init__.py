"""Overstate: a minimal reactive state container for Python."""

from importlib.metadata import version as _version

__version__ = _version("overstate")

from overstate.model import Model, as_dict
from overstate.merge import merge, InvalidMergeTarget
from overstate.action import Action
from overstate.store import Store, StoreOptions, create_store

__all__ = [
    "Model",
    "as_dict",
    "merge",
    "InvalidMergeTarget",
    "Action",
    "Store",
    "StoreOptions",
    "create_store",
]
