"""Services layer: action dispatch and schema introspection."""

from .dispatcher import Action, ActionDispatcher, ActionPayload
from .introspector import fetch_rows, list_tables

__all__ = [
    "Action",
    "ActionDispatcher",
    "ActionPayload",
    "fetch_rows",
    "list_tables",
]
