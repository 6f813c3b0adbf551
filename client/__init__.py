"""Client-side state: edit sessions, persistence and the API client."""

from .api_client import ApiError, DbAdminApiClient
from .models import Column, Connection, EditSession, Table
from .persistence import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from .store import STORAGE_KEYS, DatabaseStore, create_store

__all__ = [
    "ApiError",
    "DbAdminApiClient",
    "Column",
    "Connection",
    "EditSession",
    "Table",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "STORAGE_KEYS",
    "DatabaseStore",
    "create_store",
]
