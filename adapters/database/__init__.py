"""Dialect adapter implementations.

PostgreSQL and MySQL run through SQLAlchemy async engines (asyncpg,
aiomysql); SQLite-over-network uses the libsql client.
"""

from .factory import ADAPTER_REGISTRY, get_adapter, register_adapter
from .libsql import LibsqlAdapter
from .mysql import MySQLAdapter
from .postgres import PostgresAdapter

__all__ = [
    "ADAPTER_REGISTRY",
    "get_adapter",
    "register_adapter",
    "LibsqlAdapter",
    "MySQLAdapter",
    "PostgresAdapter",
]
