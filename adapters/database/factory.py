"""Dialect adapter factory."""

from core.dialects import Dialect
from core.errors import UnsupportedError
from core.interfaces import ConnectionDescriptor, IDialectAdapter

from .libsql import LibsqlAdapter
from .mysql import MySQLAdapter
from .postgres import PostgresAdapter

# Registry of adapter classes by dialect
ADAPTER_REGISTRY: dict[Dialect, type[IDialectAdapter]] = {
    Dialect.POSTGRES: PostgresAdapter,
    Dialect.MYSQL: MySQLAdapter,
    Dialect.SQLITE_NETWORK: LibsqlAdapter,
}


def get_adapter(descriptor: ConnectionDescriptor) -> IDialectAdapter:
    """Get a fresh adapter for a connection descriptor.

    Args:
        descriptor: Connection URL and dialect.

    Returns:
        Request-scoped IDialectAdapter instance.

    Raises:
        UnsupportedError: If no adapter is registered for the dialect.
    """
    adapter_class = ADAPTER_REGISTRY.get(descriptor.dialect)
    if adapter_class is None:
        raise UnsupportedError(f"Unsupported database type: {descriptor.dialect}")
    return adapter_class(descriptor.url)


def register_adapter(dialect: Dialect, adapter_class: type[IDialectAdapter]) -> None:
    """Register an adapter class for a dialect."""
    ADAPTER_REGISTRY[dialect] = adapter_class
