"""Core interfaces for the adapter pattern.

These interfaces define the contract every dialect adapter implements so the
dispatcher and introspector never depend on a concrete driver.
"""

from .database import (
    ColumnInfo,
    ColumnSpec,
    ConnectionDescriptor,
    IDialectAdapter,
    IDialectSession,
    Row,
    StatementResult,
    TableInfo,
    make_row,
)

__all__ = [
    "ColumnInfo",
    "ColumnSpec",
    "ConnectionDescriptor",
    "IDialectAdapter",
    "IDialectSession",
    "Row",
    "StatementResult",
    "TableInfo",
    "make_row",
]
