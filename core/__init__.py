"""Core configuration, dialect vocabulary and error types.

- Settings: Application configuration
- Dialects: Supported engines and identifier guards
- Errors: Exceptions mapped to HTTP statuses by the API layer
"""

from .config import Settings, settings
from .dialects import Dialect
from .errors import (
    DatabaseConnectionError,
    DbAdminError,
    FormatError,
    StatementError,
    UnsupportedError,
    ValidationError,
)

__all__ = [
    # Configuration
    "Settings",
    "settings",
    # Dialects
    "Dialect",
    # Errors
    "DbAdminError",
    "ValidationError",
    "UnsupportedError",
    "FormatError",
    "DatabaseConnectionError",
    "StatementError",
]
