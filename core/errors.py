"""Database admin exceptions.

Each error carries the HTTP status the API layer reports it with.
"""


class DbAdminError(Exception):
    """Base database admin error."""

    status_code: int = 500


class ValidationError(DbAdminError):
    """A required request field is missing or malformed."""

    status_code = 400


class UnsupportedError(DbAdminError):
    """Unknown dialect or action."""

    status_code = 400


class FormatError(DbAdminError):
    """Request body is not a JSON object."""

    status_code = 400

    def __init__(self, message: str = "Invalid request format"):
        super().__init__(message)


class DatabaseConnectionError(DbAdminError):
    """The driver could not establish or probe the connection."""

    status_code = 500


class StatementError(DbAdminError):
    """The driver rejected a statement."""

    status_code = 500
