"""SQL dialect vocabulary and identifier guards.

Table and column names cannot be bound as query parameters, so every
identifier that reaches an SQL string passes through ``ensure_identifier``
first.
"""

import re
from enum import Enum

from core.errors import UnsupportedError, ValidationError

# Plain unquoted identifiers only: letters, digits, underscore
IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Column type expressions such as INTEGER, VARCHAR(255), NUMERIC(10, 2),
# DOUBLE PRECISION, TIMESTAMP WITH TIME ZONE
COLUMN_TYPE_PATTERN = re.compile(
    r"[A-Za-z][A-Za-z0-9_ ]*(\(\s*\d+\s*(,\s*\d+\s*)?\))?"
)

WHERE_PREFIX_PATTERN = re.compile(r"^\s*WHERE\b", re.IGNORECASE)

AUTH_TOKEN_PATTERN = re.compile(r"(authToken=)[^&]+")


class Dialect(str, Enum):
    """Supported database engines."""

    POSTGRES = "postgresql"
    MYSQL = "mysql"
    SQLITE_NETWORK = "turso"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return _DIALECT_ALIASES.get(value.strip().lower())
        return None

    @classmethod
    def parse(cls, value: "str | Dialect") -> "Dialect":
        """Parse a dialect tag, raising UnsupportedError for unknown values."""
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedError(f"Unsupported database type: {value}") from None

    @property
    def identifier_quote(self) -> str:
        return "`" if self is Dialect.MYSQL else '"'

    def placeholder(self, index: int) -> str:
        """Return the driver placeholder for the 1-based parameter ``index``."""
        if self is Dialect.POSTGRES:
            return f"${index}"
        if self is Dialect.MYSQL:
            return "%s"
        return "?"


_DIALECT_ALIASES = {
    "postgresql": Dialect.POSTGRES,
    "postgres": Dialect.POSTGRES,
    "pg": Dialect.POSTGRES,
    "mysql": Dialect.MYSQL,
    "mariadb": Dialect.MYSQL,
    "turso": Dialect.SQLITE_NETWORK,
    "libsql": Dialect.SQLITE_NETWORK,
    "sqlite": Dialect.SQLITE_NETWORK,
    "sqlite-network": Dialect.SQLITE_NETWORK,
}


def is_read_statement(statement: str) -> bool:
    """Return True when the statement should produce a row set."""
    return statement.strip().upper().startswith("SELECT")


def ensure_identifier(name: str | None, what: str = "identifier") -> str:
    """Validate a table or column name before it is interpolated into SQL."""
    if not name:
        raise ValidationError(f"Missing {what}")
    if not IDENTIFIER_PATTERN.fullmatch(name):
        raise ValidationError(f"Invalid {what}: {name!r}")
    return name


def ensure_column_type(type_name: str | None) -> str:
    """Validate a column type expression used in CREATE TABLE."""
    if not type_name or not COLUMN_TYPE_PATTERN.fullmatch(type_name.strip()):
        raise ValidationError(f"Invalid column type: {type_name!r}")
    return type_name.strip()


def quote_identifier(dialect: Dialect, name: str) -> str:
    """Quote a catalog-discovered identifier for the given dialect."""
    quote = dialect.identifier_quote
    return f"{quote}{name.replace(quote, quote * 2)}{quote}"


def with_where_prefix(where_clause: str) -> str:
    """Prepend ``WHERE`` unless the fragment already starts with it."""
    where_clause = where_clause.strip()
    if WHERE_PREFIX_PATTERN.match(where_clause):
        return where_clause
    return f"WHERE {where_clause}"


def adapt_placeholders(fragment: str, dialect: Dialect, start: int = 1) -> str:
    """Translate ``?`` markers in a caller fragment to driver placeholders.

    Markers inside single-quoted literals are left alone. ``start`` is the
    1-based index of the first marker, so a WHERE fragment can be numbered
    after the SET values of an UPDATE. For MySQL every literal ``%`` is
    doubled because the driver formats the statement with ``%s``.
    """
    result: list[str] = []
    index = start
    in_string = False
    i = 0
    while i < len(fragment):
        ch = fragment[i]
        if ch == "'":
            if in_string and i + 1 < len(fragment) and fragment[i + 1] == "'":
                result.append("''")
                i += 2
                continue
            in_string = not in_string
            result.append(ch)
        elif ch == "?" and not in_string:
            result.append(dialect.placeholder(index))
            index += 1
        elif ch == "%" and dialect is Dialect.MYSQL:
            result.append("%%")
        else:
            result.append(ch)
        i += 1
    return "".join(result)


def mask_url(url: str) -> str:
    """Mask the password and auth token in a connection URL for logging."""
    url = AUTH_TOKEN_PATTERN.sub(r"\1***", url)
    if "@" in url:
        pre, post = url.split("@", 1)
        if ":" in pre.split("://", 1)[-1]:
            scheme_user = pre.rsplit(":", 1)[0]
            return f"{scheme_user}:***@{post}"
    return url
