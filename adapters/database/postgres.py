"""PostgreSQL adapter via SQLAlchemy + asyncpg.

Placeholders are ``$1, $2, ...``. TLS is off for local targets and on,
without certificate verification, for everything else.
"""

import ssl
from typing import Any

from sqlalchemy.engine import URL, make_url

from core.dialects import Dialect

from .base import SQLAlchemyDialectAdapter

LOCAL_HOSTS = {"localhost", "127.0.0.1", "::1"}

# Query parameters asyncpg does not accept as connect() keywords;
# TLS is configured through connect_args instead.
DROPPED_QUERY_KEYS = ("sslmode", "ssl", "channel_binding")


class PostgresAdapter(SQLAlchemyDialectAdapter):
    """PostgreSQL dialect adapter."""

    dialect = Dialect.POSTGRES

    def engine_url(self) -> URL:
        url = make_url(self.url)
        return url.set(drivername="postgresql+asyncpg").difference_update_query(
            DROPPED_QUERY_KEYS
        )

    def is_local(self) -> bool:
        return (make_url(self.url).host or "localhost") in LOCAL_HOSTS

    def connect_args(self) -> dict[str, Any]:
        if self.is_local():
            return {"ssl": False}
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return {"ssl": context}
