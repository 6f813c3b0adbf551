"""MySQL adapter via SQLAlchemy + aiomysql."""

from sqlalchemy.engine import URL, make_url

from core.dialects import Dialect

from .base import SQLAlchemyDialectAdapter


class MySQLAdapter(SQLAlchemyDialectAdapter):
    """MySQL/MariaDB dialect adapter.

    The driver uses ``%s`` placeholders and reports the generated id of the
    last insert.
    """

    dialect = Dialect.MYSQL
    reports_insert_id = True

    def engine_url(self) -> URL:
        return make_url(self.url).set(drivername="mysql+aiomysql")
