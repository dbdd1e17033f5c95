"""Query Builder Factory.

Creates connections and query builders configured from environment
settings, so application code can start building queries without wiring
engines, schemas and restriction configuration itself.
"""

from typing import TYPE_CHECKING, Optional

from sqlcomposer.query_builder.query_builder import QueryBuilder

if TYPE_CHECKING:
    from sqlcomposer.database.connection import Connection


class QueryBuilderFactory:
    """Factory for settings-configured connections and query builders.

    Example:
        >>> connection = QueryBuilderFactory.create_connection()
        >>> qb = QueryBuilderFactory.create(connection)
    """

    @staticmethod
    def create_connection() -> "Connection":
        """Create a connection from the current settings.

        Engine URL, platform override, schema file, context values and
        additional restrictions are all taken from ``get_settings()``.
        """
        from sqlcomposer.database.connection import Connection
        from sqlcomposer.settings import get_settings

        return Connection.from_settings(get_settings())

    @staticmethod
    def create(connection: Optional["Connection"] = None) -> QueryBuilder:
        """Create a query builder with the default restrictions.

        Args:
            connection: Connection to build for, the shared connection when omitted
        """
        return QueryBuilder(connection or get_connection())


# Shared connection instance
_connection: Optional["Connection"] = None


def get_connection(force_reload: bool = False) -> "Connection":
    """Get the shared connection, creating it from settings on first use."""
    global _connection

    if _connection is None or force_reload:
        if _connection is not None:
            _connection.dispose()
        _connection = QueryBuilderFactory.create_connection()

    return _connection


def get_query_builder() -> QueryBuilder:
    """Get a new query builder on the shared connection.

    Example:
        >>> qb = get_query_builder()
        >>> rows = qb.select("*").from_("pages").execute_query().fetch_all()
    """
    return QueryBuilderFactory.create()
