"""Database access through SQLAlchemy."""

from sqlcomposer.database.connection import Connection
from sqlcomposer.database.result import QueryResult

__all__ = [
    "Connection",
    "QueryResult",
]
