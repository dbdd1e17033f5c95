"""SQL and query-related constants.

This module contains the fundamental query enums shared by the structural
builder, the restriction-aware query builder and the connection layer.
They have no dependencies on other sqlcomposer modules.
"""

from enum import Enum


class QueryType(str, Enum):
    """SQL query type enumeration.

    The structural builder switches its rendering on this value and the
    query builder only applies restrictions to ``SELECT`` queries.
    """

    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class JoinType(str, Enum):
    """Join flavours supported by the structural builder."""

    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class ParameterType(str, Enum):
    """Binding type of a query parameter.

    The ``*_ARRAY`` members are expanded into a list of placeholders when the
    statement is executed (``IN (:dcValue1)`` style bindings).
    """

    NULL = "null"
    INTEGER = "integer"
    STRING = "string"
    BOOLEAN = "boolean"
    LARGE_OBJECT = "large_object"
    BINARY = "binary"
    INTEGER_ARRAY = "integer_array"
    STRING_ARRAY = "string_array"

    @property
    def is_array(self) -> bool:
        return self in (ParameterType.INTEGER_ARRAY, ParameterType.STRING_ARRAY)
