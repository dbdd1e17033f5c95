from sqlcomposer.__version__ import __version__

from sqlcomposer.common.exceptions import ErrorCode, QueryBuilderError
from sqlcomposer.constants import JoinType, ParameterType, Platform, QueryType
from sqlcomposer.context import Context
from sqlcomposer.schema import SchemaRegistry, TableControl
from sqlcomposer.database import Connection, QueryResult
from sqlcomposer.query_builder import (
    CompositeExpression,
    ExpressionBuilder,
    QueryBuilder,
    get_connection,
    get_query_builder,
)
from sqlcomposer.query_builder.restriction import (
    DefaultRestrictionContainer,
    DeletedRestriction,
    EndTimeRestriction,
    EnforceableQueryRestriction,
    FrontendGroupRestriction,
    HiddenRestriction,
    QueryRestriction,
    RestrictionContainer,
    RootLevelRestriction,
    StartTimeRestriction,
    WorkspaceRestriction,
)


__all__ = [
    "__version__",

    "Connection",
    "QueryResult",
    "QueryBuilder",
    "ExpressionBuilder",
    "CompositeExpression",
    "get_connection",
    "get_query_builder",

    "QueryRestriction",
    "EnforceableQueryRestriction",
    "RestrictionContainer",
    "DefaultRestrictionContainer",
    "DeletedRestriction",
    "HiddenRestriction",
    "StartTimeRestriction",
    "EndTimeRestriction",
    "FrontendGroupRestriction",
    "WorkspaceRestriction",
    "RootLevelRestriction",

    "Context",
    "SchemaRegistry",
    "TableControl",

    "Platform",
    "QueryType",
    "JoinType",
    "ParameterType",

    # Exceptions (public API)
    "QueryBuilderError",
    "ErrorCode",
]
