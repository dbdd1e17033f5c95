"""Query builder module.

Builds SQL statements with table-scoped restrictions applied on emission.

Architecture:
    - quoting.py: platform aware identifier quoting
    - expression.py: predicates and composite AND/OR expressions
    - concrete.py: restriction-unaware clause container and SQL renderer
    - restriction/: restriction policies and their containers
    - query_builder.py: the restriction aware QueryBuilder facade
    - factory.py: settings-configured connections and builders

Example, with ``pages`` configured with ``delete`` and ``disabled`` columns:
    >>> from sqlcomposer.query_builder import get_query_builder
    >>> qb = get_query_builder()
    >>> qb.select("uid").from_("pages").get_sql()
    'SELECT "uid" FROM "pages" WHERE (("pages"."deleted" = 0) AND ("pages"."hidden" = 0))'
"""

from sqlcomposer.query_builder.concrete import ConcreteQueryBuilder, From, Join
from sqlcomposer.query_builder.expression import CompositeExpression, ExpressionBuilder
from sqlcomposer.query_builder.quoting import IdentifierQuoter
from sqlcomposer.query_builder.query_builder import QueryBuilder
from sqlcomposer.query_builder.factory import (
    QueryBuilderFactory,
    get_connection,
    get_query_builder,
)

__all__ = [
    "QueryBuilder",
    "ConcreteQueryBuilder",
    "From",
    "Join",
    "CompositeExpression",
    "ExpressionBuilder",
    "IdentifierQuoter",
    "QueryBuilderFactory",
    "get_connection",
    "get_query_builder",
]
