"""Restriction policy interfaces."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sqlcomposer.context import Context
    from sqlcomposer.query_builder.expression import ExpressionBuilder, Predicate
    from sqlcomposer.schema import TableControl


class QueryRestriction(ABC):
    """A policy that limits which rows of a table a query may see.

    Restrictions are evaluated once per queried table every time a SELECT
    statement is emitted. Implementations must not keep per-query state:
    the same instance is asked again for every table and every emission.
    """

    @abstractmethod
    def build_expression(
        self,
        table_name: str,
        table_alias: str,
        ctrl: "TableControl",
        expr: "ExpressionBuilder",
    ) -> Optional["Predicate"]:
        """Build the predicate for one queried table.

        Args:
            table_name: Base table name, used to look up configuration
            table_alias: Alias the table is queried under, used in the predicate
            ctrl: Control configuration of ``table_name``
            expr: Expression builder of the query's connection

        Returns:
            The predicate, or ``None`` if the table is not affected
        """

    @classmethod
    def from_context(cls, context: "Context") -> "QueryRestriction":
        """Create the restriction for a request context.

        Restrictions configured by type are instantiated through this hook.
        The default ignores the context; restrictions that compare against
        context values override it.
        """
        return cls()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class EnforceableQueryRestriction(QueryRestriction):
    """Restriction that may refuse to be removed by ``remove_all()``."""

    @abstractmethod
    def is_enforced(self) -> bool:
        """Whether ``remove_all()`` must keep this restriction."""
