"""Ordered restriction containers."""

import copy
import logging
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Type

from sqlcomposer.common.exceptions import ErrorCode, configuration_error
from sqlcomposer.context import Context
from sqlcomposer.query_builder.expression import CompositeExpression
from sqlcomposer.query_builder.restriction.base import EnforceableQueryRestriction, QueryRestriction
from sqlcomposer.query_builder.restriction.deleted import DeletedRestriction
from sqlcomposer.query_builder.restriction.end_time import EndTimeRestriction
from sqlcomposer.query_builder.restriction.hidden import HiddenRestriction
from sqlcomposer.query_builder.restriction.start_time import StartTimeRestriction

if TYPE_CHECKING:
    from sqlcomposer.query_builder.expression import ExpressionBuilder
    from sqlcomposer.schema import SchemaRegistry


logger = logging.getLogger(__name__)


class RestrictionContainer:
    """Ordered list of restriction policies.

    Insertion order is evaluation order. Adding a second instance of a type
    keeps both. The control configuration of each table is read from
    ``schema``; without one, the schema of the expression builder's
    connection is used.

    Example:
        >>> container = RestrictionContainer()
        >>> container.add(DeletedRestriction()).add(HiddenRestriction())
        >>> str(container.build_expression({"p": "pages"}, expr))
        '((p.deleted = 0) AND (p.hidden = 0))'
    """

    def __init__(
        self,
        schema: Optional["SchemaRegistry"] = None,
        context: Optional[Context] = None,
    ):
        self.schema = schema
        self.context = context or Context()
        self._restrictions: List[QueryRestriction] = []

    def add(self, restriction: QueryRestriction) -> "RestrictionContainer":
        """Append a restriction.

        Raises:
            QueryBuilderError: CONFIG_INVALID if ``restriction`` is not a QueryRestriction
        """
        if not isinstance(restriction, QueryRestriction):
            raise configuration_error(
                f"Restriction must implement QueryRestriction, got {type(restriction).__name__}",
                config_key="restriction",
                error_code=ErrorCode.CONFIG_INVALID,
            )
        self._restrictions.append(restriction)
        return self

    def remove_by_type(self, restriction_type: Type[QueryRestriction]) -> "RestrictionContainer":
        """Remove every restriction that is an instance of ``restriction_type``."""
        self._restrictions = [
            restriction for restriction in self._restrictions
            if not isinstance(restriction, restriction_type)
        ]
        return self

    def remove_all(self) -> "RestrictionContainer":
        """Remove all restrictions except enforced ones."""
        self._restrictions = [
            restriction for restriction in self._restrictions
            if isinstance(restriction, EnforceableQueryRestriction) and restriction.is_enforced()
        ]
        return self

    def get_restrictions(self) -> List[QueryRestriction]:
        return list(self._restrictions)

    def build_expression(
        self,
        queried_tables: Dict[str, str],
        expr: "ExpressionBuilder",
    ) -> CompositeExpression:
        """AND the restrictions of every queried table.

        Args:
            queried_tables: Alias to base table name
            expr: Expression builder of the query's connection

        Returns:
            One AND group per table that produced a predicate, combined with
            AND. Renders as an empty string when nothing applies.
        """
        schema = self.schema if self.schema is not None else expr.connection.schema
        groups = []
        for table_alias, table_name in queried_tables.items():
            ctrl = schema.get(table_name)
            fragments = [
                restriction.build_expression(table_name, table_alias, ctrl, expr)
                for restriction in self._restrictions
            ]
            groups.append(expr.and_(*fragments))
        return expr.and_(*groups)

    def __iter__(self) -> Iterator[QueryRestriction]:
        return iter(list(self._restrictions))

    def __len__(self) -> int:
        return len(self._restrictions)

    def __contains__(self, restriction_type: object) -> bool:
        if isinstance(restriction_type, type):
            return any(isinstance(restriction, restriction_type) for restriction in self._restrictions)
        return restriction_type in self._restrictions

    def __copy__(self) -> "RestrictionContainer":
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone._restrictions = list(self._restrictions)
        return clone

    def clone(self) -> "RestrictionContainer":
        return copy.copy(self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._restrictions!r})"


class DefaultRestrictionContainer(RestrictionContainer):
    """Container holding the restrictions every frontend query needs.

    Deleted, hidden, start time and end time, in that order. Start and end
    time compare against the access time of ``context``.
    """

    def __init__(
        self,
        schema: Optional["SchemaRegistry"] = None,
        context: Optional[Context] = None,
    ):
        super().__init__(schema=schema, context=context)
        for restriction_type in (DeletedRestriction, HiddenRestriction, StartTimeRestriction, EndTimeRestriction):
            self.add(restriction_type.from_context(self.context))
        logger.debug("Created default restriction container: %r", self._restrictions)
