"""Restriction aware query builder.

:class:`QueryBuilder` is the entry point for building SQL. It quotes
identifiers, creates parameters for values and forwards every structural
call to a :class:`~sqlcomposer.query_builder.concrete.ConcreteQueryBuilder`.
When a SELECT statement is emitted, the predicates of its restriction
container are computed for every queried table and added to the statement:
into the ON condition of LEFT and RIGHT joins, and into the WHERE clause for
all other tables. Emission works on a copy of the structural builder, so
the builder can be changed and emitted again with fresh restrictions.

Example:
    >>> qb = connection.create_query_builder()
    >>> qb.select("uid", "title").from_("pages").where(
    ...     qb.expr().eq("pid", qb.create_named_parameter(0, ParameterType.INTEGER))
    ... )
    >>> qb.get_sql()
    'SELECT "uid", "title" FROM "pages" WHERE ("pid" = :dcValue1) AND ((("pages"."deleted" = 0) AND ("pages"."hidden" = 0)))'
"""

import copy
import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Set

from sqlcomposer.common.exceptions import platform_not_supported_error
from sqlcomposer.constants import JoinType, ParameterType, QueryType
from sqlcomposer.query_builder.concrete import ConcreteQueryBuilder, Join, ParameterKey
from sqlcomposer.query_builder.expression import ExpressionBuilder, Predicate
from sqlcomposer.query_builder.quoting import quote_select_expressions
from sqlcomposer.query_builder.restriction import (
    DefaultRestrictionContainer,
    RestrictionContainer,
    resolve_additional_restrictions,
)

if TYPE_CHECKING:
    from sqlcomposer.database.connection import Connection
    from sqlcomposer.database.result import QueryResult


logger = logging.getLogger(__name__)


class QueryBuilder:
    """Fluent SQL builder that applies query restrictions on emission.

    Args:
        connection: Connection providing quoting, schema and execution
        restriction_container: Restrictions to apply, a
            :class:`DefaultRestrictionContainer` plus the additional
            restrictions when omitted
        concrete_query_builder: Structural builder to delegate to
        additional_restrictions: Restriction type (class or dotted path) to
            options (``{"disabled": bool}``) added to every container set via
            :meth:`set_restrictions` or :meth:`reset_restrictions`. Defaults
            to the connection's configuration.

    Raises:
        QueryBuilderError: CONFIG_INVALID if an enabled additional restriction
            cannot be resolved
    """

    def __init__(
        self,
        connection: "Connection",
        restriction_container: Optional[RestrictionContainer] = None,
        concrete_query_builder: Optional[ConcreteQueryBuilder] = None,
        additional_restrictions: Optional[Mapping[Any, Any]] = None,
    ):
        self.connection = connection
        if additional_restrictions is None:
            additional_restrictions = connection.additional_restrictions
        self._additional_restrictions = resolve_additional_restrictions(additional_restrictions)
        self._restrictions_limited_to: Optional[Set[str]] = None
        if concrete_query_builder is None:
            concrete_query_builder = ConcreteQueryBuilder(connection)
        self.concrete_query_builder = concrete_query_builder

        if restriction_container is None:
            self.reset_restrictions()
        else:
            self.restriction_container = restriction_container

    def expr(self) -> ExpressionBuilder:
        return self.connection.get_expression_builder()

    def get_type(self) -> QueryType:
        return self.concrete_query_builder.get_type()

    def get_connection(self) -> "Connection":
        return self.connection

    def get_concrete_query_builder(self) -> ConcreteQueryBuilder:
        return self.concrete_query_builder

    # Restrictions

    def get_restrictions(self) -> RestrictionContainer:
        return self.restriction_container

    def set_restrictions(self, restriction_container: RestrictionContainer) -> "QueryBuilder":
        """Replace the restriction container, adding the enabled additional restrictions to it.

        Additional restrictions are created from the connection's context, so
        configured values such as the workspace id reach them.
        """
        for restriction_type in self._additional_restrictions:
            restriction_container.add(restriction_type.from_context(self.connection.context))
        self.restriction_container = restriction_container
        return self

    def reset_restrictions(self) -> "QueryBuilder":
        """Go back to the default restrictions of the connection's schema and context."""
        return self.set_restrictions(
            DefaultRestrictionContainer(schema=self.connection.schema, context=self.connection.context)
        )

    def limit_restrictions_to_tables(self, table_aliases: Iterable[str]) -> "QueryBuilder":
        """Apply restrictions only to the given table aliases.

        The restrictions themselves stay in the container and can still be
        removed with ``get_restrictions().remove_by_type()``.
        """
        self._restrictions_limited_to = {
            self.unquote_single_identifier(alias) for alias in table_aliases
        }
        return self

    def get_queried_tables(self) -> Dict[str, str]:
        """Map every alias of the FROM and JOIN clauses to its table.

        Unaliased tables map to themselves; a table joined under a second
        alias appears once per alias.
        """
        queried_tables: Dict[str, str] = {}
        for from_ in self.concrete_query_builder.get_from():
            table_name = self.unquote_single_identifier(from_.table)
            table_alias = self.unquote_single_identifier(from_.alias) if from_.alias else table_name
            queried_tables.setdefault(table_alias, table_name)

        for joins in self.concrete_query_builder.get_join().values():
            for join in joins:
                table_name = self.unquote_single_identifier(join.table)
                table_alias = self.unquote_single_identifier(join.alias) if join.alias else table_name
                queried_tables.setdefault(table_alias, table_name)
        return queried_tables

    def _build_restrictions(self, tables: Dict[str, str], expr: ExpressionBuilder):
        if self._restrictions_limited_to is not None:
            tables = {
                alias: table for alias, table in tables.items()
                if alias in self._restrictions_limited_to
            }
        return self.restriction_container.build_expression(tables, expr)

    def _add_additional_where_conditions(self) -> ConcreteQueryBuilder:
        """Copy of the structural builder with all restrictions applied."""
        builder = copy.copy(self.concrete_query_builder)
        expr = self.expr()
        all_tables = self.get_queried_tables()
        queried_tables = dict(all_tables)

        for join_key, joins in builder.get_join().items():
            from_alias = self.unquote_single_identifier(join_key)
            for join in joins:
                if join.type == JoinType.LEFT:
                    table_alias = self.unquote_single_identifier(join.alias)
                    table_name = self.unquote_single_identifier(join.table)
                elif join.type == JoinType.RIGHT:
                    table_alias = from_alias
                    table_name = all_tables.get(from_alias, from_alias)
                else:
                    continue

                restrictions = self._build_restrictions({table_alias: table_name}, expr)
                if restrictions.count() > 0:
                    builder.replace_join(
                        join_key,
                        join,
                        Join(join.type, join.table, join.alias, expr.and_(join.condition, restrictions)),
                    )
                    logger.debug(
                        "Applied restrictions to %s join condition of '%s'", join.type.value, table_alias
                    )
                queried_tables.pop(table_alias, None)

        expression = self._build_restrictions(queried_tables, expr)
        if expression.count() > 0:
            builder.and_where(expression)
            logger.debug("Applied restrictions to WHERE clause of tables %s", list(queried_tables))
        return builder

    # Emission and execution

    def get_sql(self) -> str:
        """Render the statement, restrictions included for SELECT queries."""
        if self.get_type() != QueryType.SELECT:
            return self.concrete_query_builder.get_sql()
        return self._add_additional_where_conditions().get_sql()

    def __str__(self) -> str:
        return self.get_sql()

    def execute_query(self) -> "QueryResult":
        return self.connection.execute_query(
            self.get_sql(), self.get_parameters(), self.get_parameter_types()
        )

    def execute_statement(self) -> int:
        return self.connection.execute_statement(
            self.get_sql(), self.get_parameters(), self.get_parameter_types()
        )

    # Parameters

    def set_parameter(
        self,
        key: ParameterKey,
        value: Any,
        type: ParameterType = ParameterType.STRING,
    ) -> "QueryBuilder":
        self.concrete_query_builder.set_parameter(key, value, type)
        return self

    def set_parameters(
        self,
        params: Dict[ParameterKey, Any],
        types: Optional[Dict[ParameterKey, ParameterType]] = None,
    ) -> "QueryBuilder":
        self.concrete_query_builder.set_parameters(params, types)
        return self

    def get_parameters(self) -> Dict[ParameterKey, Any]:
        return self.concrete_query_builder.get_parameters()

    def get_parameter(self, key: ParameterKey) -> Any:
        return self.concrete_query_builder.get_parameter(key)

    def get_parameter_types(self) -> Dict[ParameterKey, ParameterType]:
        return self.concrete_query_builder.get_parameter_types()

    def get_parameter_type(self, key: ParameterKey) -> ParameterType:
        return self.concrete_query_builder.get_parameter_type(key)

    def create_named_parameter(
        self,
        value: Any,
        type: ParameterType = ParameterType.STRING,
        placeholder: Optional[str] = None,
    ) -> str:
        return self.concrete_query_builder.create_named_parameter(value, type, placeholder)

    def create_positional_parameter(self, value: Any, type: ParameterType = ParameterType.STRING) -> str:
        return self.concrete_query_builder.create_positional_parameter(value, type)

    # Limits

    def set_first_result(self, first_result: int) -> "QueryBuilder":
        self.concrete_query_builder.set_first_result(first_result)
        return self

    def get_first_result(self) -> int:
        return self.concrete_query_builder.get_first_result()

    def set_max_results(self, max_results: Optional[int]) -> "QueryBuilder":
        self.concrete_query_builder.set_max_results(max_results)
        return self

    def get_max_results(self) -> Optional[int]:
        return self.concrete_query_builder.get_max_results()

    # Query parts

    def count(self, item: str) -> "QueryBuilder":
        """Select ``COUNT(item)``; ``item`` is used as given."""
        self.concrete_query_builder.select(f"COUNT({item})")
        return self

    def select(self, *selects: str) -> "QueryBuilder":
        self.concrete_query_builder.select(*self.quote_identifiers_for_select(selects))
        return self

    def add_select(self, *selects: str) -> "QueryBuilder":
        self.concrete_query_builder.add_select(*self.quote_identifiers_for_select(selects))
        return self

    def select_literal(self, *selects: str) -> "QueryBuilder":
        """Select raw SQL expressions without quoting them."""
        self.concrete_query_builder.select(*selects)
        return self

    def add_select_literal(self, *selects: str) -> "QueryBuilder":
        self.concrete_query_builder.add_select(*selects)
        return self

    def distinct(self, distinct: bool = True) -> "QueryBuilder":
        self.concrete_query_builder.distinct(distinct)
        return self

    def delete(self, delete: str) -> "QueryBuilder":
        self.concrete_query_builder.delete(self.quote_identifier(delete))
        return self

    def update(self, update: str) -> "QueryBuilder":
        self.concrete_query_builder.update(self.quote_identifier(update))
        return self

    def insert(self, insert: str) -> "QueryBuilder":
        self.concrete_query_builder.insert(self.quote_identifier(insert))
        return self

    def from_(self, from_: str, alias: Optional[str] = None) -> "QueryBuilder":
        self.concrete_query_builder.from_(
            self.quote_identifier(from_),
            self.quote_identifier(alias) if alias else None,
        )
        return self

    def join(self, from_alias: str, join: str, alias: Optional[str] = None, condition: Optional[Predicate] = None) -> "QueryBuilder":
        return self.inner_join(from_alias, join, alias, condition)

    def inner_join(self, from_alias: str, join: str, alias: Optional[str] = None, condition: Optional[Predicate] = None) -> "QueryBuilder":
        self.concrete_query_builder.inner_join(*self._quote_join(from_alias, join, alias), condition)
        return self

    def left_join(self, from_alias: str, join: str, alias: Optional[str] = None, condition: Optional[Predicate] = None) -> "QueryBuilder":
        self.concrete_query_builder.left_join(*self._quote_join(from_alias, join, alias), condition)
        return self

    def right_join(self, from_alias: str, join: str, alias: Optional[str] = None, condition: Optional[Predicate] = None) -> "QueryBuilder":
        self.concrete_query_builder.right_join(*self._quote_join(from_alias, join, alias), condition)
        return self

    def _quote_join(self, from_alias: str, join: str, alias: Optional[str]) -> List[str]:
        return [
            self.quote_identifier(from_alias),
            self.quote_identifier(join),
            self.quote_identifier(alias or join),
        ]

    def set(
        self,
        key: str,
        value: Any,
        create_named_parameter: bool = True,
        type: ParameterType = ParameterType.STRING,
    ) -> "QueryBuilder":
        """Add ``key = value`` to an UPDATE statement.

        The value becomes a named parameter of the given type unless
        ``create_named_parameter`` is false, in which case it is inlined.
        """
        if create_named_parameter:
            value = self.create_named_parameter(value, type)
        self.concrete_query_builder.set(self.quote_identifier(key), value)
        return self

    def where(self, *predicates: Predicate) -> "QueryBuilder":
        self.concrete_query_builder.where(*predicates)
        return self

    def and_where(self, *predicates: Predicate) -> "QueryBuilder":
        self.concrete_query_builder.and_where(*predicates)
        return self

    def or_where(self, *predicates: Predicate) -> "QueryBuilder":
        self.concrete_query_builder.or_where(*predicates)
        return self

    def group_by(self, *group_by: str) -> "QueryBuilder":
        self.concrete_query_builder.group_by(*self.connection.quote_identifiers(group_by))
        return self

    def add_group_by(self, *group_by: str) -> "QueryBuilder":
        self.concrete_query_builder.add_group_by(*self.connection.quote_identifiers(group_by))
        return self

    def set_value(self, column: str, value: Any, create_named_parameter: bool = True) -> "QueryBuilder":
        if create_named_parameter:
            value = self.create_named_parameter(value)
        self.concrete_query_builder.set_value(self.quote_identifier(column), value)
        return self

    def values(self, values: Dict[str, Any], create_named_parameters: bool = True) -> "QueryBuilder":
        """Set the column values of an INSERT statement."""
        if create_named_parameters:
            values = {column: self.create_named_parameter(value) for column, value in values.items()}
        self.concrete_query_builder.values(self.quote_column_value_pairs(values))
        return self

    def having(self, *predicates: Predicate) -> "QueryBuilder":
        self.concrete_query_builder.having(*predicates)
        return self

    def and_having(self, *predicates: Predicate) -> "QueryBuilder":
        self.concrete_query_builder.and_having(*predicates)
        return self

    def or_having(self, *predicates: Predicate) -> "QueryBuilder":
        self.concrete_query_builder.or_having(*predicates)
        return self

    def order_by(self, field_name: str, order: Optional[str] = None) -> "QueryBuilder":
        self.concrete_query_builder.order_by(self.quote_identifier(field_name), order)
        return self

    def add_order_by(self, field_name: str, order: Optional[str] = None) -> "QueryBuilder":
        self.concrete_query_builder.add_order_by(self.quote_identifier(field_name), order)
        return self

    def reset_where(self) -> "QueryBuilder":
        self.concrete_query_builder.reset_where()
        return self

    def reset_group_by(self) -> "QueryBuilder":
        self.concrete_query_builder.reset_group_by()
        return self

    def reset_having(self) -> "QueryBuilder":
        self.concrete_query_builder.reset_having()
        return self

    def reset_order_by(self) -> "QueryBuilder":
        self.concrete_query_builder.reset_order_by()
        return self

    # Quoting

    def quote_identifier(self, identifier: str) -> str:
        return self.connection.quote_identifier(identifier)

    def quote_identifiers(self, identifiers: Iterable[str]) -> List[str]:
        return self.connection.quote_identifiers(identifiers)

    def quote_identifiers_for_select(self, input: Iterable[str]) -> List[str]:
        """Quote select fields, keeping ``*`` and rendering ``AS`` aliases.

        Raises:
            QueryBuilderError: INVALID_ARGUMENT (1461170686) for an entry with
                more than one alias
        """
        return quote_select_expressions(input, self.connection.quote_identifier)

    def quote_column_value_pairs(self, input: Dict[str, Any]) -> Dict[str, Any]:
        return self.connection.quote_column_value_pairs(input)

    def unquote_single_identifier(self, identifier: str) -> str:
        return self.connection.unquote_single_identifier(identifier)

    def quote(self, value: Any) -> str:
        return self.connection.quote(value)

    def escape_like_wildcards(self, value: str) -> str:
        """Escape ``%`` and ``_`` for use in a LIKE pattern."""
        return value.replace("%", "\\%").replace("_", "\\_")

    def cast_field_to_text_type(self, field_name: str) -> str:
        """Wrap a field in the platform's cast to a text type.

        Raises:
            QueryBuilderError: PLATFORM_NOT_SUPPORTED (1584637096) if the
                platform has no text cast
        """
        template = self.connection.capabilities.text_cast
        if template is None:
            platform = self.connection.get_database_platform()
            raise platform_not_supported_error(
                f"{platform} is not supported by cast_field_to_text_type",
                platform=str(platform),
                code=1584637096,
            )
        return template.format(field=self.connection.quote_identifier(field_name))

    # Copying

    def __copy__(self) -> "QueryBuilder":
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone.concrete_query_builder = copy.copy(self.concrete_query_builder)
        clone.restriction_container = copy.copy(self.restriction_container)
        if self._restrictions_limited_to is not None:
            clone._restrictions_limited_to = set(self._restrictions_limited_to)
        return clone

    def clone(self) -> "QueryBuilder":
        return copy.copy(self)
