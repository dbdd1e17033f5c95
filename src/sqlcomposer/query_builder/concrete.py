"""Restriction-unaware SQL builder.

:class:`ConcreteQueryBuilder` stores the clauses of one SELECT, INSERT,
UPDATE or DELETE statement together with its parameters and renders them
to SQL. It performs no identifier quoting and knows nothing about
restrictions; both are the job of
:class:`~sqlcomposer.query_builder.QueryBuilder`, which owns one instance.
"""

import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from sqlcomposer.common.exceptions import invalid_argument_error
from sqlcomposer.constants import JoinType, ParameterType, QueryType
from sqlcomposer.query_builder.expression import CompositeExpression, Predicate

if TYPE_CHECKING:
    from sqlcomposer.database.connection import Connection


ParameterKey = Union[str, int]


@dataclass(frozen=True)
class From:
    """Table of the FROM clause, ``alias`` is ``None`` when not aliased."""

    table: str
    alias: Optional[str] = None


@dataclass(frozen=True)
class Join:
    """One JOIN attached to a FROM or JOIN alias."""

    type: JoinType
    table: str
    alias: str
    condition: Optional[Predicate] = None

    @classmethod
    def inner(cls, table: str, alias: str, condition: Optional[Predicate] = None) -> "Join":
        return cls(JoinType.INNER, table, alias, condition)

    @classmethod
    def left(cls, table: str, alias: str, condition: Optional[Predicate] = None) -> "Join":
        return cls(JoinType.LEFT, table, alias, condition)

    @classmethod
    def right(cls, table: str, alias: str, condition: Optional[Predicate] = None) -> "Join":
        return cls(JoinType.RIGHT, table, alias, condition)


class ConcreteQueryBuilder:
    """Clause container and SQL renderer.

    Every mutator returns ``self`` so calls can be chained. Values are never
    inlined by the builder itself: ``create_named_parameter`` registers a
    value under ``dcValue1``, ``dcValue2``, ... and returns the placeholder
    to put into the SQL.

    Example:
        >>> qb = ConcreteQueryBuilder(connection)
        >>> qb.select("uid").from_("pages").where(f"pid = {qb.create_named_parameter(0)}")
        >>> qb.get_sql()
        'SELECT uid FROM pages WHERE pid = :dcValue1'
    """

    def __init__(self, connection: "Connection"):
        self.connection = connection

        self._type = QueryType.SELECT
        self._distinct = False
        self._select: List[str] = []
        self._from: List[From] = []
        self._join: Dict[str, List[Join]] = {}
        self._where: Optional[Predicate] = None
        self._group_by: List[str] = []
        self._having: Optional[Predicate] = None
        self._order_by: List[str] = []

        self._table: Optional[str] = None
        self._set: List[str] = []
        self._values: Dict[str, Any] = {}

        self._params: Dict[ParameterKey, Any] = {}
        self._param_types: Dict[ParameterKey, ParameterType] = {}
        self._bound_counter = 0

        self._first_result = 0
        self._max_results: Optional[int] = None

    # Query type

    def get_type(self) -> QueryType:
        return self._type

    def select(self, *expressions: str) -> "ConcreteQueryBuilder":
        self._type = QueryType.SELECT
        self._select = list(expressions)
        return self

    def add_select(self, *expressions: str) -> "ConcreteQueryBuilder":
        self._type = QueryType.SELECT
        self._select.extend(expressions)
        return self

    def distinct(self, distinct: bool = True) -> "ConcreteQueryBuilder":
        self._distinct = distinct
        return self

    def insert(self, table: str) -> "ConcreteQueryBuilder":
        self._type = QueryType.INSERT
        self._table = table
        return self

    def update(self, table: str) -> "ConcreteQueryBuilder":
        self._type = QueryType.UPDATE
        self._table = table
        return self

    def delete(self, table: str) -> "ConcreteQueryBuilder":
        self._type = QueryType.DELETE
        self._table = table
        return self

    # FROM and JOIN

    def from_(self, table: str, alias: Optional[str] = None) -> "ConcreteQueryBuilder":
        self._from.append(From(table, alias))
        return self

    def join(self, from_alias: str, join: str, alias: str, condition: Optional[Predicate] = None) -> "ConcreteQueryBuilder":
        return self.inner_join(from_alias, join, alias, condition)

    def inner_join(self, from_alias: str, join: str, alias: str, condition: Optional[Predicate] = None) -> "ConcreteQueryBuilder":
        return self._add_join(from_alias, Join.inner(join, alias, condition))

    def left_join(self, from_alias: str, join: str, alias: str, condition: Optional[Predicate] = None) -> "ConcreteQueryBuilder":
        return self._add_join(from_alias, Join.left(join, alias, condition))

    def right_join(self, from_alias: str, join: str, alias: str, condition: Optional[Predicate] = None) -> "ConcreteQueryBuilder":
        return self._add_join(from_alias, Join.right(join, alias, condition))

    def _add_join(self, from_alias: str, join: Join) -> "ConcreteQueryBuilder":
        self._join.setdefault(from_alias, []).append(join)
        return self

    def get_from(self) -> List[From]:
        return list(self._from)

    def get_join(self) -> Dict[str, List[Join]]:
        return {alias: list(joins) for alias, joins in self._join.items()}

    def replace_join(self, from_alias: str, old: Join, new: Join) -> "ConcreteQueryBuilder":
        """Swap one join entry for another, keeping its position."""
        joins = self._join.get(from_alias, [])
        for index, join in enumerate(joins):
            if join is old or join == old:
                joins[index] = new
                return self
        raise invalid_argument_error(
            f"The join '{old.alias}' is not attached to alias '{from_alias}'",
            argument="from_alias",
            value=from_alias,
        )

    # WHERE and HAVING

    def where(self, *predicates: Predicate) -> "ConcreteQueryBuilder":
        self._where = self._combine(predicates)
        return self

    def and_where(self, *predicates: Predicate) -> "ConcreteQueryBuilder":
        self._where = self._append(self._where, CompositeExpression.TYPE_AND, predicates)
        return self

    def or_where(self, *predicates: Predicate) -> "ConcreteQueryBuilder":
        self._where = self._append(self._where, CompositeExpression.TYPE_OR, predicates)
        return self

    def get_where(self) -> Optional[Predicate]:
        return self._where

    def having(self, *predicates: Predicate) -> "ConcreteQueryBuilder":
        self._having = self._combine(predicates)
        return self

    def and_having(self, *predicates: Predicate) -> "ConcreteQueryBuilder":
        self._having = self._append(self._having, CompositeExpression.TYPE_AND, predicates)
        return self

    def or_having(self, *predicates: Predicate) -> "ConcreteQueryBuilder":
        self._having = self._append(self._having, CompositeExpression.TYPE_OR, predicates)
        return self

    @staticmethod
    def _combine(predicates: tuple) -> Optional[Predicate]:
        if not predicates:
            return None
        if len(predicates) == 1:
            return predicates[0]
        return CompositeExpression(CompositeExpression.TYPE_AND, predicates, is_outer=True)

    @staticmethod
    def _append(current: Optional[Predicate], type: str, predicates: tuple) -> Predicate:
        if isinstance(current, CompositeExpression) and current.get_type() == type:
            return current.with_(*predicates)
        return CompositeExpression(type, (current,) + tuple(predicates), is_outer=True)

    # GROUP BY and ORDER BY

    def group_by(self, *expressions: str) -> "ConcreteQueryBuilder":
        self._group_by = list(expressions)
        return self

    def add_group_by(self, *expressions: str) -> "ConcreteQueryBuilder":
        self._group_by.extend(expressions)
        return self

    def order_by(self, sort: str, order: Optional[str] = None) -> "ConcreteQueryBuilder":
        self._order_by = [self._order_expression(sort, order)]
        return self

    def add_order_by(self, sort: str, order: Optional[str] = None) -> "ConcreteQueryBuilder":
        self._order_by.append(self._order_expression(sort, order))
        return self

    @staticmethod
    def _order_expression(sort: str, order: Optional[str]) -> str:
        return f"{sort} {order.upper() if order else 'ASC'}"

    # UPDATE and INSERT values

    def set(self, key: str, value: Any) -> "ConcreteQueryBuilder":
        self._set.append(f"{key} = {value}")
        return self

    def set_value(self, column: str, value: Any) -> "ConcreteQueryBuilder":
        self._values[column] = value
        return self

    def values(self, values: Dict[str, Any]) -> "ConcreteQueryBuilder":
        self._values = dict(values)
        return self

    # Resets

    def reset_where(self) -> "ConcreteQueryBuilder":
        self._where = None
        return self

    def reset_group_by(self) -> "ConcreteQueryBuilder":
        self._group_by = []
        return self

    def reset_having(self) -> "ConcreteQueryBuilder":
        self._having = None
        return self

    def reset_order_by(self) -> "ConcreteQueryBuilder":
        self._order_by = []
        return self

    # Limits

    def set_first_result(self, first_result: int) -> "ConcreteQueryBuilder":
        self._first_result = int(first_result)
        return self

    def get_first_result(self) -> int:
        return self._first_result

    def set_max_results(self, max_results: Optional[int]) -> "ConcreteQueryBuilder":
        self._max_results = None if max_results is None else int(max_results)
        return self

    def get_max_results(self) -> Optional[int]:
        return self._max_results

    # Parameters

    def set_parameter(
        self,
        key: ParameterKey,
        value: Any,
        type: ParameterType = ParameterType.STRING,
    ) -> "ConcreteQueryBuilder":
        self._params[key] = value
        self._param_types[key] = type
        return self

    def set_parameters(
        self,
        params: Dict[ParameterKey, Any],
        types: Optional[Dict[ParameterKey, ParameterType]] = None,
    ) -> "ConcreteQueryBuilder":
        self._params = dict(params)
        self._param_types = dict(types or {})
        return self

    def get_parameter(self, key: ParameterKey) -> Any:
        return self._params.get(key)

    def get_parameters(self) -> Dict[ParameterKey, Any]:
        return dict(self._params)

    def get_parameter_type(self, key: ParameterKey) -> ParameterType:
        return self._param_types.get(key, ParameterType.STRING)

    def get_parameter_types(self) -> Dict[ParameterKey, ParameterType]:
        return dict(self._param_types)

    def create_named_parameter(
        self,
        value: Any,
        type: ParameterType = ParameterType.STRING,
        placeholder: Optional[str] = None,
    ) -> str:
        """Register ``value`` under a generated (or the given) name.

        Returns:
            The placeholder, e.g. ``:dcValue1``
        """
        if placeholder is None:
            self._bound_counter += 1
            placeholder = f":dcValue{self._bound_counter}"
        self.set_parameter(placeholder[1:], value, type)
        return placeholder

    def create_positional_parameter(self, value: Any, type: ParameterType = ParameterType.STRING) -> str:
        """Register ``value`` at the next position and return ``?``."""
        self.set_parameter(self._bound_counter, value, type)
        self._bound_counter += 1
        return "?"

    # Rendering

    def get_sql(self) -> str:
        if self._type == QueryType.INSERT:
            return self._get_sql_for_insert()
        if self._type == QueryType.UPDATE:
            return self._get_sql_for_update()
        if self._type == QueryType.DELETE:
            return self._get_sql_for_delete()
        return self._get_sql_for_select()

    def __str__(self) -> str:
        return self.get_sql()

    def _get_sql_for_select(self) -> str:
        sql = "SELECT "
        if self._distinct:
            sql += "DISTINCT "
        sql += ", ".join(self._select)
        if self._from:
            sql += " FROM " + ", ".join(self._get_from_clauses())
        if self._where is not None and str(self._where) != "":
            sql += " WHERE " + str(self._where)
        if self._group_by:
            sql += " GROUP BY " + ", ".join(self._group_by)
        if self._having is not None and str(self._having) != "":
            sql += " HAVING " + str(self._having)
        if self._order_by:
            sql += " ORDER BY " + ", ".join(self._order_by)
        return sql + self.connection.capabilities.limit_sql(self._max_results, self._first_result)

    def _get_from_clauses(self) -> List[str]:
        clauses = []
        known_aliases: Dict[str, bool] = {}
        for from_ in self._from:
            reference = from_.alias or from_.table
            table_sql = from_.table if from_.alias is None else f"{from_.table} {from_.alias}"
            known_aliases[reference] = True
            clauses.append(table_sql + self._get_sql_for_joins(reference, known_aliases))

        for from_alias in self._join:
            if from_alias not in known_aliases:
                raise invalid_argument_error(
                    f"The given alias '{from_alias}' is not part of any FROM or JOIN clause table. "
                    f"The currently registered aliases are: {', '.join(known_aliases)}.",
                    argument="from_alias",
                    value=from_alias,
                )
        return clauses

    def _get_sql_for_joins(self, from_alias: str, known_aliases: Dict[str, bool]) -> str:
        sql = ""
        for join in self._join.get(from_alias, []):
            if join.alias in known_aliases:
                raise invalid_argument_error(
                    f"The given alias '{join.alias}' is not unique in FROM and JOIN clause table. "
                    f"The currently registered aliases are: {', '.join(known_aliases)}.",
                    argument="alias",
                    value=join.alias,
                )
            sql += f" {join.type.value} JOIN {join.table} {join.alias}"
            if join.condition is not None and str(join.condition) != "":
                sql += f" ON {join.condition}"
            known_aliases[join.alias] = True

        for join in self._join.get(from_alias, []):
            sql += self._get_sql_for_joins(join.alias, known_aliases)
        return sql

    def _get_sql_for_insert(self) -> str:
        return (
            f"INSERT INTO {self._table} ({', '.join(self._values)}) "
            f"VALUES({', '.join(str(value) for value in self._values.values())})"
        )

    def _get_sql_for_update(self) -> str:
        sql = f"UPDATE {self._table} SET {', '.join(self._set)}"
        if self._where is not None and str(self._where) != "":
            sql += " WHERE " + str(self._where)
        return sql

    def _get_sql_for_delete(self) -> str:
        sql = f"DELETE FROM {self._table}"
        if self._where is not None and str(self._where) != "":
            sql += " WHERE " + str(self._where)
        return sql

    # Copying

    def __copy__(self) -> "ConcreteQueryBuilder":
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone._select = list(self._select)
        clone._from = list(self._from)
        clone._join = {alias: list(joins) for alias, joins in self._join.items()}
        clone._group_by = list(self._group_by)
        clone._order_by = list(self._order_by)
        clone._set = list(self._set)
        clone._values = dict(self._values)
        clone._params = copy.copy(self._params)
        clone._param_types = dict(self._param_types)
        return clone

    def clone(self) -> "ConcreteQueryBuilder":
        return copy.copy(self)
