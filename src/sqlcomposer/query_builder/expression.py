"""Predicate and expression building.

Predicates are plain SQL strings. :class:`CompositeExpression` joins several
of them with ``AND`` or ``OR`` and :class:`ExpressionBuilder` renders the
usual comparison and aggregate fragments with identifiers quoted through
the connection.
"""

from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Tuple, Union

from sqlcomposer.common.exceptions import invalid_argument_error

if TYPE_CHECKING:
    from sqlcomposer.database.connection import Connection


Predicate = Union[str, "CompositeExpression"]


def _is_empty(part: Any) -> bool:
    if part is None:
        return True
    if isinstance(part, CompositeExpression):
        return part.count() == 0
    return str(part).strip() == ""


class CompositeExpression:
    """Immutable list of predicates joined by ``AND`` or ``OR``.

    Empty parts (``None``, blank strings, empty composites) are dropped on
    construction. Rendering:

    * no parts: ``""``
    * one part: the part itself
    * several parts: ``((a) AND (b))``, or ``(a) AND (b)`` for an *outer*
      composite such as a complete WHERE clause

    Example:
        >>> str(CompositeExpression.and_("a = 1", "b = 2"))
        '((a = 1) AND (b = 2))'
    """

    TYPE_AND = "AND"
    TYPE_OR = "OR"

    def __init__(self, type: str, parts: Iterable[Predicate] = (), is_outer: bool = False):
        if type not in (self.TYPE_AND, self.TYPE_OR):
            raise invalid_argument_error(
                f"Unknown composite expression type '{type}'",
                argument="type",
                value=type,
            )
        self._type = type
        self._parts: Tuple[Predicate, ...] = tuple(part for part in parts if not _is_empty(part))
        self._is_outer = is_outer

    @classmethod
    def and_(cls, *parts: Predicate) -> "CompositeExpression":
        return cls(cls.TYPE_AND, parts)

    @classmethod
    def or_(cls, *parts: Predicate) -> "CompositeExpression":
        return cls(cls.TYPE_OR, parts)

    def with_(self, *parts: Predicate) -> "CompositeExpression":
        """Return a new composite of the same type with ``parts`` appended."""
        return CompositeExpression(self._type, self._parts + tuple(parts), self._is_outer)

    def as_outer(self) -> "CompositeExpression":
        return CompositeExpression(self._type, self._parts, True)

    def get_type(self) -> str:
        return self._type

    @property
    def parts(self) -> Tuple[Predicate, ...]:
        return self._parts

    @property
    def is_outer(self) -> bool:
        return self._is_outer

    def count(self) -> int:
        return len(self._parts)

    def __len__(self) -> int:
        return len(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)

    def __str__(self) -> str:
        if not self._parts:
            return ""
        if len(self._parts) == 1:
            return str(self._parts[0])
        joined = f") {self._type} (".join(str(part) for part in self._parts)
        if self._is_outer:
            return f"({joined})"
        return f"(({joined}))"

    def __repr__(self) -> str:
        return f"CompositeExpression({self._type!r}, {list(self._parts)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CompositeExpression):
            return str(self) == str(other)
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))


class ExpressionBuilder:
    """Builds SQL predicate and expression fragments.

    Field names are quoted through the connection, values are inserted as
    given. Pass values through :meth:`literal` or a named parameter of the
    query builder.

    Example:
        >>> expr = connection.get_expression_builder()
        >>> expr.eq("pages.uid", qb.create_named_parameter(1))
        '"pages"."uid" = :dcValue1'
    """

    EQ = "="
    NEQ = "<>"
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="

    TRIM_BOTH = "BOTH"
    TRIM_LEADING = "LEADING"
    TRIM_TRAILING = "TRAILING"

    def __init__(self, connection: "Connection"):
        self.connection = connection

    def and_(self, *expressions: Predicate) -> CompositeExpression:
        return CompositeExpression.and_(*expressions)

    def or_(self, *expressions: Predicate) -> CompositeExpression:
        return CompositeExpression.or_(*expressions)

    def comparison(self, left: Any, operator: str, right: Any) -> str:
        return f"{left} {operator} {right}"

    def eq(self, field_name: str, value: Any) -> str:
        return self.comparison(self.connection.quote_identifier(field_name), self.EQ, value)

    def neq(self, field_name: str, value: Any) -> str:
        return self.comparison(self.connection.quote_identifier(field_name), self.NEQ, value)

    def lt(self, field_name: str, value: Any) -> str:
        return self.comparison(self.connection.quote_identifier(field_name), self.LT, value)

    def lte(self, field_name: str, value: Any) -> str:
        return self.comparison(self.connection.quote_identifier(field_name), self.LTE, value)

    def gt(self, field_name: str, value: Any) -> str:
        return self.comparison(self.connection.quote_identifier(field_name), self.GT, value)

    def gte(self, field_name: str, value: Any) -> str:
        return self.comparison(self.connection.quote_identifier(field_name), self.GTE, value)

    def is_null(self, field_name: str) -> str:
        return f"{self.connection.quote_identifier(field_name)} IS NULL"

    def is_not_null(self, field_name: str) -> str:
        return f"{self.connection.quote_identifier(field_name)} IS NOT NULL"

    def like(self, field_name: str, value: Any, escape_char: Optional[str] = None) -> str:
        """``field LIKE value ESCAPE '\\'``; the escape character defaults to a backslash."""
        escape = self.connection.quote("\\" if escape_char is None else escape_char)
        return self.comparison(
            self.connection.quote_identifier(field_name), "LIKE", f"{value} ESCAPE {escape}"
        )

    def not_like(self, field_name: str, value: Any, escape_char: Optional[str] = None) -> str:
        escape = self.connection.quote("\\" if escape_char is None else escape_char)
        return self.comparison(
            self.connection.quote_identifier(field_name), "NOT LIKE", f"{value} ESCAPE {escape}"
        )

    def in_(self, field_name: str, value: Union[str, Sequence[Any]]) -> str:
        """``field IN (value)``; a sequence is joined with commas.

        Raises:
            QueryBuilderError: INVALID_ARGUMENT for an empty sequence
        """
        return self.comparison(
            self.connection.quote_identifier(field_name), "IN", f"({self._join_values(field_name, value)})"
        )

    def not_in(self, field_name: str, value: Union[str, Sequence[Any]]) -> str:
        return self.comparison(
            self.connection.quote_identifier(field_name), "NOT IN", f"({self._join_values(field_name, value)})"
        )

    def in_set(self, field_name: str, value: Any, is_column: bool = False) -> str:
        """Test whether ``value`` is an element of the comma separated list in ``field_name``.

        ``value`` may be a plain value (quoted as a literal), a placeholder
        (``:name`` or ``?``) or, with ``is_column``, another column.

        Raises:
            QueryBuilderError: INVALID_ARGUMENT for an empty value or a value
                containing a comma
        """
        text = str(value)
        if text == "":
            raise invalid_argument_error(
                "An empty value is not allowed for a set lookup",
                argument="value",
                code=1459696089,
            )
        if "," in text:
            raise invalid_argument_error(
                "A set lookup value must not contain a comma",
                argument="value",
                value=text,
                code=1459696090,
            )
        if is_column:
            rendered = self.connection.quote_identifier(text)
        elif text == "?" or text.startswith(":"):
            rendered = text
        else:
            rendered = self.literal(text)
        return self.connection.capabilities.find_in_set.format(
            value=rendered, field=self.connection.quote_identifier(field_name)
        )

    def literal(self, value: Any) -> str:
        """Quote a value as a SQL literal."""
        return self.connection.quote(value)

    def count(self, field_name: str, alias: Optional[str] = None) -> str:
        return self._calculation("COUNT", field_name, alias)

    def min(self, field_name: str, alias: Optional[str] = None) -> str:
        return self._calculation("MIN", field_name, alias)

    def max(self, field_name: str, alias: Optional[str] = None) -> str:
        return self._calculation("MAX", field_name, alias)

    def avg(self, field_name: str, alias: Optional[str] = None) -> str:
        return self._calculation("AVG", field_name, alias)

    def sum(self, field_name: str, alias: Optional[str] = None) -> str:
        return self._calculation("SUM", field_name, alias)

    def length(self, field_name: str, alias: Optional[str] = None) -> str:
        return self._calculation("LENGTH", field_name, alias)

    def trim(self, field_name: str, position: str = TRIM_BOTH, char: Optional[str] = None) -> str:
        """``TRIM`` a field, optionally only on one side or for a specific character."""
        quoted = self.connection.quote_identifier(field_name)
        position = position.upper()
        if position not in (self.TRIM_BOTH, self.TRIM_LEADING, self.TRIM_TRAILING):
            raise invalid_argument_error(
                f"Unknown trim position '{position}'",
                argument="position",
                value=position,
            )
        if position == self.TRIM_BOTH and char is None:
            return f"TRIM({quoted})"
        if char is None:
            return f"TRIM({position} FROM {quoted})"
        return f"TRIM({position} {self.literal(char)} FROM {quoted})"

    def _calculation(self, function: str, field_name: str, alias: Optional[str]) -> str:
        field = "*" if field_name == "*" else self.connection.quote_identifier(field_name)
        expression = f"{function}({field})"
        if alias:
            expression += " AS " + self.connection.quote_identifier(alias)
        return expression

    def _join_values(self, field_name: str, value: Union[str, Sequence[Any]]) -> str:
        if isinstance(value, str):
            return value
        values: List[str] = [str(item) for item in value]
        if not values:
            raise invalid_argument_error(
                f"An empty list of values is not allowed for the IN comparison on '{field_name}'",
                argument="value",
            )
        return ", ".join(values)
