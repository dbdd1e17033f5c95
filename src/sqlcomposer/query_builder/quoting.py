"""Platform aware identifier quoting.

Identifiers reach the query builder in three shapes: plain names
(``uid``), qualified names (``pages.uid``, ``pages.*``) and select
expressions with an alias (``pages.title AS pageTitle``). The helpers
below quote each shape with the quote character of the connection's
platform and undo the quoting again.
"""

import re
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlcomposer.common.exceptions import invalid_argument_error
from sqlcomposer.platform import PlatformCapabilities


_AS_PATTERN = re.compile(r"\s+as\s+", re.IGNORECASE)


def split_select_alias(expression: str) -> List[str]:
    """Split a select expression into field and optional alias.

    ``"a.b AS c"`` becomes ``["a.b", "c"]``. The ``AS`` keyword is matched
    case-insensitively.

    Raises:
        QueryBuilderError: INVALID_ARGUMENT (1461170686) if the expression
            holds more than one alias
    """
    parts = [part for part in _AS_PATTERN.split(expression.strip(), maxsplit=2) if part]
    if len(parts) > 2:
        raise invalid_argument_error(
            f'A select field can only contain a single "AS" alias, '
            f'"{expression}" given. Did you pass several fields as one string?',
            argument="select",
            value=expression,
            code=1461170686,
        )
    return parts


def quote_select_expressions(
    expressions: Iterable[str],
    quote: Callable[[str], str],
) -> List[str]:
    """Quote select expressions with the given identifier quoting function.

    ``*`` and ``table.*`` keep their star unquoted, an alias is rendered as
    ``<field> AS <alias>``.
    """
    quoted = []
    for expression in expressions:
        parts = split_select_alias(expression)
        if not parts:
            continue
        field_name = parts[0]
        if field_name.endswith("*"):
            table = field_name.rstrip(".*")
            field_name = "*" if not table else f"{quote(table)}.*"
        else:
            field_name = quote(field_name)
        if len(parts) == 2:
            field_name += " AS " + quote(parts[1])
        quoted.append(field_name)
    return quoted


class IdentifierQuoter:
    """Quotes identifiers and values for one database platform.

    Example:
        >>> quoter = IdentifierQuoter(get_capabilities(Platform.MYSQL))
        >>> quoter.quote_identifier("pages.uid")
        '`pages`.`uid`'
        >>> quoter.quote_identifiers_for_select(["pages.title AS t"])
        ['`pages`.`title` AS `t`']
    """

    def __init__(self, capabilities: PlatformCapabilities):
        self.capabilities = capabilities

    @property
    def quote_char(self) -> str:
        return self.capabilities.quote_char

    def quote_single_identifier(self, identifier: str) -> str:
        return self.capabilities.quote_single_identifier(identifier)

    def quote_identifier(self, identifier: str) -> str:
        """Quote a possibly qualified identifier, segment by segment."""
        if identifier == "*":
            return identifier
        return ".".join(
            segment if segment == "*" else self.quote_single_identifier(segment)
            for segment in identifier.split(".")
        )

    def quote_identifiers(self, identifiers: Iterable[str]) -> List[str]:
        return [self.quote_identifier(identifier) for identifier in identifiers]

    def quote_identifiers_for_select(self, expressions: Iterable[str]) -> List[str]:
        return quote_select_expressions(expressions, self.quote_identifier)

    def quote_column_value_pairs(self, pairs: Dict[str, Any]) -> Dict[str, Any]:
        """Quote the keys of a column/value mapping, keeping the values."""
        return {self.quote_identifier(column): value for column, value in pairs.items()}

    def unquote_single_identifier(self, identifier: str) -> str:
        """Strip the platform quotes from a single identifier.

        Embedded, doubled quote characters collapse back into one.
        """
        q = self.quote_char
        return identifier.strip().strip(q).replace(q + q, q)

    def quote_value(self, value: Any) -> str:
        """Render a Python value as a SQL literal.

        Strings are quoted, ``None`` becomes ``NULL``, booleans become
        ``1``/``0`` and lists become a comma separated literal list.
        """
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, (list, tuple, set, frozenset)):
            return ", ".join(self.quote_value(item) for item in value)
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return self.capabilities.quote_string_literal(str(value))
