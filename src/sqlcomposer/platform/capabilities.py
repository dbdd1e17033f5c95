"""Per-platform SQL capabilities.

A static lookup table keyed by :class:`~sqlcomposer.constants.Platform`.
Every platform-dependent piece of SQL the package renders (identifier
quoting, text casts, LIMIT/OFFSET, "find in set") is looked up here, so
supporting another database means adding one entry to ``_CAPABILITIES``.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from sqlcomposer.common.exceptions import platform_not_supported_error
from sqlcomposer.constants import Platform


@dataclass(frozen=True)
class PlatformCapabilities:
    """SQL rendering traits of one database platform.

    Attributes:
        platform: Platform the entry describes
        quote_char: Identifier quote character
        text_cast: Template casting ``{field}`` to a text type, ``None`` if unsupported
        find_in_set: Template testing whether ``{value}`` is an element of the
            comma separated list stored in ``{field}``
        unbounded_limit: LIMIT value rendered when only an offset is given,
            ``None`` if the platform accepts a bare OFFSET
        escape_backslash: Whether string literals must escape backslashes
    """

    platform: Platform
    quote_char: str
    text_cast: Optional[str]
    find_in_set: str
    unbounded_limit: Optional[str]
    escape_backslash: bool = False

    def quote_single_identifier(self, identifier: str) -> str:
        """Quote one identifier segment, doubling embedded quote characters."""
        q = self.quote_char
        return f"{q}{identifier.replace(q, q + q)}{q}"

    def quote_string_literal(self, value: str) -> str:
        """Quote a string value as a SQL literal."""
        if self.escape_backslash:
            value = value.replace("\\", "\\\\")
        escaped = value.replace("'", "''")
        return f"'{escaped}'"

    def limit_sql(self, limit: Optional[int], offset: int) -> str:
        """Render the LIMIT/OFFSET suffix of a SELECT statement.

        Returns an empty string when neither limit nor offset apply.
        """
        sql = ""
        if limit is not None:
            sql += f" LIMIT {int(limit)}"
        if offset > 0:
            if limit is None and self.unbounded_limit is not None:
                sql += f" LIMIT {self.unbounded_limit}"
            sql += f" OFFSET {int(offset)}"
        return sql


_CAPABILITIES: Dict[Platform, PlatformCapabilities] = {
    Platform.MYSQL: PlatformCapabilities(
        platform=Platform.MYSQL,
        quote_char="`",
        text_cast="CONVERT({field}, CHAR)",
        find_in_set="FIND_IN_SET({value}, {field})",
        unbounded_limit="18446744073709551615",
        escape_backslash=True,
    ),
    Platform.MARIADB: PlatformCapabilities(
        platform=Platform.MARIADB,
        quote_char="`",
        text_cast="CONVERT({field}, CHAR)",
        find_in_set="FIND_IN_SET({value}, {field})",
        unbounded_limit="18446744073709551615",
        escape_backslash=True,
    ),
    Platform.POSTGRESQL: PlatformCapabilities(
        platform=Platform.POSTGRESQL,
        quote_char='"',
        text_cast="{field}::text",
        find_in_set="{value} = ANY(string_to_array({field}::text, ','))",
        unbounded_limit=None,
    ),
    Platform.SQLITE: PlatformCapabilities(
        platform=Platform.SQLITE,
        quote_char='"',
        text_cast="CAST({field} as TEXT)",
        find_in_set="',' || {field} || ',' LIKE '%,' || {value} || ',%'",
        unbounded_limit="-1",
    ),
}


def get_capabilities(platform: Platform) -> PlatformCapabilities:
    """Look up the capability entry of a platform.

    Raises:
        QueryBuilderError: PLATFORM_NOT_SUPPORTED if the platform has no entry
    """
    try:
        return _CAPABILITIES[platform]
    except KeyError:
        raise platform_not_supported_error(
            f"No SQL capabilities registered for database platform '{platform}'",
            platform=str(platform),
        )
