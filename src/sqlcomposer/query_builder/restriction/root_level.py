from typing import Iterable, Optional

from sqlcomposer.query_builder.restriction.base import QueryRestriction


class RootLevelRestriction(QueryRestriction):
    """Limit records to the root level: ``<alias>.pid = 0``.

    Args:
        tables: Table names or aliases to restrict, all queried tables when empty
    """

    def __init__(self, tables: Optional[Iterable[str]] = None):
        self.tables = list(tables or [])

    def build_expression(self, table_name, table_alias, ctrl, expr) -> Optional[str]:
        if self.tables and table_alias not in self.tables and table_name not in self.tables:
            return None
        return expr.eq(f"{table_alias}.pid", 0)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tables={self.tables!r})"
