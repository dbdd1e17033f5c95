from typing import Optional

from sqlcomposer.context import Context
from sqlcomposer.query_builder.restriction.base import QueryRestriction


class StartTimeRestriction(QueryRestriction):
    """Hide records whose start time lies after the access time.

    Args:
        access_time: Unix timestamp to compare with, the current minute when ``None``
    """

    def __init__(self, access_time: Optional[int] = None):
        self.access_time = access_time

    @classmethod
    def from_context(cls, context: Context) -> "StartTimeRestriction":
        return cls(context.access_time)

    def build_expression(self, table_name, table_alias, ctrl, expr) -> Optional[str]:
        column = ctrl.enablecolumns.starttime
        if not column:
            return None
        access_time = self.access_time if self.access_time is not None else Context().get_access_time()
        return expr.lte(f"{table_alias}.{column}", int(access_time))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(access_time={self.access_time!r})"
