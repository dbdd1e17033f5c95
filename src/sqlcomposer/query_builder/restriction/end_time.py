from typing import Optional

from sqlcomposer.context import Context
from sqlcomposer.query_builder.expression import CompositeExpression
from sqlcomposer.query_builder.restriction.base import QueryRestriction


class EndTimeRestriction(QueryRestriction):
    """Hide records whose end time has passed.

    An end time of ``0`` means the record never expires.

    Args:
        access_time: Unix timestamp to compare with, the current minute when ``None``
    """

    def __init__(self, access_time: Optional[int] = None):
        self.access_time = access_time

    @classmethod
    def from_context(cls, context: Context) -> "EndTimeRestriction":
        return cls(context.access_time)

    def build_expression(self, table_name, table_alias, ctrl, expr) -> Optional[CompositeExpression]:
        column = ctrl.enablecolumns.endtime
        if not column:
            return None
        access_time = self.access_time if self.access_time is not None else Context().get_access_time()
        field_name = f"{table_alias}.{column}"
        return expr.or_(
            expr.eq(field_name, 0),
            expr.gt(field_name, int(access_time)),
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(access_time={self.access_time!r})"
