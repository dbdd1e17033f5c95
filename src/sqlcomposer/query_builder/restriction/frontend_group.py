from typing import Iterable, Optional

from sqlcomposer.query_builder.expression import CompositeExpression
from sqlcomposer.query_builder.restriction.base import QueryRestriction


class FrontendGroupRestriction(QueryRestriction):
    """Show records without access groups or shared with one of the given groups.

    A record is visible if its group column is empty, NULL, ``'0'`` or
    lists one of ``group_ids``.

    Example:
        >>> FrontendGroupRestriction([0, -2, 5])
    """

    def __init__(self, group_ids: Optional[Iterable[int]] = None):
        self.group_ids = [0, -1] if group_ids is None else [int(group_id) for group_id in group_ids]

    @classmethod
    def from_context(cls, context) -> "FrontendGroupRestriction":
        return cls(context.frontend_group_ids)

    def build_expression(self, table_name, table_alias, ctrl, expr) -> Optional[CompositeExpression]:
        column = ctrl.enablecolumns.fe_group
        if not column:
            return None
        field_name = f"{table_alias}.{column}"
        checks = [
            expr.eq(field_name, expr.literal("")),
            expr.is_null(field_name),
            expr.eq(field_name, expr.literal("0")),
        ]
        for group_id in self.group_ids:
            checks.append(expr.in_set(field_name, str(group_id)))
        return expr.or_(*checks)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(group_ids={self.group_ids!r})"
