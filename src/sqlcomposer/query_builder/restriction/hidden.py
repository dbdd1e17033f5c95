from typing import Optional

from sqlcomposer.query_builder.restriction.base import QueryRestriction


class HiddenRestriction(QueryRestriction):
    """Hide disabled records: ``<alias>.<disabled> = 0``."""

    def build_expression(self, table_name, table_alias, ctrl, expr) -> Optional[str]:
        column = ctrl.enablecolumns.disabled
        if not column:
            return None
        return expr.eq(f"{table_alias}.{column}", 0)
