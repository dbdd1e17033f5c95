from typing import Optional

from sqlcomposer.query_builder.restriction.base import QueryRestriction


class DeletedRestriction(QueryRestriction):
    """Hide soft-deleted records: ``<alias>.<delete> = 0``."""

    def build_expression(self, table_name, table_alias, ctrl, expr) -> Optional[str]:
        if not ctrl.delete:
            return None
        return expr.eq(f"{table_alias}.{ctrl.delete}", 0)
