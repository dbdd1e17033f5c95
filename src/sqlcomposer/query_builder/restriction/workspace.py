from typing import Optional

from sqlcomposer.query_builder.expression import CompositeExpression
from sqlcomposer.query_builder.restriction.base import QueryRestriction


class WorkspaceRestriction(QueryRestriction):
    """Limit versioned tables to live records and records of one workspace.

    Only tables with ``versioningWS`` enabled are restricted. Offline
    versions of live records (``t3ver_oid > 0``) are always excluded; the
    overlay of a workspace version onto its live record is not done here.

    Args:
        workspace_id: Workspace to include besides live (``0``)
    """

    def __init__(self, workspace_id: int = 0):
        self.workspace_id = int(workspace_id)

    @classmethod
    def from_context(cls, context) -> "WorkspaceRestriction":
        return cls(context.workspace_id)

    def build_expression(self, table_name, table_alias, ctrl, expr) -> Optional[CompositeExpression]:
        if not ctrl.versioning_ws:
            return None
        if self.workspace_id == 0:
            workspace_check = expr.eq(f"{table_alias}.t3ver_wsid", 0)
        else:
            workspace_check = expr.in_(f"{table_alias}.t3ver_wsid", [0, self.workspace_id])
        return expr.and_(
            workspace_check,
            expr.eq(f"{table_alias}.t3ver_oid", 0),
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(workspace_id={self.workspace_id!r})"
