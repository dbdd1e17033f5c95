"""Query restrictions.

Restrictions add table-scoped predicates (soft delete, hidden flag, start
and end time, ...) to every SELECT statement a
:class:`~sqlcomposer.query_builder.QueryBuilder` emits.
"""

from sqlcomposer.query_builder.restriction.base import EnforceableQueryRestriction, QueryRestriction
from sqlcomposer.query_builder.restriction.container import DefaultRestrictionContainer, RestrictionContainer
from sqlcomposer.query_builder.restriction.deleted import DeletedRestriction
from sqlcomposer.query_builder.restriction.end_time import EndTimeRestriction
from sqlcomposer.query_builder.restriction.frontend_group import FrontendGroupRestriction
from sqlcomposer.query_builder.restriction.hidden import HiddenRestriction
from sqlcomposer.query_builder.restriction.registry import (
    resolve_additional_restrictions,
    resolve_restriction_type,
)
from sqlcomposer.query_builder.restriction.root_level import RootLevelRestriction
from sqlcomposer.query_builder.restriction.start_time import StartTimeRestriction
from sqlcomposer.query_builder.restriction.workspace import WorkspaceRestriction

__all__ = [
    "QueryRestriction",
    "EnforceableQueryRestriction",
    "RestrictionContainer",
    "DefaultRestrictionContainer",
    "DeletedRestriction",
    "HiddenRestriction",
    "StartTimeRestriction",
    "EndTimeRestriction",
    "FrontendGroupRestriction",
    "WorkspaceRestriction",
    "RootLevelRestriction",
    "resolve_restriction_type",
    "resolve_additional_restrictions",
]
