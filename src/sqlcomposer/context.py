"""Request context values compared by restrictions."""

import time
from dataclasses import dataclass, field
from typing import Optional, Tuple

from sqlcomposer.settings import RestrictionSettings


@dataclass(frozen=True)
class Context:
    """Values a restriction needs about the current request.

    Attributes:
        access_time: Unix timestamp of the request, ``None`` resolves to now
        workspace_id: Workspace the request reads from, 0 is live
        frontend_group_ids: Frontend user groups of the visitor
    """

    access_time: Optional[int] = None
    workspace_id: int = 0
    frontend_group_ids: Tuple[int, ...] = field(default=(0, -1))

    def get_access_time(self) -> int:
        """Configured access time, or the current time rounded down to the minute."""
        if self.access_time is not None:
            return self.access_time
        now = int(time.time())
        return now - now % 60

    @classmethod
    def from_settings(cls, settings: RestrictionSettings) -> "Context":
        return cls(
            access_time=settings.access_time,
            workspace_id=settings.workspace_id,
            frontend_group_ids=tuple(settings.frontend_group_ids),
        )
