"""Restriction settings.

Configuration of the restrictions every query builder applies by default
and of the context values the restrictions compare against.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class RestrictionOptions(BaseModel):
    """Options of one additional restriction type."""

    disabled: bool = Field(
        default=False,
        description="Keep the entry registered but do not add it to containers"
    )


class RestrictionSettings(BaseModel):
    """Default restriction configuration.

    Environment variables use the nested delimiter, for example::

        SQLCOMPOSER_RESTRICTIONS__WORKSPACE_ID=3
        SQLCOMPOSER_RESTRICTIONS__ADDITIONAL_QUERY_RESTRICTIONS='{"myext.restrictions.TenantRestriction": {"disabled": false}}'
    """

    additional_query_restrictions: Dict[str, RestrictionOptions] = Field(
        default_factory=dict,
        description=(
            "Dotted import paths of restriction classes added to every default "
            "restriction container, mapped to their options"
        )
    )
    access_time: Optional[int] = Field(
        default=None,
        ge=0,
        description="Unix timestamp compared against start and end time columns, now when unset"
    )
    workspace_id: int = Field(
        default=0,
        ge=0,
        description="Workspace whose records are visible, 0 is the live workspace"
    )
    frontend_group_ids: List[int] = Field(
        default=[0, -1],
        description="Frontend user group ids granted access by the frontend group restriction"
    )

    @field_validator("additional_query_restrictions")
    @classmethod
    def validate_restriction_paths(cls, v: Dict[str, RestrictionOptions]) -> Dict[str, RestrictionOptions]:
        for path in v:
            if "." not in path.strip(". "):
                raise ValueError(
                    f"Invalid restriction type '{path}'. "
                    f"Expected a dotted path such as 'package.module.ClassName'."
                )
        return v
