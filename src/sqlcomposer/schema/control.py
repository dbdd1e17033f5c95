"""Table control configuration.

Restrictions decide which predicate to add for a table by reading the
table's control section: which column marks a record as deleted, which
columns enable or disable it, whether it is versioned in workspaces. This
module models that section and a read-only registry of it, keyed by table
name. The shape follows the ``ctrl`` arrays of TCA configuration files so
that existing JSON dumps can be loaded unchanged.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sqlcomposer.common.exceptions import ErrorCode, configuration_error


class EnableColumns(BaseModel):
    """Columns that enable or disable a record.

    Examples:
        >>> EnableColumns(disabled="hidden", starttime="starttime")
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    disabled: Optional[str] = Field(default=None, description="Boolean-like hidden flag column")
    starttime: Optional[str] = Field(default=None, description="Unix timestamp the record becomes visible")
    endtime: Optional[str] = Field(default=None, description="Unix timestamp the record stops being visible")
    fe_group: Optional[str] = Field(default=None, description="Comma separated list of allowed group ids")


class TableControl(BaseModel):
    """Control section of one table.

    Unknown keys are kept (``extra="allow"``) so a full ``ctrl`` array can be
    loaded; only the keys below influence restrictions.
    """
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    delete: Optional[str] = Field(default=None, description="Soft delete flag column")
    enablecolumns: EnableColumns = Field(default_factory=EnableColumns)
    versioning_ws: bool = Field(default=False, alias="versioningWS")
    root_level: int = Field(default=0, alias="rootLevel")

    @field_validator("delete")
    @classmethod
    def validate_delete(cls, v: Optional[str]) -> Optional[str]:
        """Normalize an empty column name to ``None``."""
        if v is not None and not v.strip():
            return None
        return v


_EMPTY_CONTROL = TableControl()


class SchemaRegistry:
    """Read-only lookup of :class:`TableControl` by table name.

    Tables without configuration resolve to an empty control section, which
    makes every restriction skip them.

    Example:
        >>> schema = SchemaRegistry.from_dict({
        ...     "pages": {"ctrl": {"delete": "deleted", "enablecolumns": {"disabled": "hidden"}}},
        ... })
        >>> schema.get("pages").delete
        'deleted'
        >>> schema.get("unknown").delete is None
        True
    """

    def __init__(self, tables: Optional[Mapping[str, TableControl]] = None):
        self._tables: Dict[str, TableControl] = dict(tables or {})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SchemaRegistry":
        """Build a registry from ``{table: {"ctrl": {...}}}`` or ``{table: {...}}``.

        Raises:
            QueryBuilderError: CONFIG_INVALID if a table section does not validate
        """
        tables: Dict[str, TableControl] = {}
        for table_name, section in data.items():
            if isinstance(section, TableControl):
                tables[table_name] = section
                continue
            ctrl = section.get("ctrl", section) if isinstance(section, Mapping) else section
            try:
                tables[table_name] = TableControl.model_validate(ctrl)
            except ValueError as e:
                raise configuration_error(
                    f"Invalid control configuration for table '{table_name}'",
                    config_key=table_name,
                    error_code=ErrorCode.CONFIG_INVALID,
                    cause=e,
                )
        return cls(tables)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SchemaRegistry":
        """Load a registry from a JSON file.

        Raises:
            QueryBuilderError: CONFIG_MISSING if the file does not exist,
                CONFIG_INVALID if it is not valid JSON
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise configuration_error(
                f"Schema configuration file not found: {file_path}",
                config_key="schema_file",
                error_code=ErrorCode.CONFIG_MISSING,
            )
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise configuration_error(
                f"Schema configuration file is not valid JSON: {file_path}",
                config_key="schema_file",
                error_code=ErrorCode.CONFIG_INVALID,
                cause=e,
            )
        return cls.from_dict(data)

    def get(self, table_name: str) -> TableControl:
        return self._tables.get(table_name, _EMPTY_CONTROL)

    def __contains__(self, table_name: object) -> bool:
        return table_name in self._tables

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)
