"""Table control configuration consumed by query restrictions."""

from sqlcomposer.schema.control import EnableColumns, SchemaRegistry, TableControl

__all__ = [
    "EnableColumns",
    "SchemaRegistry",
    "TableControl",
]
