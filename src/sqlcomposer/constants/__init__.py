"""Constants module for sqlcomposer.

This module contains all constant values and enumerations used throughout
the package. It has no dependencies on other sqlcomposer modules.

Organization:
    - sql: Query, join and parameter type constants
    - platform: Supported database platforms
"""

from sqlcomposer.constants.platform import Platform
from sqlcomposer.constants.sql import JoinType, ParameterType, QueryType

__all__ = [
    "Platform",
    "QueryType",
    "JoinType",
    "ParameterType",
]
