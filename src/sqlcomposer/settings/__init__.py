"""Settings module for sqlcomposer.

Configuration is built on Pydantic Settings and split by domain:

    - base.py: SQLComposerBaseSettings with the shared env configuration
    - database.py: SQLAlchemy engine settings
    - restrictions.py: default restrictions and their context values
    - main.py: the aggregating settings class and get_settings()

Configuration Sources (precedence order):
    1. Environment Variables (highest priority)
    2. ``.env`` file
    3. Default Values in code (lowest priority)

Environment Variable Naming:
    - Prefix: ``SQLCOMPOSER_``
    - Nested: double underscore, e.g. ``SQLCOMPOSER_DATABASE__URL``

Quick Start:
    >>> from sqlcomposer.settings import get_settings
    >>> settings = get_settings()
    >>> settings.database.url
    'sqlite://'
"""

from .main import _Settings, get_settings, _reload_settings
from .base import SQLComposerBaseSettings
from .database import DatabaseSettings
from .restrictions import RestrictionOptions, RestrictionSettings

__all__ = [
    "get_settings",
    "DatabaseSettings",
    "RestrictionOptions",
    "RestrictionSettings",
]
