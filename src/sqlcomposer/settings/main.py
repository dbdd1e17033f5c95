from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .base import SQLComposerBaseSettings
from .database import DatabaseSettings
from .restrictions import RestrictionSettings


class _Settings(SQLComposerBaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="SQLCOMPOSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    database: DatabaseSettings = Field(
        default_factory=DatabaseSettings,
        description="Database connection configuration"
    )
    restrictions: RestrictionSettings = Field(
        default_factory=RestrictionSettings,
        description="Default query restriction configuration"
    )
    schema_file: Optional[Path] = Field(
        default=None,
        description="JSON file holding the table control configuration"
    )


# Singleton instance
_settings: Optional[_Settings] = None


def get_settings(force_reload: bool = False) -> _Settings:
    """Get the singleton settings instance.

    Settings are read from ``SQLCOMPOSER_*`` environment variables and the
    ``.env`` file on first access and reused afterwards.

    Args:
        force_reload: If True, creates a new settings instance even if
                     one already exists. Useful for testing or when
                     environment variables have changed.

    Returns:
        The singleton settings instance

    Example:
        ```python
        settings = get_settings()
        assert settings is get_settings()

        new_settings = get_settings(force_reload=True)
        assert new_settings is not settings
        ```
    """
    global _settings

    if _settings is None or force_reload:
        _settings = _Settings()

    return _settings


def _reload_settings() -> _Settings:
    """Force reload of settings.

    This is primarily for testing purposes where you need to reset
    the singleton instance.
    """
    global _settings
    _settings = None
    return get_settings(force_reload=True)
