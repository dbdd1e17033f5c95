from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SQLComposerBaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SQLCOMPOSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    app_env: str = Field(
        default="dev",
        description="Deployment environment attached to every log record as `environment`"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level used when setup_logging() is called without a level"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the log level name and reject unknown levels."""
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{v}'. Expected one of: {', '.join(_LOG_LEVELS)}"
            )
        return level
