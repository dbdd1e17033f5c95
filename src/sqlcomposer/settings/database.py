"""Database connection settings."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from sqlcomposer.constants import Platform


class DatabaseSettings(BaseModel):
    """Settings of the SQLAlchemy engine backing a :class:`Connection`.

    ``platform`` overrides the platform detected from the engine dialect,
    e.g. to force MariaDB rendering over a ``mysql+pymysql`` URL.
    """

    url: str = Field(
        default="sqlite://",
        description="SQLAlchemy database URL"
    )
    platform: Optional[Platform] = Field(
        default=None,
        description="Database platform override, detected from the dialect when unset"
    )
    echo: bool = Field(
        default=False,
        description="Log every statement through SQLAlchemy's engine logger"
    )
    pool_pre_ping: bool = Field(
        default=True,
        description="Test pooled connections for liveness before use"
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Database URL must not be empty")
        return v.strip()
