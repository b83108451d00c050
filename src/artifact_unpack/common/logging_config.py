"""Shared logging configuration."""

from typing import Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator


class LoggingConfig(BaseModel):
    """Logging section shared by every artifact_unpack config schema."""

    model_config = ConfigDict(extra='forbid')

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level"
    )
    format: Literal["simple", "detailed", "json"] = Field(
        default="json",
        description="Console log format"
    )
    file: str | None = Field(default=None, description="Optional log file path (always JSON)")

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator('format', mode='before')
    @classmethod
    def normalize_format(cls, v: str) -> str:
        if isinstance(v, str):
            return v.lower()
        return v
