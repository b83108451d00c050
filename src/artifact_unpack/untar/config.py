"""Configuration schema for archive extraction."""

from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator
from artifact_unpack.common import LoggingConfig, expand_path_variables

from .extractor import DEFAULT_CHUNK_SIZE


class ExtractionConfig(BaseModel):
    """Configuration for a single extraction."""

    model_config = ConfigDict(extra='forbid')

    dest_dir: str = Field(
        default="./extracted",
        description="Directory to extract the archive into (${VAR} placeholders allowed)"
    )
    archive_root: str = Field(
        default="",
        description="Leading directory prefix stripped from every entry name"
    )
    unlink_executables: Optional[bool] = Field(
        default=None,
        description="Remove existing files before writing executables (unset: host default)"
    )
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        ge=512,
        description="Bytes copied per read of an entry payload"
    )

    @field_validator('dest_dir')
    @classmethod
    def expand_dest_dir(cls, v: str) -> str:
        return expand_path_variables(v, app_name="artifact-unpack")


class UntarConfig(BaseModel):
    """Root configuration for the artifact-unpack command."""

    model_config = ConfigDict(extra='forbid')

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
