"""
S3 storage bucket configuration.

Settings for the contract archive, template files and presigned URLs.

Dependencies: pydantic_settings
System role: S3 storage configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class S3StorageSettings(BaseSettings):
    """Settings for S3 storage operations."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="S3_STORAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="contractengine-storage",
        description="S3 bucket holding templates and generated contracts",
    )
    contracts_prefix: str = Field(
        default="contracts/immutable/",
        description="Key prefix of the authoritative contract archive",
    )
    metadata_prefix: str = Field(
        default="contracts/metadata/",
        description="Key prefix of contract metadata snapshots",
    )
    templates_prefix: str = Field(
        default="templates/",
        description="Key prefix of uploaded template files",
    )
    presigned_url_expiry: int = Field(
        default=3600,
        description="Presigned URL expiry in seconds (default 1 hour)",
    )
    permanent_url_expiry: int = Field(
        default=604800,
        le=604800,
        description="Expiry of archived contract URLs in seconds (SigV4 allows at most 7 days)",
    )
