"""
AWS account configuration.

Region and optional named profile shared by every boto3 client.

Dependencies: pydantic_settings
System role: AWS session configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AWSSettings(BaseSettings):
    """Settings for the shared boto3 session."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AWS_",
        case_sensitive=False,
        extra="ignore",
    )

    region: str = Field(default="us-east-2", description="AWS region for all services")
    profile: str | None = Field(
        default=None,
        description="Named AWS profile (falls back to the default credential chain)",
    )
