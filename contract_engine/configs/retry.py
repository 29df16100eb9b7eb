"""
Retry configuration for AWS boundary calls.

Dependencies: pydantic_settings
System role: Backoff tuning for transient AWS errors
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Exponential backoff settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRY_",
        case_sensitive=False,
        extra="ignore",
    )

    max_attempts: int = Field(default=3, description="Total attempts including the first call")
    initial_wait: float = Field(default=1.0, description="First backoff delay in seconds")
    max_wait: float = Field(default=10.0, description="Upper bound on a single delay")
