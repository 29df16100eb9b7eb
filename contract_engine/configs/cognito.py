"""
Cognito user pool configuration.

Dependencies: pydantic_settings
System role: Authentication and user administration configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CognitoSettings(BaseSettings):
    """Cognito user pool settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COGNITO_",
        case_sensitive=False,
        extra="ignore",
    )

    user_pool_id: str = Field(default="", description="Cognito user pool id")
    admin_group: str = Field(default="Admin", description="Group granting admin routes")
    temporary_password_length: int = Field(
        default=14,
        description="Length of generated temporary passwords",
    )
