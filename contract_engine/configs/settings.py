"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from contract_engine.configs.aws import AWSSettings
from contract_engine.configs.base import AppSettings
from contract_engine.configs.cognito import CognitoSettings
from contract_engine.configs.dynamodb import DynamoDBSettings
from contract_engine.configs.email import EmailSettings
from contract_engine.configs.retry import RetrySettings
from contract_engine.configs.s3_storage import S3StorageSettings


class Settings(AppSettings):
    """Unified application settings aggregating all config modules."""

    aws: AWSSettings = Field(default_factory=AWSSettings)
    s3_storage: S3StorageSettings = Field(default_factory=S3StorageSettings)
    dynamodb: DynamoDBSettings = Field(default_factory=DynamoDBSettings)
    cognito: CognitoSettings = Field(default_factory=CognitoSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from contract_engine.configs import get_settings
        settings = get_settings()
    """
    return Settings()
