"""
DynamoDB table configuration.

Table names follow the Amplify convention {Model}-{api_id}-{env}.
Individual tables can be overridden through DYNAMODB_TABLE_OVERRIDES.

Dependencies: pydantic, pydantic_settings
System role: Table name resolution for the repositories
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MODEL_NAMES = (
    "Provider",
    "Template",
    "Clause",
    "ContractGenerationLog",
    "Mapping",
    "AuditLog",
    "DynamicBlock",
)


class DynamoDBSettings(BaseSettings):
    """DynamoDB table naming configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DYNAMODB_",
        case_sensitive=False,
        extra="ignore",
    )

    api_id: str = Field(default="local", description="AppSync API id used in table names")
    env: str = Field(default="dev", description="Amplify environment name")
    table_overrides: dict[str, str] = Field(
        default_factory=dict,
        description="Explicit table names keyed by model name",
    )

    def table_name(self, model: str) -> str:
        """
        Resolve the physical table name for a model.

        Args:
            model: Model name, e.g. "Provider"

        Returns:
            str: Table name
        """
        if model in self.table_overrides:
            return self.table_overrides[model]
        return f"{model}-{self.api_id}-{self.env}"
