"""
Table registry.

Builds one CRUD object per model from DynamoDB settings so services and
commands share table wiring.

Dependencies: boto3
System role: Repository factory
"""

from functools import lru_cache
from typing import Any

from contract_engine.boundary.aws.dynamodb import DynamoTable
from contract_engine.boundary.db.CRUD import (
    AuditLogCRUD,
    BaseCRUD,
    ClauseCRUD,
    DynamicBlockCRUD,
    GenerationLogCRUD,
    MappingCRUD,
    ProviderCRUD,
    TemplateCRUD,
)
from contract_engine.configs.dynamodb import DynamoDBSettings


class TableRegistry:
    """All repositories for one environment."""

    def __init__(self, settings: DynamoDBSettings, region: str | None = None, resource: Any = None) -> None:
        """
        Initialize repositories.

        Args:
            settings: Table naming settings
            region: AWS region
            resource: Shared boto3 DynamoDB resource (tests inject a mock here)
        """
        self.settings = settings

        def table(model: str) -> DynamoTable:
            return DynamoTable(settings.table_name(model), region=region, resource=resource)

        self.providers = ProviderCRUD(table("Provider"))
        self.templates = TemplateCRUD(table("Template"))
        self.clauses = ClauseCRUD(table("Clause"))
        self.generation_logs = GenerationLogCRUD(table("ContractGenerationLog"))
        self.mappings = MappingCRUD(table("Mapping"))
        self.audit_logs = AuditLogCRUD(table("AuditLog"))
        self.dynamic_blocks = DynamicBlockCRUD(table("DynamicBlock"))

    def by_model(self, model: str) -> BaseCRUD:
        """
        Look up a repository by model name.

        Raises:
            ValueError: If the model is unknown
        """
        for crud in (
            self.providers,
            self.templates,
            self.clauses,
            self.generation_logs,
            self.mappings,
            self.audit_logs,
            self.dynamic_blocks,
        ):
            if crud.model_name == model:
                return crud
        raise ValueError(f"Unknown model: {model}")


@lru_cache
def get_table_registry() -> TableRegistry:
    """Get the registry for the configured environment."""
    from contract_engine.configs import get_settings

    settings = get_settings()
    return TableRegistry(settings.dynamodb, region=settings.aws.region)
