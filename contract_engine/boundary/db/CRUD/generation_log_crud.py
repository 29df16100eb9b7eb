"""
Contract generation log CRUD operations.

Dependencies: boto3
System role: Contract generation history persistence
"""

from typing import Any

from boto3.dynamodb.conditions import Attr

from contract_engine.boundary.db.CRUD.base_crud import BaseCRUD


class GenerationLogCRUD(BaseCRUD):
    """CRUD operations for ContractGenerationLog items."""

    model_name = "ContractGenerationLog"

    def get_by_provider(self, provider_id: str) -> list[dict[str, Any]]:
        return self.get_all(Attr("providerId").eq(provider_id))

    def get_by_contract_year(self, year: str) -> list[dict[str, Any]]:
        return self.get_all(Attr("contractYear").eq(str(year)))

    def get_by_status(self, status: str) -> list[dict[str, Any]]:
        return self.get_all(Attr("status").eq(status))
