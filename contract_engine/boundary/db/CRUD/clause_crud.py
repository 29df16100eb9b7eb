"""
Clause CRUD operations.

Dependencies: boto3
System role: Clause persistence operations
"""

from typing import Any

from boto3.dynamodb.conditions import Attr

from contract_engine.boundary.db.CRUD.base_crud import BaseCRUD


class ClauseCRUD(BaseCRUD):
    """CRUD operations for Clause items."""

    model_name = "Clause"

    def get_by_category(self, category: str) -> list[dict[str, Any]]:
        return self.get_all(Attr("category").eq(category))
