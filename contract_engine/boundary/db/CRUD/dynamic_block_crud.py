"""
Dynamic block CRUD operations.

Dependencies: boto3
System role: Dynamic block persistence operations
"""

from typing import Any

from boto3.dynamodb.conditions import Attr

from contract_engine.boundary.db.CRUD.base_crud import BaseCRUD


class DynamicBlockCRUD(BaseCRUD):
    """CRUD operations for DynamicBlock items."""

    model_name = "DynamicBlock"

    def get_by_placeholder(self, placeholder: str) -> list[dict[str, Any]]:
        return self.get_all(Attr("placeholder").eq(placeholder))
