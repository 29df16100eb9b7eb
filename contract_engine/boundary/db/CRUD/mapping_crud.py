"""
Template field mapping CRUD operations.

Dependencies: boto3
System role: Placeholder -> provider column mapping persistence
"""

from typing import Any

from boto3.dynamodb.conditions import Attr

from contract_engine.boundary.db.CRUD.base_crud import BaseCRUD


class MappingCRUD(BaseCRUD):
    """CRUD operations for Mapping items."""

    model_name = "Mapping"

    def get_by_template(self, template_id: str) -> list[dict[str, Any]]:
        return self.get_all(Attr("templateId").eq(template_id))

    def delete_by_template(self, template_id: str) -> int:
        """Delete every mapping of a template."""
        return self.delete_many(item["id"] for item in self.get_by_template(template_id))
