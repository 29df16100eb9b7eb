"""
Template CRUD operations.

Dependencies: boto3
System role: Template persistence operations
"""

from typing import Any

from boto3.dynamodb.conditions import Attr

from contract_engine.boundary.db.CRUD.base_crud import BaseCRUD


class TemplateCRUD(BaseCRUD):
    """CRUD operations for Template items."""

    model_name = "Template"

    def get_by_contract_year(self, year: str) -> list[dict[str, Any]]:
        return self.get_all(Attr("contractYear").eq(str(year)))

    def get_by_name(self, name: str) -> dict[str, Any] | None:
        """First template with an exact name (used to resolve templateTag)."""
        matches = self.get_all(Attr("name").eq(name))
        return matches[0] if matches else None
