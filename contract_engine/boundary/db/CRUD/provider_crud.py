"""
Provider CRUD operations.

Dependencies: boto3
System role: Provider persistence operations
"""

from typing import Any

from boto3.dynamodb.conditions import Attr

from contract_engine.boundary.db.CRUD.base_crud import BaseCRUD


class ProviderCRUD(BaseCRUD):
    """CRUD operations for Provider items."""

    model_name = "Provider"

    def get_by_compensation_year(self, year: str) -> list[dict[str, Any]]:
        """All providers of one compensation year."""
        return self.get_all(Attr("compensationYear").eq(str(year)))

    def get_by_employee_year(self, employee_id: str, year: str) -> dict[str, Any] | None:
        """The provider with an employee id in a compensation year, if any."""
        matches = self.get_all(
            Attr("employeeId").eq(employee_id) & Attr("compensationYear").eq(str(year))
        )
        return matches[0] if matches else None

    def get_ids(self, year: str | None = None) -> list[str]:
        """Ids of every provider, optionally for one year."""
        condition = Attr("compensationYear").eq(str(year)) if year else None
        return [item["id"] for item in self.table.scan_all(condition, projection=["id"])]
