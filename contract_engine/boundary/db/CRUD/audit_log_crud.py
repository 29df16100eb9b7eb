"""
Audit log CRUD operations.

Dependencies: boto3
System role: Audit trail persistence
"""

from typing import Any

from contract_engine.boundary.db.CRUD.base_crud import BaseCRUD


class AuditLogCRUD(BaseCRUD):
    """CRUD operations for AuditLog items."""

    model_name = "AuditLog"

    def get_recent(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Audit entries newest first."""
        items = sorted(self.get_all(), key=lambda item: item.get("timestamp", ""), reverse=True)
        return items[:limit] if limit else items
