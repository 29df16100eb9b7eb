"""
Audit service.

Records and lists administrative actions.

Dependencies: contract_engine.boundary.db.CRUD
System role: Audit trail use cases
"""

import asyncio
import logging
from typing import Any

from contract_engine.boundary.db.CRUD.audit_log_crud import AuditLogCRUD
from contract_engine.boundary.db.base import utc_now_iso

logger = logging.getLogger(__name__)


class AuditService:
    """Audit trail use cases."""

    def __init__(self, audit_logs: AuditLogCRUD) -> None:
        self.audit_logs = audit_logs

    async def record(self, action: str, user: str | None, details: dict[str, Any] | None = None) -> dict:
        """
        Record an action.

        Args:
            action: Action name, e.g. "PROVIDERS_UPLOADED"
            user: Acting username
            details: Action context

        Returns:
            dict: Stored audit entry
        """
        entry = await asyncio.to_thread(
            self.audit_logs.create,
            action=action,
            user=user or "system",
            timestamp=utc_now_iso(),
            details=details or {},
        )
        logger.info("Audit recorded", extra={"action": action, "user": user})
        return entry

    async def list_logs(self, limit: int | None = 100) -> list[dict]:
        """Audit entries newest first."""
        return await asyncio.to_thread(self.audit_logs.get_recent, limit)

    async def clear_logs(self) -> int:
        """Delete every audit entry. Returns the number deleted."""
        entries = await asyncio.to_thread(self.audit_logs.get_all)
        deleted = await asyncio.to_thread(self.audit_logs.delete_many, [entry["id"] for entry in entries])
        logger.warning("Audit log cleared", extra={"deleted": deleted})
        return deleted
