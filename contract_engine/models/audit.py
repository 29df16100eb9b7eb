"""
Audit log models.

Dependencies: pydantic
System role: Audit API contracts
"""

from typing import Any

from pydantic import Field

from contract_engine.models.common import CamelModel


class AuditLogResponse(CamelModel):
    id: str
    action: str
    user: str | None = None
    timestamp: str
    details: dict[str, Any] = Field(default_factory=dict)


class ClearAuditResponse(CamelModel):
    deleted: int
