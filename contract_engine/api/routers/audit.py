"""
Audit log API endpoints.

Routes:
- GET /audit - List recent audit entries (admin)
- DELETE /audit - Clear the audit log (admin)

Dependencies: contract_engine.application.services.audit_service, contract_engine.models
System role: Audit trail HTTP API
"""

from fastapi import APIRouter, Depends, Query

from contract_engine.api.deps import get_audit_service, require_admin
from contract_engine.api.routers.error_handling import handle_errors
from contract_engine.application.services.audit_service import AuditService
from contract_engine.models.audit import AuditLogResponse, ClearAuditResponse
from contract_engine.models.user import CurrentUser

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("", response_model=list[AuditLogResponse])
@handle_errors
async def list_audit_logs(
    limit: int = Query(100, ge=1, le=1000),
    admin: CurrentUser = Depends(require_admin),
    audit_service: AuditService = Depends(get_audit_service),
) -> list[AuditLogResponse]:
    return [AuditLogResponse(**entry) for entry in await audit_service.list_logs(limit)]


@router.delete("", response_model=ClearAuditResponse)
@handle_errors
async def clear_audit_logs(
    admin: CurrentUser = Depends(require_admin),
    audit_service: AuditService = Depends(get_audit_service),
) -> ClearAuditResponse:
    deleted = await audit_service.clear_logs()
    await audit_service.record("AUDIT_CLEARED", admin.username, {"deleted": deleted})
    return ClearAuditResponse(deleted=deleted)
