"""Service orchestrators."""

from .audit_service import AuditService
from .clause_service import ClauseService
from .contract_service import ContractService
from .dynamic_block_service import DynamicBlockService
from .email_service import EmailService
from .maintenance_service import MaintenanceService
from .provider_service import ProviderService
from .template_service import TemplateService
from .user_service import UserService

__all__ = [
    "AuditService",
    "ClauseService",
    "ContractService",
    "DynamicBlockService",
    "EmailService",
    "MaintenanceService",
    "ProviderService",
    "TemplateService",
    "UserService",
]
