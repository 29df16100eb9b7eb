"""API-specific dependencies."""

from .auth import get_current_user, require_admin
from .dependencies import (
    get_audit_service,
    get_clause_service,
    get_cognito_client,
    get_contract_service,
    get_dynamic_block_service,
    get_email_service,
    get_maintenance_service,
    get_provider_service,
    get_service_cache,
    get_settings_dependency,
    get_template_service,
    get_user_service,
)

__all__ = [
    "get_audit_service",
    "get_clause_service",
    "get_cognito_client",
    "get_contract_service",
    "get_current_user",
    "get_dynamic_block_service",
    "get_email_service",
    "get_maintenance_service",
    "get_provider_service",
    "get_service_cache",
    "get_settings_dependency",
    "get_template_service",
    "get_user_service",
    "require_admin",
]
