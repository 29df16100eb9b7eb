"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: contract_engine.configs, contract_engine.application, contract_engine.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends

from contract_engine.application.services import (
    AuditService,
    ClauseService,
    ContractService,
    DynamicBlockService,
    EmailService,
    MaintenanceService,
    ProviderService,
    TemplateService,
    UserService,
)
from contract_engine.boundary.aws.cognito_client import CognitoAdminClient
from contract_engine.boundary.aws.contract_storage import ImmutableContractStorage
from contract_engine.boundary.aws.s3_client import S3StorageClient
from contract_engine.boundary.aws.ses_client import SesEmailClient
from contract_engine.boundary.db.registry import TableRegistry
from contract_engine.configs import Settings, get_settings


class ServiceCache:
    """Container for cached AWS clients."""

    def __init__(self):
        self._registry = None
        self._s3_client = None
        self._cognito_client = None
        self._ses_client = None
        self._storage = None

    @property
    def registry(self) -> TableRegistry:
        """Get cached table registry."""
        if self._registry is None:
            settings = get_settings()
            self._registry = TableRegistry(settings.dynamodb, region=settings.aws.region)
        return self._registry

    @property
    def s3_client(self) -> S3StorageClient:
        """Get cached S3 storage client."""
        if self._s3_client is None:
            settings = get_settings()
            self._s3_client = S3StorageClient(
                bucket=settings.s3_storage.bucket,
                region=settings.aws.region,
            )
        return self._s3_client

    @property
    def cognito_client(self) -> CognitoAdminClient:
        """Get cached Cognito admin client."""
        if self._cognito_client is None:
            settings = get_settings()
            self._cognito_client = CognitoAdminClient(
                user_pool_id=settings.cognito.user_pool_id,
                region=settings.aws.region,
            )
        return self._cognito_client

    @property
    def ses_client(self) -> SesEmailClient:
        """Get cached SES client."""
        if self._ses_client is None:
            settings = get_settings()
            self._ses_client = SesEmailClient(
                from_email=settings.email.from_email,
                region=settings.aws.region,
            )
        return self._ses_client

    @property
    def storage(self) -> ImmutableContractStorage:
        """Get cached immutable contract storage."""
        if self._storage is None:
            self._storage = ImmutableContractStorage(self.s3_client, get_settings().s3_storage)
        return self._storage

    def clear(self) -> None:
        """Clear all cached instances."""
        self._registry = None
        self._s3_client = None
        self._cognito_client = None
        self._ses_client = None
        self._storage = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_cognito_client() -> CognitoAdminClient:
    """Cognito admin client, used for token resolution and user admin."""
    return get_service_cache().cognito_client


def get_audit_service() -> AuditService:
    return AuditService(get_service_cache().registry.audit_logs)


def get_email_service(settings: Settings = Depends(get_settings_dependency)) -> EmailService:
    return EmailService(get_service_cache().ses_client, settings.email)


def get_provider_service(audit: AuditService = Depends(get_audit_service)) -> ProviderService:
    """
    Get provider service instance.

    Args:
        audit: Audit service (injected via Depends)

    Returns:
        ProviderService: Provider service bound to the provider table
    """
    return ProviderService(get_service_cache().registry.providers, audit)


def get_template_service(
    audit: AuditService = Depends(get_audit_service),
    settings: Settings = Depends(get_settings_dependency),
) -> TemplateService:
    """
    Get template service instance.

    Args:
        audit: Audit service (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        TemplateService: Template service with table and bucket access
    """
    cache = get_service_cache()
    return TemplateService(
        templates=cache.registry.templates,
        mappings=cache.registry.mappings,
        s3=cache.s3_client,
        settings=settings.s3_storage,
        audit=audit,
    )


def get_clause_service() -> ClauseService:
    registry = get_service_cache().registry
    return ClauseService(registry.clauses, registry.providers)


def get_contract_service(audit: AuditService = Depends(get_audit_service)) -> ContractService:
    """
    Get contract service instance.

    Returns:
        ContractService: Generation service wired to every table it reads
    """
    cache = get_service_cache()
    registry = cache.registry
    return ContractService(
        providers=registry.providers,
        templates=registry.templates,
        mappings=registry.mappings,
        clauses=registry.clauses,
        generation_logs=registry.generation_logs,
        s3=cache.s3_client,
        storage=cache.storage,
        audit=audit,
    )


def get_dynamic_block_service() -> DynamicBlockService:
    return DynamicBlockService(get_service_cache().registry.dynamic_blocks)


def get_user_service(
    email_service: EmailService = Depends(get_email_service),
    settings: Settings = Depends(get_settings_dependency),
) -> UserService:
    """
    Get user service instance.

    Args:
        email_service: Email service (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        UserService: Cognito user administration service
    """
    return UserService(get_service_cache().cognito_client, email_service, settings.cognito)


def get_maintenance_service(settings: Settings = Depends(get_settings_dependency)) -> MaintenanceService:
    cache = get_service_cache()
    return MaintenanceService(
        registry=cache.registry,
        s3=cache.s3_client,
        cognito=cache.cognito_client,
        storage=cache.storage,
        settings=settings,
    )
