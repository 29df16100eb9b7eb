"""
CRUD operations for DynamoDB tables.

Exports the base CRUD class and model-specific CRUD implementations.
Instances are built per table by TableRegistry.

Usage:
    from contract_engine.boundary.db.registry import get_table_registry

    registry = get_table_registry()
    provider = registry.providers.get_by_id(provider_id)
"""

from contract_engine.boundary.db.CRUD.base_crud import BaseCRUD
from contract_engine.boundary.db.CRUD.provider_crud import ProviderCRUD
from contract_engine.boundary.db.CRUD.template_crud import TemplateCRUD
from contract_engine.boundary.db.CRUD.clause_crud import ClauseCRUD
from contract_engine.boundary.db.CRUD.generation_log_crud import GenerationLogCRUD
from contract_engine.boundary.db.CRUD.mapping_crud import MappingCRUD
from contract_engine.boundary.db.CRUD.audit_log_crud import AuditLogCRUD
from contract_engine.boundary.db.CRUD.dynamic_block_crud import DynamicBlockCRUD

__all__ = [
    "BaseCRUD",
    "ProviderCRUD",
    "TemplateCRUD",
    "ClauseCRUD",
    "GenerationLogCRUD",
    "MappingCRUD",
    "AuditLogCRUD",
    "DynamicBlockCRUD",
]
