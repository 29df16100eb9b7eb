"""
Core business logic module.

Contains the provider schema, CSV validation, template processing and the
exception hierarchy. Nothing in this package talks to AWS.
"""

from contract_engine.core.exceptions import (
    AwsServiceError,
    ContractEngineException,
    CsvParsingError,
    NotFoundError,
    OwnershipError,
    StorageError,
    TemplateRenderError,
    ValidationError,
)

__all__ = [
    "ContractEngineException",
    "ValidationError",
    "NotFoundError",
    "OwnershipError",
    "CsvParsingError",
    "TemplateRenderError",
    "StorageError",
    "AwsServiceError",
]
