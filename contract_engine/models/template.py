"""
Template domain models and schemas.

Request/response schemas for template and field-mapping operations.

Dependencies: pydantic
System role: Template API contracts
"""

from pydantic import Field

from contract_engine.core.template_processor import TemplateType
from contract_engine.models.common import CamelModel


class CreateTemplateRequest(CamelModel):
    """Request schema for creating an HTML template."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=4096)
    version: str = Field("1.0.0", pattern=r"^\d+\.\d+\.\d+$")
    type: TemplateType = "Schedule A"
    contract_year: str | None = None
    content: str | None = None
    clause_ids: list[str] = Field(default_factory=list)


class UpdateTemplateRequest(CamelModel):
    """Request schema for updating a template."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=4096)
    version: str | None = Field(None, pattern=r"^\d+\.\d+\.\d+$")
    type: TemplateType | None = None
    contract_year: str | None = None
    content: str | None = None
    clause_ids: list[str] | None = None


class TemplateResponse(CamelModel):
    """Response schema for template operations."""

    id: str
    name: str
    description: str | None = None
    version: str | None = None
    type: str | None = None
    contract_year: str | None = None
    s3_key: str | None = None
    content: str | None = None
    placeholders: list[str] = Field(default_factory=list)
    clause_ids: list[str] = Field(default_factory=list)
    owner: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class PlaceholdersResponse(CamelModel):
    template_id: str
    placeholders: list[str]


class MappingEntry(CamelModel):
    """One placeholder -> provider column mapping."""

    placeholder: str = Field(..., min_length=1)
    mapped_column: str = Field(..., min_length=1)


class SetMappingsRequest(CamelModel):
    mappings: list[MappingEntry]


class MappingResponse(MappingEntry):
    id: str
    template_id: str


class TemplateFileResponse(CamelModel):
    """Presigned download of a template's stored file."""

    template_id: str
    s3_key: str
    download_url: str
