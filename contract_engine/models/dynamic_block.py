"""
Dynamic block models and schemas.

Dependencies: pydantic
System role: Dynamic block API contracts
"""

from typing import Any

from pydantic import Field

from contract_engine.models.common import CamelModel


class CreateDynamicBlockRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    placeholder: str = Field(..., min_length=1)
    output_type: str = "text"
    format: str | None = None
    conditions: list[dict[str, Any]] = Field(default_factory=list)
    always_include: list[dict[str, Any]] = Field(default_factory=list)


class UpdateDynamicBlockRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    placeholder: str | None = Field(None, min_length=1)
    output_type: str | None = None
    format: str | None = None
    conditions: list[dict[str, Any]] | None = None
    always_include: list[dict[str, Any]] | None = None


class DynamicBlockResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    placeholder: str
    output_type: str | None = None
    format: str | None = None
    conditions: list[dict[str, Any]] = Field(default_factory=list)
    always_include: list[dict[str, Any]] = Field(default_factory=list)
    owner: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
