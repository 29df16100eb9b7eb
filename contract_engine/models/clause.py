"""
Clause domain models and schemas.

Dependencies: pydantic
System role: Clause API contracts
"""

from typing import Any, Literal

from pydantic import Field

from contract_engine.models.common import CamelModel

ConditionOperator = Literal["equals", "notEquals", "greaterThan", "lessThan", "exists", "notExists"]


class ClauseCondition(CamelModel):
    """A provider attribute test."""

    field: str = Field(..., min_length=1)
    operator: ConditionOperator
    value: Any = None


class CreateClauseRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    text: str = Field(..., min_length=1)
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    applicable_provider_types: list[str] = Field(default_factory=list)
    conditions: list[ClauseCondition] = Field(default_factory=list)


class UpdateClauseRequest(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    text: str | None = Field(None, min_length=1)
    category: str | None = None
    tags: list[str] | None = None
    applicable_provider_types: list[str] | None = None
    conditions: list[ClauseCondition] | None = None


class ClauseResponse(CamelModel):
    id: str
    title: str
    text: str
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    applicable_provider_types: list[str] = Field(default_factory=list)
    conditions: list[ClauseCondition] = Field(default_factory=list)
    owner: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
