"""
Provider domain models and schemas.

Request/response schemas for provider operations.

Dependencies: pydantic
System role: Provider API contracts
"""

from typing import Any

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from contract_engine.core.csv_upload import ColumnAnalysis, CsvRowError
from contract_engine.models.common import CamelModel


class ProviderResponse(CamelModel):
    """
    Provider record.

    Known attributes are typed; anything else stored on the item is passed
    through unchanged.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    employee_id: str | None = None
    name: str | None = None
    provider_type: str | None = None
    specialty: str | None = None
    subspecialty: str | None = None
    position_title: str | None = None
    compensation_year: str | None = None
    credentials: str | None = None
    base_salary: float | None = None
    start_date: str | None = None
    total_fte: float | None = Field(default=None, alias="totalFTE")
    template_tag: str | None = None
    dynamic_fields: dict[str, Any] = Field(default_factory=dict)
    owner: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class UpdateProviderRequest(CamelModel):
    """Partial provider update. Unlisted schema attributes are accepted as extras."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    name: str | None = Field(None, min_length=1)
    provider_type: str | None = None
    specialty: str | None = None
    credentials: str | None = None
    base_salary: float | None = Field(None, ge=0)
    start_date: str | None = None
    total_fte: float | None = Field(default=None, ge=0, alias="totalFTE")
    template_tag: str | None = None
    dynamic_fields: dict[str, Any] | None = None


class UploadSummaryResponse(CamelModel):
    """Outcome of a provider CSV upload."""

    success: bool
    total_rows: int
    valid_rows: int
    invalid_rows: int
    duplicate_rows: int
    created: int = 0
    replaced: int = 0
    validate_only: bool = False
    errors: list[CsvRowError] = Field(default_factory=list)
    column_analysis: ColumnAnalysis = Field(default_factory=ColumnAnalysis)


class DeleteAllProvidersResponse(CamelModel):
    deleted: int
    year: str | None = None
