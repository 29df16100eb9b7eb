"""
Contract generation models and schemas.

Dependencies: pydantic
System role: Contract generation API contracts
"""

from typing import Literal

from pydantic import Field

from contract_engine.models.common import CamelModel

OutputType = Literal["docx", "html"]
GenerationStatus = Literal["SUCCESS", "PARTIAL_SUCCESS", "FAILED"]


class GenerateContractRequest(CamelModel):
    provider_id: str = Field(..., min_length=1)
    template_id: str = Field(..., min_length=1)
    output_type: OutputType = "docx"


class BulkGenerateRequest(CamelModel):
    """Generate for many providers; without template_id each provider's templateTag decides."""

    provider_ids: list[str] = Field(..., min_length=1)
    template_id: str | None = None
    output_type: OutputType = "docx"


class GeneratedContractResponse(CamelModel):
    log_id: str
    contract_id: str
    provider_id: str
    template_id: str
    contract_year: str
    file_name: str
    s3_key: str
    file_hash: str
    download_url: str | None = None
    status: GenerationStatus
    warnings: list[str] = Field(default_factory=list)
    generated_at: str


class BulkGenerateItem(CamelModel):
    provider_id: str
    success: bool
    template_id: str | None = None
    log_id: str | None = None
    status: GenerationStatus | None = None
    error: str | None = None


class BulkGenerateResponse(CamelModel):
    total: int
    succeeded: int
    failed: int
    items: list[BulkGenerateItem]


class GenerationLogResponse(CamelModel):
    id: str
    provider_id: str
    contract_year: str | None = None
    template_id: str | None = None
    generated_at: str | None = None
    generated_by: str | None = None
    output_type: str | None = None
    status: GenerationStatus
    file_url: str | None = None
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class DownloadUrlResponse(CamelModel):
    log_id: str
    download_url: str


class VerifyContractResponse(CamelModel):
    log_id: str
    valid: bool


class ContractVersionResponse(CamelModel):
    contract_id: str
    provider_id: str | None = None
    provider_name: str | None = None
    template_id: str | None = None
    template_name: str | None = None
    generated_at: str
    file_name: str | None = None
    status: str = "SUCCESS"
    file_size: int | None = None
    permanent_url: str | None = None
    version: str
