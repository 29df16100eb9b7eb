"""
Contract generation API endpoints.

Routes:
- POST /contracts/generate - Generate one contract
- POST /contracts/bulk - Generate contracts for many providers
- GET /contracts/logs - List generation logs
- GET /contracts/logs/{id}/download-url - Download URL of a generated contract
- GET /contracts/logs/{id}/verify - Verify a generated contract's hash
- GET /contracts/versions - Archived versions of a contract

Dependencies: contract_engine.application.services.contract_service, contract_engine.models
System role: Contract generation HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from contract_engine.api.deps import get_contract_service, get_current_user
from contract_engine.api.routers.error_handling import handle_errors
from contract_engine.application.services.contract_service import ContractService
from contract_engine.models.contract import (
    BulkGenerateRequest,
    BulkGenerateResponse,
    ContractVersionResponse,
    DownloadUrlResponse,
    GeneratedContractResponse,
    GenerateContractRequest,
    GenerationLogResponse,
    VerifyContractResponse,
)
from contract_engine.models.user import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.post("/generate", response_model=GeneratedContractResponse, status_code=201)
@handle_errors
async def generate_contract(
    request: GenerateContractRequest,
    user: CurrentUser = Depends(get_current_user),
    contract_service: ContractService = Depends(get_contract_service),
) -> GeneratedContractResponse:
    """
    Generate and archive a contract.

    Args:
        request: Provider, template and output type
        user: Authenticated caller
        contract_service: Injected ContractService

    Returns:
        GeneratedContractResponse: Stored contract with status and warnings

    Raises:
        HTTPException(400): Template cannot produce the requested output
        HTTPException(404): Provider or template not found
        HTTPException(502): Storage unavailable
    """
    logger.info(
        "Generating contract",
        extra={
            "provider_id": request.provider_id,
            "template_id": request.template_id,
            "output_type": request.output_type,
        },
    )
    result = await contract_service.generate_contract(
        request.provider_id,
        request.template_id,
        generated_by=user.username,
        output=request.output_type,
    )
    return GeneratedContractResponse(**result)


@router.post("/bulk", response_model=BulkGenerateResponse)
@handle_errors
async def bulk_generate(
    request: BulkGenerateRequest,
    user: CurrentUser = Depends(get_current_user),
    contract_service: ContractService = Depends(get_contract_service),
) -> BulkGenerateResponse:
    result = await contract_service.bulk_generate(
        request.provider_ids,
        generated_by=user.username,
        template_id=request.template_id,
        output=request.output_type,
    )
    return BulkGenerateResponse(**result)


@router.get("/logs", response_model=list[GenerationLogResponse])
@handle_errors
async def list_logs(
    provider_id: str | None = None,
    year: str | None = None,
    status: str | None = None,
    user: CurrentUser = Depends(get_current_user),
    contract_service: ContractService = Depends(get_contract_service),
) -> list[GenerationLogResponse]:
    logs = await contract_service.list_logs(provider_id=provider_id, year=year, status=status)
    return [GenerationLogResponse(**log) for log in logs]


@router.get("/logs/{log_id}/download-url", response_model=DownloadUrlResponse)
@handle_errors
async def get_download_url(
    log_id: str,
    user: CurrentUser = Depends(get_current_user),
    contract_service: ContractService = Depends(get_contract_service),
) -> DownloadUrlResponse:
    url = await contract_service.get_download_url(log_id)
    return DownloadUrlResponse(log_id=log_id, download_url=url)


@router.get("/logs/{log_id}/verify", response_model=VerifyContractResponse)
@handle_errors
async def verify_contract(
    log_id: str,
    user: CurrentUser = Depends(get_current_user),
    contract_service: ContractService = Depends(get_contract_service),
) -> VerifyContractResponse:
    return VerifyContractResponse(log_id=log_id, valid=await contract_service.verify_contract(log_id))


@router.get("/versions", response_model=list[ContractVersionResponse])
@handle_errors
async def list_versions(
    provider_id: str,
    template_id: str,
    year: str,
    user: CurrentUser = Depends(get_current_user),
    contract_service: ContractService = Depends(get_contract_service),
) -> list[ContractVersionResponse]:
    versions = await contract_service.list_versions(provider_id, template_id, year)
    return [ContractVersionResponse(**v) for v in versions]
