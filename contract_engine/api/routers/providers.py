"""
Provider API endpoints.

Routes:
- POST /providers/upload - Upload provider CSV (multipart)
- GET /providers/csv-template - Download the sample upload CSV
- POST /providers/upload-errors - Export upload errors as CSV
- GET /providers - List providers
- GET /providers/count - Count providers
- GET /providers/{id} - Get provider
- PATCH /providers/{id} - Update provider
- DELETE /providers/{id} - Delete provider
- DELETE /providers - Delete all providers (admin)

Dependencies: contract_engine.application.services.provider_service, contract_engine.models
System role: Provider management HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from contract_engine.api.deps import get_current_user, get_provider_service, require_admin
from contract_engine.api.routers.error_handling import handle_errors
from contract_engine.application.services.provider_service import ProviderService
from contract_engine.core.csv_upload import (
    CsvRowError,
    CsvUploadOptions,
    export_errors_as_csv,
    generate_csv_template,
)
from contract_engine.core.exceptions import ValidationError
from contract_engine.models.common import CountResponse
from contract_engine.models.provider import (
    DeleteAllProvidersResponse,
    ProviderResponse,
    UpdateProviderRequest,
    UploadSummaryResponse,
)
from contract_engine.models.user import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/providers", tags=["providers"])

CSV_MEDIA_TYPE = "text/csv"


def _csv_attachment(content: str, file_name: str) -> Response:
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.post("/upload", response_model=UploadSummaryResponse)
@handle_errors
async def upload_providers(
    file: UploadFile = File(...),
    replace_year: bool = Form(False),
    validate_only: bool = Form(False),
    allow_extra_columns: bool = Form(True),
    skip_duplicates: bool = Form(True),
    user: CurrentUser = Depends(get_current_user),
    provider_service: ProviderService = Depends(get_provider_service),
) -> UploadSummaryResponse:
    """
    Upload a provider CSV.

    Args:
        file: CSV file
        replace_year: Delete existing providers of the uploaded years first
        validate_only: Validate without writing
        allow_extra_columns: Keep unknown columns as dynamic fields
        skip_duplicates: Report duplicate employee/year rows
        user: Authenticated caller
        provider_service: Injected ProviderService

    Returns:
        UploadSummaryResponse: Counts, errors and column analysis

    Raises:
        HTTPException(400): Not a CSV file
    """
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise ValidationError("Only .csv files are accepted", field="file")

    content = await file.read()
    logger.info(
        "Provider CSV received",
        extra={"file_name": file.filename, "size": len(content), "username": user.username},
    )
    options = CsvUploadOptions(
        allow_extra_columns=allow_extra_columns,
        skip_duplicates=skip_duplicates,
        validate_only=validate_only,
    )
    summary = await provider_service.upload_csv(
        content,
        owner=user.username,
        replace_year=replace_year,
        options=options,
    )
    return UploadSummaryResponse(**summary)


@router.get("/csv-template")
async def download_csv_template(user: CurrentUser = Depends(get_current_user)) -> Response:
    """Sample upload file with every schema column."""
    return _csv_attachment(generate_csv_template(), "provider_template.csv")


@router.post("/upload-errors")
async def export_upload_errors(
    errors: list[CsvRowError],
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    """Upload errors as a CSV report."""
    return _csv_attachment(export_errors_as_csv(errors), "upload_errors.csv")


@router.get("", response_model=list[ProviderResponse])
@handle_errors
async def list_providers(
    year: str | None = None,
    user: CurrentUser = Depends(get_current_user),
    provider_service: ProviderService = Depends(get_provider_service),
) -> list[ProviderResponse]:
    providers = await provider_service.list_providers(year)
    return [ProviderResponse(**provider) for provider in providers]


@router.get("/count", response_model=CountResponse)
@handle_errors
async def count_providers(
    year: str | None = None,
    user: CurrentUser = Depends(get_current_user),
    provider_service: ProviderService = Depends(get_provider_service),
) -> CountResponse:
    return CountResponse(count=await provider_service.count_providers(year))


@router.get("/{provider_id}", response_model=ProviderResponse)
@handle_errors
async def get_provider(
    provider_id: str,
    user: CurrentUser = Depends(get_current_user),
    provider_service: ProviderService = Depends(get_provider_service),
) -> ProviderResponse:
    """
    Get provider by ID.

    Raises:
        HTTPException(404): Provider not found
    """
    return ProviderResponse(**await provider_service.get_provider(provider_id))


@router.patch("/{provider_id}", response_model=ProviderResponse)
@handle_errors
async def update_provider(
    provider_id: str,
    request: UpdateProviderRequest,
    user: CurrentUser = Depends(get_current_user),
    provider_service: ProviderService = Depends(get_provider_service),
) -> ProviderResponse:
    """
    Update provider attributes.

    Raises:
        HTTPException(404): Provider not found
    """
    fields = request.model_dump(by_alias=True, exclude_unset=True)
    return ProviderResponse(**await provider_service.update_provider(provider_id, fields))


@router.delete("/{provider_id}", status_code=204)
@handle_errors
async def delete_provider(
    provider_id: str,
    user: CurrentUser = Depends(get_current_user),
    provider_service: ProviderService = Depends(get_provider_service),
) -> None:
    await provider_service.delete_provider(provider_id)


@router.delete("", response_model=DeleteAllProvidersResponse)
@handle_errors
async def delete_all_providers(
    year: str | None = None,
    admin: CurrentUser = Depends(require_admin),
    provider_service: ProviderService = Depends(get_provider_service),
) -> DeleteAllProvidersResponse:
    """Delete every provider, or every provider of one year. Admin only."""
    deleted = await provider_service.delete_all_providers(year, audit_user=admin.username)
    return DeleteAllProvidersResponse(deleted=deleted, year=year)
