"""
Template API endpoints.

Routes:
- POST /templates - Create HTML template
- POST /templates/upload - Create template from a DOCX/HTML file (multipart)
- GET /templates - List templates
- GET /templates/{id} - Get template
- PATCH /templates/{id} - Update template
- DELETE /templates/{id} - Delete template, files and mappings
- POST /templates/{id}/file - Replace template file (multipart)
- GET /templates/{id}/file - Download template file
- GET /templates/{id}/file-url - Presigned template file URL
- GET /templates/{id}/placeholders - List placeholders
- GET /templates/{id}/mappings - List field mappings
- PUT /templates/{id}/mappings - Replace field mappings

Dependencies: contract_engine.application.services.template_service, contract_engine.models
System role: Template management HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from contract_engine.api.deps import get_current_user, get_template_service
from contract_engine.api.routers.error_handling import handle_errors
from contract_engine.application.services.template_service import TemplateService
from contract_engine.core.docx_generator import DOCX_CONTENT_TYPE
from contract_engine.core.template_processor import TemplateType
from contract_engine.models.template import (
    CreateTemplateRequest,
    MappingResponse,
    PlaceholdersResponse,
    SetMappingsRequest,
    TemplateFileResponse,
    TemplateResponse,
    UpdateTemplateRequest,
)
from contract_engine.models.user import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


@router.post("", response_model=TemplateResponse, status_code=201)
@handle_errors
async def create_template(
    request: CreateTemplateRequest,
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> TemplateResponse:
    """
    Create an HTML template.

    Raises:
        HTTPException(400): Invalid template definition
    """
    template = await template_service.create_template(
        name=request.name,
        owner=user.username,
        version=request.version,
        type=request.type,
        contract_year=request.contract_year,
        description=request.description,
        content=request.content,
        clause_ids=request.clause_ids,
    )
    return TemplateResponse(**template)


@router.post("/upload", response_model=TemplateResponse, status_code=201)
@handle_errors
async def upload_template(
    file: UploadFile = File(...),
    name: str = Form(...),
    version: str = Form("1.0.0"),
    type: TemplateType = Form("Schedule A"),
    contract_year: str | None = Form(None),
    description: str | None = Form(None),
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> TemplateResponse:
    """
    Create a template from an uploaded DOCX or HTML file.

    Raises:
        HTTPException(400): Unsupported file or invalid definition
    """
    file_bytes = await file.read()
    logger.info(
        "Template file received",
        extra={"file_name": file.filename, "size": len(file_bytes), "username": user.username},
    )
    template = await template_service.create_template(
        name=name,
        owner=user.username,
        version=version,
        type=type,
        contract_year=contract_year,
        description=description,
        file_bytes=file_bytes,
        file_name=file.filename,
    )
    return TemplateResponse(**template)


@router.get("", response_model=list[TemplateResponse])
@handle_errors
async def list_templates(
    year: str | None = None,
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> list[TemplateResponse]:
    return [TemplateResponse(**t) for t in await template_service.list_templates(year)]


@router.get("/{template_id}", response_model=TemplateResponse)
@handle_errors
async def get_template(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> TemplateResponse:
    return TemplateResponse(**await template_service.get_template(template_id))


@router.patch("/{template_id}", response_model=TemplateResponse)
@handle_errors
async def update_template(
    template_id: str,
    request: UpdateTemplateRequest,
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> TemplateResponse:
    fields = request.model_dump(by_alias=True, exclude_unset=True)
    return TemplateResponse(**await template_service.update_template(template_id, fields))


@router.delete("/{template_id}", status_code=204)
@handle_errors
async def delete_template(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> None:
    await template_service.delete_template(template_id, owner=user.username)


@router.post("/{template_id}/file", response_model=TemplateResponse)
@handle_errors
async def upload_template_file(
    template_id: str,
    file: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> TemplateResponse:
    file_bytes = await file.read()
    template = await template_service.upload_template_file(
        template_id,
        file_bytes,
        file.filename or "template.docx",
        owner=user.username,
    )
    return TemplateResponse(**template)


@router.get("/{template_id}/file")
@handle_errors
async def download_template_file(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> Response:
    """
    Stream a template's stored file.

    Raises:
        HTTPException(404): Template not found
    """
    content, file_name = await template_service.get_template_file(template_id)
    media_type = DOCX_CONTENT_TYPE if file_name.lower().endswith(".docx") else "text/html"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.get("/{template_id}/file-url", response_model=TemplateFileResponse)
@handle_errors
async def get_template_file_url(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> TemplateFileResponse:
    return TemplateFileResponse(**await template_service.get_template_file_url(template_id))


@router.get("/{template_id}/placeholders", response_model=PlaceholdersResponse)
@handle_errors
async def get_placeholders(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> PlaceholdersResponse:
    placeholders = await template_service.get_placeholders(template_id)
    return PlaceholdersResponse(template_id=template_id, placeholders=placeholders)


@router.get("/{template_id}/mappings", response_model=list[MappingResponse])
@handle_errors
async def get_mappings(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> list[MappingResponse]:
    return [MappingResponse(**m) for m in await template_service.get_mappings(template_id)]


@router.put("/{template_id}/mappings", response_model=list[MappingResponse])
@handle_errors
async def set_mappings(
    template_id: str,
    request: SetMappingsRequest,
    user: CurrentUser = Depends(get_current_user),
    template_service: TemplateService = Depends(get_template_service),
) -> list[MappingResponse]:
    """
    Replace a template's field mappings.

    Raises:
        HTTPException(400): A placeholder is mapped twice
        HTTPException(404): Template not found
    """
    mappings = [m.model_dump(by_alias=True) for m in request.mappings]
    created = await template_service.set_mappings(template_id, mappings)
    return [MappingResponse(**m) for m in created]
