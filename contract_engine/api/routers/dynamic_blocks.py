"""
Dynamic block API endpoints.

Routes:
- POST /dynamic-blocks - Create block
- GET /dynamic-blocks - List blocks
- GET /dynamic-blocks/{id} - Get block
- PATCH /dynamic-blocks/{id} - Update block (owner only)
- DELETE /dynamic-blocks/{id} - Delete block

Dependencies: contract_engine.application.services.dynamic_block_service, contract_engine.models
System role: Dynamic block HTTP API
"""

from fastapi import APIRouter, Depends

from contract_engine.api.deps import get_current_user, get_dynamic_block_service
from contract_engine.api.routers.error_handling import handle_errors
from contract_engine.application.services.dynamic_block_service import DynamicBlockService
from contract_engine.models.dynamic_block import (
    CreateDynamicBlockRequest,
    DynamicBlockResponse,
    UpdateDynamicBlockRequest,
)
from contract_engine.models.user import CurrentUser

router = APIRouter(prefix="/dynamic-blocks", tags=["dynamic-blocks"])


@router.post("", response_model=DynamicBlockResponse, status_code=201)
@handle_errors
async def create_block(
    request: CreateDynamicBlockRequest,
    user: CurrentUser = Depends(get_current_user),
    block_service: DynamicBlockService = Depends(get_dynamic_block_service),
) -> DynamicBlockResponse:
    block = await block_service.create_block(user, **request.model_dump(by_alias=True))
    return DynamicBlockResponse(**block)


@router.get("", response_model=list[DynamicBlockResponse])
@handle_errors
async def list_blocks(
    placeholder: str | None = None,
    user: CurrentUser = Depends(get_current_user),
    block_service: DynamicBlockService = Depends(get_dynamic_block_service),
) -> list[DynamicBlockResponse]:
    return [DynamicBlockResponse(**b) for b in await block_service.list_blocks(placeholder)]


@router.get("/{block_id}", response_model=DynamicBlockResponse)
@handle_errors
async def get_block(
    block_id: str,
    user: CurrentUser = Depends(get_current_user),
    block_service: DynamicBlockService = Depends(get_dynamic_block_service),
) -> DynamicBlockResponse:
    return DynamicBlockResponse(**await block_service.get_block(block_id))


@router.patch("/{block_id}", response_model=DynamicBlockResponse)
@handle_errors
async def update_block(
    block_id: str,
    request: UpdateDynamicBlockRequest,
    user: CurrentUser = Depends(get_current_user),
    block_service: DynamicBlockService = Depends(get_dynamic_block_service),
) -> DynamicBlockResponse:
    """
    Update a dynamic block.

    Raises:
        HTTPException(403): Caller does not own the block
        HTTPException(404): Block not found
    """
    fields = request.model_dump(by_alias=True, exclude_unset=True)
    return DynamicBlockResponse(**await block_service.update_block(block_id, user, fields))


@router.delete("/{block_id}", status_code=204)
@handle_errors
async def delete_block(
    block_id: str,
    user: CurrentUser = Depends(get_current_user),
    block_service: DynamicBlockService = Depends(get_dynamic_block_service),
) -> None:
    await block_service.delete_block(block_id)
