"""
Clause API endpoints.

Routes:
- POST /clauses - Create clause
- GET /clauses - List clauses
- GET /clauses/applicable/{provider_id} - Clauses matching a provider
- GET /clauses/{id} - Get clause
- PATCH /clauses/{id} - Update clause
- DELETE /clauses/{id} - Delete clause

Dependencies: contract_engine.application.services.clause_service, contract_engine.models
System role: Clause library HTTP API
"""

from fastapi import APIRouter, Depends

from contract_engine.api.deps import get_clause_service, get_current_user
from contract_engine.api.routers.error_handling import handle_errors
from contract_engine.application.services.clause_service import ClauseService
from contract_engine.models.clause import ClauseResponse, CreateClauseRequest, UpdateClauseRequest
from contract_engine.models.user import CurrentUser

router = APIRouter(prefix="/clauses", tags=["clauses"])


@router.post("", response_model=ClauseResponse, status_code=201)
@handle_errors
async def create_clause(
    request: CreateClauseRequest,
    user: CurrentUser = Depends(get_current_user),
    clause_service: ClauseService = Depends(get_clause_service),
) -> ClauseResponse:
    clause = await clause_service.create_clause(user.username, **request.model_dump(by_alias=True))
    return ClauseResponse(**clause)


@router.get("", response_model=list[ClauseResponse])
@handle_errors
async def list_clauses(
    category: str | None = None,
    user: CurrentUser = Depends(get_current_user),
    clause_service: ClauseService = Depends(get_clause_service),
) -> list[ClauseResponse]:
    return [ClauseResponse(**c) for c in await clause_service.list_clauses(category)]


@router.get("/applicable/{provider_id}", response_model=list[ClauseResponse])
@handle_errors
async def applicable_clauses(
    provider_id: str,
    user: CurrentUser = Depends(get_current_user),
    clause_service: ClauseService = Depends(get_clause_service),
) -> list[ClauseResponse]:
    """
    Clauses whose provider-type filter and conditions match a provider.

    Raises:
        HTTPException(404): Provider not found
    """
    return [ClauseResponse(**c) for c in await clause_service.applicable_clauses(provider_id)]


@router.get("/{clause_id}", response_model=ClauseResponse)
@handle_errors
async def get_clause(
    clause_id: str,
    user: CurrentUser = Depends(get_current_user),
    clause_service: ClauseService = Depends(get_clause_service),
) -> ClauseResponse:
    return ClauseResponse(**await clause_service.get_clause(clause_id))


@router.patch("/{clause_id}", response_model=ClauseResponse)
@handle_errors
async def update_clause(
    clause_id: str,
    request: UpdateClauseRequest,
    user: CurrentUser = Depends(get_current_user),
    clause_service: ClauseService = Depends(get_clause_service),
) -> ClauseResponse:
    fields = request.model_dump(by_alias=True, exclude_unset=True)
    return ClauseResponse(**await clause_service.update_clause(clause_id, fields))


@router.delete("/{clause_id}", status_code=204)
@handle_errors
async def delete_clause(
    clause_id: str,
    user: CurrentUser = Depends(get_current_user),
    clause_service: ClauseService = Depends(get_clause_service),
) -> None:
    await clause_service.delete_clause(clause_id)
